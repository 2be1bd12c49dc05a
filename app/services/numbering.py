from __future__ import annotations

import time

from app.core.config import settings


class NumberingService:
    @staticmethod
    def shipment_number(sequence: int, *, now_ms: int | None = None) -> str:
        """
        Human-readable shipment number, e.g. SHP-483920-0007: the last six
        digits of the creation time in ms and the running shipment count.
        """
        stamp = str(now_ms if now_ms is not None else int(time.time() * 1000))[-6:]
        return f"{settings.SHIPMENT_NUMBER_PREFIX}-{stamp}-{str(sequence).zfill(4)}"

    @staticmethod
    def load_number(shipment_number: str, sequence: int) -> str:
        return f"{shipment_number}-L{str(sequence).zfill(2)}"

    @staticmethod
    def max_attempts() -> int:
        return max(1, int(settings.LOAD_NUMBER_MAX_ATTEMPTS))
