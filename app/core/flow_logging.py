import logging

from app.core.config import settings


def _category_enabled(category: str | None) -> bool:
    if not settings.FLOW_LOGS_ENABLED:
        return False
    if category == "shipment":
        return settings.FLOW_LOGS_SHIPMENT_ENABLED
    if category in {"load", "load_item"}:
        return settings.FLOW_LOGS_LOAD_ENABLED
    return True


def flow_info(
    logger: logging.Logger,
    msg: str,
    *args,
    category: str | None = None,
    **kwargs,
) -> None:
    if _category_enabled(category):
        logger.info(msg, *args, **kwargs)
