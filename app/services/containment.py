from __future__ import annotations

import logging
from typing import Any

from app.services.errors import NotFound

logger = logging.getLogger(__name__)


def _same_id(stored: Any, claimed: Any) -> bool:
    if stored is None or claimed is None:
        return False
    return str(stored) == str(claimed)


def verify_load_belongs_to_shipment(load, shipment_id: Any) -> None:
    """
    Ids are global, so a real load can be addressed under the wrong shipment
    path. A mismatch is reported as not-found to avoid confirming the load
    exists elsewhere.
    """
    if not _same_id(load.shipment_id, shipment_id):
        logger.warning(
            "containment_mismatch entity=load id=%s stored_parent=%s claimed_parent=%s",
            load.id,
            load.shipment_id,
            shipment_id,
        )
        raise NotFound(message=f"Shipment load with ID {load.id} not found")


def verify_item_belongs_to_load(item, load_id: Any) -> None:
    if not _same_id(item.shipment_load_id, load_id):
        logger.warning(
            "containment_mismatch entity=load_item id=%s stored_parent=%s claimed_parent=%s",
            item.id,
            item.shipment_load_id,
            load_id,
        )
        raise NotFound(message=f"Load item with ID {item.id} not found")
