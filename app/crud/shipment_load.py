from __future__ import annotations

from app.crud.base import SqlAlchemyRepository
from app.models.shipment import ShipmentLoad


class ShipmentLoadRepository(SqlAlchemyRepository[ShipmentLoad]):
    model = ShipmentLoad
    parent_field = "shipment_id"
