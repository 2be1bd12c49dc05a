from __future__ import annotations

from app.crud.base import SqlAlchemyRepository
from app.models.shipment import Shipment


class ShipmentRepository(SqlAlchemyRepository[Shipment]):
    model = Shipment
    # The owning shipper is the "parent" a shipment is created under.
    parent_field = "shipper_id"
