from __future__ import annotations

from app.crud.base import SqlAlchemyRepository
from app.models.shipment import LoadItem


class LoadItemRepository(SqlAlchemyRepository[LoadItem]):
    model = LoadItem
    parent_field = "shipment_load_id"
