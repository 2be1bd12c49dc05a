from fastapi import APIRouter

from app.api.v1.endpoints import load_items, shipment_loads, shipments

api_router = APIRouter()

api_router.include_router(shipments.router, prefix="/shipments", tags=["Shipments"])
api_router.include_router(
    shipment_loads.router,
    prefix="/shipments/{shipment_id}/loads",
    tags=["Shipment Loads"],
)
api_router.include_router(
    load_items.router,
    prefix="/shipments/{shipment_id}/loads/{load_id}/items",
    tags=["Load Items"],
)
