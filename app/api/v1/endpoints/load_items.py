from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status

from app.api.deps.request_identity import get_request_identity
from app.api.deps.shipment_service import get_shipment_service, raise_service_failure
from app.schemas.load_item import LoadItemOut
from app.schemas.request_identity import RequestIdentity
from app.services.errors import ShipmentServiceError
from app.services.shipment_service import ShipmentService

router = APIRouter()


@router.get("", response_model=list[LoadItemOut])
def list_items_api(
    shipment_id: int,
    load_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.list_items(identity, shipment_id, load_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.post("", response_model=LoadItemOut, status_code=status.HTTP_201_CREATED)
def create_item_api(
    shipment_id: int,
    load_id: int,
    payload: Any = Body(default=None),
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.create_item(identity, shipment_id, load_id, payload)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.get("/{item_id}", response_model=LoadItemOut)
def get_item_api(
    shipment_id: int,
    load_id: int,
    item_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.get_item(identity, shipment_id, load_id, item_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.put("/{item_id}", response_model=LoadItemOut)
def update_item_api(
    shipment_id: int,
    load_id: int,
    item_id: int,
    payload: Any = Body(default=None),
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.update_item(identity, shipment_id, load_id, item_id, payload)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item_api(
    shipment_id: int,
    load_id: int,
    item_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        service.delete_item(identity, shipment_id, load_id, item_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
