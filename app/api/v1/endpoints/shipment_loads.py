from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status

from app.api.deps.request_identity import get_request_identity
from app.api.deps.shipment_service import get_shipment_service, raise_service_failure
from app.schemas.request_identity import RequestIdentity
from app.schemas.shipment_load import ShipmentLoadOut
from app.services.errors import ShipmentServiceError
from app.services.shipment_service import ShipmentService

router = APIRouter()


@router.get("", response_model=list[ShipmentLoadOut])
def list_loads_api(
    shipment_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.list_loads(identity, shipment_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.post("", response_model=ShipmentLoadOut, status_code=status.HTTP_201_CREATED)
def create_load_api(
    shipment_id: int,
    payload: Any = Body(default=None),
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.create_load(identity, shipment_id, payload)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.get("/{load_id}", response_model=ShipmentLoadOut)
def get_load_api(
    shipment_id: int,
    load_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.get_load(identity, shipment_id, load_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.put("/{load_id}", response_model=ShipmentLoadOut)
def update_load_api(
    shipment_id: int,
    load_id: int,
    payload: Any = Body(default=None),
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.update_load(identity, shipment_id, load_id, payload)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.delete("/{load_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_load_api(
    shipment_id: int,
    load_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        service.delete_load(identity, shipment_id, load_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
