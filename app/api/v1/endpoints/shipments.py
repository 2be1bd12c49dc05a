from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status

from app.api.deps.request_identity import get_request_identity
from app.api.deps.shipment_service import get_shipment_service, raise_service_failure
from app.schemas.request_identity import RequestIdentity
from app.schemas.shipment import ShipmentOut
from app.services.errors import ShipmentServiceError
from app.services.shipment_service import ShipmentService

router = APIRouter()


@router.get("", response_model=list[ShipmentOut])
def list_shipments_api(
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.list_shipments(identity)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.post("", response_model=ShipmentOut, status_code=status.HTTP_201_CREATED)
def create_shipment_api(
    payload: Any = Body(default=None),
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.create_shipment(identity, payload)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.get("/{shipment_id}", response_model=ShipmentOut)
def get_shipment_api(
    shipment_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.get_shipment(identity, shipment_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.put("/{shipment_id}", response_model=ShipmentOut)
def update_shipment_api(
    shipment_id: int,
    payload: Any = Body(default=None),
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.update_shipment(identity, shipment_id, payload)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.delete("/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shipment_api(
    shipment_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        service.delete_shipment(identity, shipment_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{shipment_id}/submit", response_model=ShipmentOut)
def submit_shipment_api(
    shipment_id: int,
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.submit_shipment(identity, shipment_id)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.put("/{shipment_id}/assign-forwarder", response_model=ShipmentOut)
def assign_forwarder_api(
    shipment_id: int,
    payload: Any = Body(default=None),
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.assign_forwarder(identity, shipment_id, payload)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)


@router.put("/{shipment_id}/status", response_model=ShipmentOut)
def update_shipment_status_api(
    shipment_id: int,
    payload: Any = Body(default=None),
    identity: RequestIdentity = Depends(get_request_identity),
    service: ShipmentService = Depends(get_shipment_service),
):
    try:
        return service.update_status(identity, shipment_id, payload)
    except ShipmentServiceError as exc:
        raise_service_failure(exc)
