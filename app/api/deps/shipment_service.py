from __future__ import annotations

from typing import NoReturn

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.errors import ShipmentServiceError
from app.services.shipment_service import ShipmentService


def get_shipment_service(db: Session = Depends(get_db)) -> ShipmentService:
    return ShipmentService.for_session(db)


def raise_service_failure(exc: ShipmentServiceError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=exc.to_detail()) from exc
