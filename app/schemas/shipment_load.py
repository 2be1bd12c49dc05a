from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.models.shipment import TransportMode

from .base import BaseSchema


class _LoadFields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    status: Optional[str] = Field(default=None, min_length=1, max_length=30)
    container_number: Optional[str] = Field(
        default=None,
        max_length=20,
        validation_alias=AliasChoices("container_number", "containerNumber"),
    )
    container_size: Optional[str] = Field(
        default=None,
        max_length=10,
        validation_alias=AliasChoices("container_size", "containerSize"),
    )
    container_type: Optional[str] = Field(
        default=None,
        max_length=50,
        validation_alias=AliasChoices("container_type", "containerType"),
    )
    weight: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    pickup_address: Optional[str] = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("pickup_address", "pickupAddress"),
    )
    delivery_address: Optional[str] = Field(
        default=None,
        max_length=255,
        validation_alias=AliasChoices("delivery_address", "deliveryAddress"),
    )
    pickup_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("pickup_date", "pickupDate"),
    )
    delivery_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("delivery_date", "deliveryDate"),
    )


class ShipmentLoadCreate(_LoadFields):
    reference: str = Field(min_length=1, max_length=100)
    transport_mode: TransportMode = Field(
        default=TransportMode.FCL,
        validation_alias=AliasChoices("transport_mode", "transportMode"),
    )


class ShipmentLoadUpdate(_LoadFields):
    reference: Optional[str] = Field(default=None, min_length=1, max_length=100)
    # Accepted only so a changed value can be rejected explicitly.
    transport_mode: Optional[TransportMode] = Field(
        default=None,
        validation_alias=AliasChoices("transport_mode", "transportMode"),
    )


class ShipmentLoadOut(BaseSchema):
    id: int
    shipment_id: int
    load_number: str
    reference: str
    transport_mode: str
    status: str
    container_number: Optional[str] = None
    container_size: Optional[str] = None
    container_type: Optional[str] = None
    weight: Optional[float] = None
    description: Optional[str] = None
    pickup_address: Optional[str] = None
    delivery_address: Optional[str] = None
    pickup_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
