from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .base import BaseSchema


class ShipmentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    origin: str = Field(min_length=1, max_length=255)
    destination: str = Field(min_length=1, max_length=255)
    estimated_departure: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("estimated_departure", "estimatedDeparture"),
    )
    estimated_arrival: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("estimated_arrival", "estimatedArrival"),
    )
    notes: Optional[str] = None


class ShipmentUpdate(BaseModel):
    """
    General-field update. `status`, `forwarder_id`, `shipper_id` and
    `shipment_number` are not accepted here: status moves only through the
    lifecycle operations and the other three are fixed or admin-assigned.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    origin: Optional[str] = Field(default=None, min_length=1, max_length=255)
    destination: Optional[str] = Field(default=None, min_length=1, max_length=255)
    estimated_departure: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("estimated_departure", "estimatedDeparture"),
    )
    estimated_arrival: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("estimated_arrival", "estimatedArrival"),
    )
    actual_departure: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("actual_departure", "actualDeparture"),
    )
    actual_arrival: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("actual_arrival", "actualArrival"),
    )
    notes: Optional[str] = None


class ShipmentStatusUpdate(BaseModel):
    status: str


class ForwarderAssignment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    forwarder_id: int = Field(
        ge=1, validation_alias=AliasChoices("forwarder_id", "forwarderId")
    )


class ShipmentOut(BaseSchema):
    id: int
    shipment_number: str
    origin: str
    destination: str
    status: str
    shipper_id: int
    forwarder_id: Optional[int] = None
    estimated_departure: Optional[datetime] = None
    estimated_arrival: Optional[datetime] = None
    actual_departure: Optional[datetime] = None
    actual_arrival: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
