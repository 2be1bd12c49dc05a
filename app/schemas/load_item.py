from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .base import BaseSchema

ContainerSize = Literal["20ft", "40ft", "45ft"]


class _Specifications(BaseModel):
    # Only the keys of the variant are accepted; camelCase keys sent by the
    # web client are read through the aliases.
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FCLSpecifications(_Specifications):
    container_size: ContainerSize = Field(
        default="40ft",
        validation_alias=AliasChoices("container_size", "containerSize"),
    )
    container_type: str = Field(
        default="Standard",
        min_length=1,
        validation_alias=AliasChoices("container_type", "containerType"),
    )


class LCLSpecifications(_Specifications):
    weight: float = Field(default=0, ge=0)
    cbm: float = Field(default=0, ge=0, validation_alias=AliasChoices("cbm", "volume"))


class ROROSpecifications(_Specifications):
    quantity: float = Field(default=1, ge=0)
    unit_type: str = Field(
        default="Vehicle",
        min_length=1,
        validation_alias=AliasChoices("unit_type", "unitType"),
    )


class AirSpecifications(_Specifications):
    weight: float = Field(default=0, ge=0)
    cbm: float = Field(default=0, ge=0, validation_alias=AliasChoices("cbm", "volume"))


LoadItemSpecifications = (
    FCLSpecifications | LCLSpecifications | ROROSpecifications | AirSpecifications
)


class LoadItemFields(BaseModel):
    """Descriptive fields shared by every load item variant."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    description: str = Field(min_length=1)
    dangerous_goods: bool = Field(
        default=False,
        validation_alias=AliasChoices("dangerous_goods", "dangerousGoods", "hazardous"),
    )
    special_instructions: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("special_instructions", "specialInstructions"),
    )


class LoadItemUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    description: Optional[str] = Field(default=None, min_length=1)
    dangerous_goods: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("dangerous_goods", "dangerousGoods", "hazardous"),
    )
    special_instructions: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("special_instructions", "specialInstructions"),
    )


class LoadItemOut(BaseSchema):
    id: int
    shipment_load_id: int
    type: str
    description: str
    dangerous_goods: bool
    special_instructions: Optional[str] = None
    specifications: dict[str, Any]
    created_at: datetime
    updated_at: datetime
