"""
Closed registry of load item variants keyed by transport mode.

`build()` turns a raw request payload into a validated `LoadItemDraft`, with
mode-specific defaults filled in. `update_fields()` validates the narrow set
of descriptive fields that remain writable once an item exists: the `type`
discriminant and the `specifications` payload are fixed at creation.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from app.models.shipment import TransportMode
from app.schemas.load_item import (
    AirSpecifications,
    FCLSpecifications,
    LCLSpecifications,
    LoadItemFields,
    LoadItemSpecifications,
    LoadItemUpdate,
    ROROSpecifications,
)
from app.services.errors import BadRequest

SPECIFICATION_MODELS: dict[TransportMode, type[BaseModel]] = {
    TransportMode.FCL: FCLSpecifications,
    TransportMode.LCL: LCLSpecifications,
    TransportMode.RORO: ROROSpecifications,
    TransportMode.AIR: AirSpecifications,
}

_missing_variants = set(TransportMode) - set(SPECIFICATION_MODELS)
if _missing_variants:
    raise RuntimeError(
        f"No specification model registered for {sorted(m.value for m in _missing_variants)}"
    )

IMMUTABLE_ITEM_FIELDS = frozenset({"type", "specifications"})


@dataclass(frozen=True)
class LoadItemDraft:
    type: TransportMode
    description: str
    dangerous_goods: bool
    special_instructions: str | None
    specifications: LoadItemSpecifications

    def to_record(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "description": self.description,
            "dangerous_goods": self.dangerous_goods,
            "special_instructions": self.special_instructions,
            "specifications": self.specifications.model_dump(),
        }


def _validation_message(exc: ValidationError, prefix: str = "") -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(token) for token in error.get("loc", ()))
        if prefix:
            location = f"{prefix}.{location}" if location else prefix
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid load item payload"


def parse_type(value: Any) -> TransportMode:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise BadRequest(message="Type is required")
    if isinstance(value, TransportMode):
        return value
    try:
        return TransportMode(str(value).strip().upper())
    except ValueError:
        raise BadRequest(
            code="INVALID_ITEM_TYPE",
            message="Invalid type: must be FCL, LCL, RORO, or AIR",
        ) from None


def build_specifications(item_type: TransportMode, raw: Any) -> LoadItemSpecifications:
    if raw is None:
        raise BadRequest(message="Specifications are required")
    if not isinstance(raw, Mapping):
        raise BadRequest(message="Specifications must be an object")
    # Explicit nulls fall back to the variant defaults.
    present = {key: value for key, value in raw.items() if value is not None}

    model = SPECIFICATION_MODELS[item_type]
    try:
        return model.model_validate(present)
    except ValidationError as exc:
        raise BadRequest(
            code="INVALID_SPECIFICATIONS",
            message=_validation_message(exc, prefix="specifications"),
        ) from exc


def build(item_type: Any, raw_fields: Mapping[str, Any]) -> LoadItemDraft:
    mode = parse_type(item_type)
    specifications = build_specifications(mode, raw_fields.get("specifications"))
    try:
        fields = LoadItemFields.model_validate(
            {k: v for k, v in raw_fields.items() if k not in IMMUTABLE_ITEM_FIELDS}
        )
    except ValidationError as exc:
        raise BadRequest(message=_validation_message(exc)) from exc

    return LoadItemDraft(
        type=mode,
        description=fields.description,
        dangerous_goods=fields.dangerous_goods,
        special_instructions=fields.special_instructions,
        specifications=specifications,
    )


def update_fields(raw_fields: Mapping[str, Any]) -> dict[str, Any]:
    locked = sorted(IMMUTABLE_ITEM_FIELDS.intersection(raw_fields))
    if locked:
        raise BadRequest(
            code="IMMUTABLE_FIELD",
            message=f"Load item fields cannot be changed after creation: {', '.join(locked)}",
        )
    try:
        patch = LoadItemUpdate.model_validate(dict(raw_fields)).model_dump(exclude_unset=True)
    except ValidationError as exc:
        raise BadRequest(message=_validation_message(exc)) from exc

    if "description" in patch and patch["description"] is None:
        raise BadRequest(message="description: cannot be empty")
    if "dangerous_goods" in patch and patch["dangerous_goods"] is None:
        patch.pop("dangerous_goods")
    return patch
