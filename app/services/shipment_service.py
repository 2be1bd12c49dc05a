"""
Shipment / load / load item use cases.

Every operation receives the already-authenticated actor and the path ids,
resolves the ancestor chain from persistence, runs containment and policy
checks, and only then writes. Nested operations re-fetch and re-authorize the
whole chain on every call; no authorization context is cached between calls.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from app.core.flow_logging import flow_info
from app.crud.base import DuplicateError
from app.crud.load_item import LoadItemRepository
from app.crud.shipment import ShipmentRepository
from app.crud.shipment_load import ShipmentLoadRepository
from app.models.shipment import ShipmentStatus
from app.schemas.request_identity import RequestIdentity
from app.schemas.shipment import (
    ForwarderAssignment,
    ShipmentCreate,
    ShipmentStatusUpdate,
    ShipmentUpdate,
)
from app.schemas.shipment_load import ShipmentLoadCreate, ShipmentLoadUpdate
from app.services import load_item_registry, shipment_lifecycle, shipment_policy
from app.services.containment import (
    verify_item_belongs_to_load,
    verify_load_belongs_to_shipment,
)
from app.services.errors import BadRequest, Conflict, NotFound, Unauthorized
from app.services.numbering import NumberingService

logger = logging.getLogger(__name__)


class EntityStore(Protocol):
    """Persistence collaborator for one entity type."""

    def find(self, **filters: Any) -> list[Any]: ...

    def count(self, **filters: Any) -> int: ...

    def find_by_id(self, row_id: Any) -> Any | None: ...

    def create(self, parent_id: Any, data: dict[str, Any]) -> Any: ...

    def update(self, row_id: Any, patch: dict[str, Any]) -> Any | None: ...

    def delete(self, row_id: Any) -> bool: ...


def _require_actor(actor: RequestIdentity | None) -> RequestIdentity:
    if actor is None:
        raise Unauthorized(message="User not authenticated")
    return actor


def _validate(schema: type[BaseModel], payload: Any) -> BaseModel:
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise BadRequest(message="Request body must be a JSON object")
    try:
        return schema.model_validate(dict(payload))
    except ValidationError as exc:
        message = "; ".join(
            f"{'.'.join(str(t) for t in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        raise BadRequest(message=message or "Invalid request payload") from exc


# Written only by the lifecycle operations, assign-forwarder, or at creation.
_SHIPMENT_LOCKED_FIELDS = frozenset(
    {
        "status",
        "forwarder_id",
        "forwarderId",
        "shipper_id",
        "shipperId",
        "shipment_number",
        "shipmentNumber",
    }
)


def _reject_nulls(patch: dict[str, Any], required: tuple[str, ...]) -> None:
    for field_name in required:
        if field_name in patch and patch[field_name] is None:
            raise BadRequest(message=f"{field_name}: cannot be empty")


class ShipmentService:
    def __init__(
        self,
        shipments: EntityStore,
        loads: EntityStore,
        items: EntityStore,
    ):
        self.shipments = shipments
        self.loads = loads
        self.items = items

    @classmethod
    def for_session(cls, db: Session) -> "ShipmentService":
        return cls(
            ShipmentRepository(db),
            ShipmentLoadRepository(db),
            LoadItemRepository(db),
        )

    # ------------------------------------------------------------------
    # Ancestor chain
    # ------------------------------------------------------------------

    def _fetch_shipment(self, shipment_id: Any):
        shipment = self.shipments.find_by_id(shipment_id)
        if shipment is None:
            raise NotFound(message=f"Shipment with ID {shipment_id} not found")
        return shipment

    def _visible_shipment(self, actor: RequestIdentity, shipment_id: Any):
        shipment = self._fetch_shipment(shipment_id)
        shipment_policy.require_view(actor.role, actor.actor_id, shipment)
        return shipment

    def _load_editable_shipment(self, actor: RequestIdentity, shipment_id: Any):
        shipment = self._fetch_shipment(shipment_id)
        shipment_policy.require_manage_loads(actor.role, actor.actor_id, shipment)
        return shipment

    def _contained_load(self, shipment, load_id: Any):
        load = self.loads.find_by_id(load_id)
        if load is None:
            raise NotFound(message=f"Shipment load with ID {load_id} not found")
        verify_load_belongs_to_shipment(load, shipment.id)
        return load

    def _contained_item(self, load, item_id: Any):
        item = self.items.find_by_id(item_id)
        if item is None:
            raise NotFound(message=f"Load item with ID {item_id} not found")
        verify_item_belongs_to_load(item, load.id)
        return item

    # ------------------------------------------------------------------
    # Shipments
    # ------------------------------------------------------------------

    def list_shipments(self, actor: RequestIdentity | None) -> list[Any]:
        actor = _require_actor(actor)
        scope = shipment_policy.list_scope(actor.role, actor.actor_id)
        if scope is None:
            return []
        return self.shipments.find(**scope)

    def get_shipment(self, actor: RequestIdentity | None, shipment_id: Any):
        actor = _require_actor(actor)
        return self._visible_shipment(actor, shipment_id)

    def create_shipment(self, actor: RequestIdentity | None, payload: Any):
        actor = _require_actor(actor)
        shipment_policy.require_create_shipment(actor.role, actor.actor_id)
        data = _validate(ShipmentCreate, payload).model_dump()

        base_sequence = self.shipments.count()
        for attempt in range(NumberingService.max_attempts()):
            number = NumberingService.shipment_number(base_sequence + attempt + 1)
            try:
                shipment = self.shipments.create(
                    actor.actor_id,
                    {
                        **data,
                        "shipment_number": number,
                        "status": shipment_lifecycle.INITIAL_STATUS.value,
                        "forwarder_id": None,
                        "created_by": actor.audit_tag,
                        "last_changed_by": actor.audit_tag,
                    },
                )
            except DuplicateError:
                logger.warning("shipment_number_taken number=%s attempt=%s", number, attempt + 1)
                continue
            flow_info(
                logger,
                "shipment_created id=%s number=%s shipper=%s",
                shipment.id,
                shipment.shipment_number,
                actor.actor_id,
                category="shipment",
            )
            return shipment
        raise Conflict(message="Could not allocate a unique shipment number")

    def update_shipment(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        payload: Any,
    ):
        actor = _require_actor(actor)
        if isinstance(payload, Mapping):
            locked = sorted(_SHIPMENT_LOCKED_FIELDS.intersection(payload))
            if locked:
                raise BadRequest(
                    code="IMMUTABLE_FIELD",
                    message=(
                        f"Fields cannot be set through a general update: {', '.join(locked)}"
                    ),
                )
        patch = _validate(ShipmentUpdate, payload).model_dump(exclude_unset=True)
        _reject_nulls(patch, ("origin", "destination"))

        shipment = self._fetch_shipment(shipment_id)
        shipment_policy.require_update_shipment(actor.role, actor.actor_id, shipment)
        if not patch:
            return shipment
        patch["last_changed_by"] = actor.audit_tag
        return self._apply_shipment_patch(shipment, patch)

    def _apply_shipment_patch(self, shipment, patch: dict[str, Any]):
        updated = self.shipments.update(shipment.id, patch)
        if updated is None:
            raise NotFound(message=f"Shipment with ID {shipment.id} not found")
        return updated

    def delete_shipment(self, actor: RequestIdentity | None, shipment_id: Any) -> None:
        actor = _require_actor(actor)
        shipment = self._fetch_shipment(shipment_id)
        shipment_policy.require_delete_shipment(actor.role, actor.actor_id, shipment)
        number = shipment.shipment_number
        if not self.shipments.delete(shipment.id):
            raise NotFound(message=f"Shipment with ID {shipment_id} not found")
        flow_info(
            logger,
            "shipment_deleted id=%s number=%s by=%s",
            shipment_id,
            number,
            actor.audit_tag,
            category="shipment",
        )

    def submit_shipment(self, actor: RequestIdentity | None, shipment_id: Any):
        actor = _require_actor(actor)
        shipment = self._fetch_shipment(shipment_id)
        shipment_policy.require_submit(actor.role, actor.actor_id, shipment)
        updated = self._apply_shipment_patch(
            shipment,
            {"status": ShipmentStatus.SUBMITTED.value, "last_changed_by": actor.audit_tag},
        )
        flow_info(
            logger,
            "shipment_submitted id=%s by=%s",
            updated.id,
            actor.audit_tag,
            category="shipment",
        )
        return updated

    def assign_forwarder(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        payload: Any,
    ):
        actor = _require_actor(actor)
        shipment_policy.require_assign_forwarder(actor.role, actor.actor_id)
        assignment = _validate(ForwarderAssignment, payload)
        shipment = self._fetch_shipment(shipment_id)

        patch: dict[str, Any] = {
            "forwarder_id": assignment.forwarder_id,
            "last_changed_by": actor.audit_tag,
        }
        # Assignment advances a draft to submitted; later states are kept.
        if shipment_lifecycle.parse_status(shipment.status) == ShipmentStatus.DRAFT:
            patch["status"] = ShipmentStatus.SUBMITTED.value
        updated = self._apply_shipment_patch(shipment, patch)
        flow_info(
            logger,
            "shipment_forwarder_assigned id=%s forwarder=%s status=%s",
            updated.id,
            assignment.forwarder_id,
            updated.status,
            category="shipment",
        )
        return updated

    def update_status(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        payload: Any,
    ):
        actor = _require_actor(actor)
        if not isinstance(payload, Mapping) or not payload.get("status"):
            raise BadRequest(message="Status is required")
        requested = _validate(ShipmentStatusUpdate, payload).status
        target = shipment_lifecycle.parse_status(requested)
        if target is None:
            raise BadRequest(code="INVALID_STATUS", message="Invalid status value")

        shipment = self._fetch_shipment(shipment_id)
        previous = shipment.status
        shipment_policy.require_status_change(actor.role, actor.actor_id, shipment, target)
        updated = self._apply_shipment_patch(
            shipment,
            {"status": target.value, "last_changed_by": actor.audit_tag},
        )
        flow_info(
            logger,
            "shipment_status_changed id=%s from=%s to=%s by=%s",
            updated.id,
            previous,
            target.value,
            actor.audit_tag,
            category="shipment",
        )
        return updated

    # ------------------------------------------------------------------
    # Loads
    # ------------------------------------------------------------------

    def list_loads(self, actor: RequestIdentity | None, shipment_id: Any) -> list[Any]:
        actor = _require_actor(actor)
        shipment = self._visible_shipment(actor, shipment_id)
        return self.loads.find(shipment_id=shipment.id)

    def get_load(self, actor: RequestIdentity | None, shipment_id: Any, load_id: Any):
        actor = _require_actor(actor)
        shipment = self._visible_shipment(actor, shipment_id)
        return self._contained_load(shipment, load_id)

    def create_load(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        payload: Any,
    ):
        actor = _require_actor(actor)
        load_in = _validate(ShipmentLoadCreate, payload)
        shipment = self._load_editable_shipment(actor, shipment_id)

        data = load_in.model_dump(exclude_none=True)
        data["transport_mode"] = load_in.transport_mode.value
        data.setdefault("status", "pending")
        data["pickup_address"] = load_in.pickup_address or shipment.origin
        data["delivery_address"] = load_in.delivery_address or shipment.destination
        data["created_by"] = actor.audit_tag
        data["last_changed_by"] = actor.audit_tag

        # count + 1 can collide after deletes or under concurrent creates; the
        # unique constraint on load_number rejects it and the next number is tried.
        base_sequence = self.loads.count(shipment_id=shipment.id)
        for attempt in range(NumberingService.max_attempts()):
            load_number = NumberingService.load_number(
                shipment.shipment_number, base_sequence + attempt + 1
            )
            try:
                load = self.loads.create(shipment.id, {**data, "load_number": load_number})
            except DuplicateError:
                logger.warning(
                    "load_number_taken shipment=%s number=%s attempt=%s",
                    shipment.id,
                    load_number,
                    attempt + 1,
                )
                continue
            flow_info(
                logger,
                "load_created shipment=%s load=%s number=%s mode=%s",
                shipment.id,
                load.id,
                load.load_number,
                load.transport_mode,
                category="load",
            )
            return load
        raise Conflict(message="Could not allocate a unique load number")

    def update_load(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        load_id: Any,
        payload: Any,
    ):
        actor = _require_actor(actor)
        patch = _validate(ShipmentLoadUpdate, payload).model_dump(exclude_unset=True)
        _reject_nulls(patch, ("reference", "status"))

        shipment = self._load_editable_shipment(actor, shipment_id)
        load = self._contained_load(shipment, load_id)

        requested_mode = patch.pop("transport_mode", None)
        if requested_mode is not None and requested_mode.value != load.transport_mode:
            raise BadRequest(
                code="IMMUTABLE_FIELD",
                message="transport_mode cannot be changed once a load exists",
            )
        if not patch:
            return load
        patch["last_changed_by"] = actor.audit_tag
        updated = self.loads.update(load.id, patch)
        if updated is None:
            raise NotFound(message=f"Shipment load with ID {load_id} not found")
        return updated

    def delete_load(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        load_id: Any,
    ) -> None:
        actor = _require_actor(actor)
        shipment = self._load_editable_shipment(actor, shipment_id)
        load = self._contained_load(shipment, load_id)
        if not self.loads.delete(load.id):
            raise NotFound(message=f"Shipment load with ID {load_id} not found")
        flow_info(
            logger,
            "load_deleted shipment=%s load=%s by=%s",
            shipment.id,
            load_id,
            actor.audit_tag,
            category="load",
        )

    # ------------------------------------------------------------------
    # Load items
    # ------------------------------------------------------------------

    def list_items(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        load_id: Any,
    ) -> list[Any]:
        actor = _require_actor(actor)
        shipment = self._visible_shipment(actor, shipment_id)
        load = self._contained_load(shipment, load_id)
        return self.items.find(shipment_load_id=load.id)

    def get_item(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        load_id: Any,
        item_id: Any,
    ):
        actor = _require_actor(actor)
        shipment = self._visible_shipment(actor, shipment_id)
        load = self._contained_load(shipment, load_id)
        return self._contained_item(load, item_id)

    def create_item(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        load_id: Any,
        payload: Any,
    ):
        actor = _require_actor(actor)
        if not isinstance(payload, Mapping):
            raise BadRequest(message="Request body must be a JSON object")
        draft = load_item_registry.build(payload.get("type"), payload)

        shipment = self._load_editable_shipment(actor, shipment_id)
        load = self._contained_load(shipment, load_id)
        if draft.type.value != load.transport_mode:
            raise BadRequest(
                code="ITEM_TYPE_MISMATCH",
                message=(
                    f"Item type {draft.type.value} does not match "
                    f"load transport mode {load.transport_mode}"
                ),
            )

        item = self.items.create(
            load.id,
            {
                **draft.to_record(),
                "created_by": actor.audit_tag,
                "last_changed_by": actor.audit_tag,
            },
        )
        flow_info(
            logger,
            "load_item_created load=%s item=%s type=%s dangerous=%s",
            load.id,
            item.id,
            item.type,
            item.dangerous_goods,
            category="load_item",
        )
        return item

    def update_item(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        load_id: Any,
        item_id: Any,
        payload: Any,
    ):
        actor = _require_actor(actor)
        if not isinstance(payload, Mapping):
            raise BadRequest(message="Request body must be a JSON object")
        patch = load_item_registry.update_fields(payload)

        shipment = self._load_editable_shipment(actor, shipment_id)
        load = self._contained_load(shipment, load_id)
        item = self._contained_item(load, item_id)
        if not patch:
            return item
        patch["last_changed_by"] = actor.audit_tag
        updated = self.items.update(item.id, patch)
        if updated is None:
            raise NotFound(message=f"Load item with ID {item_id} not found")
        return updated

    def delete_item(
        self,
        actor: RequestIdentity | None,
        shipment_id: Any,
        load_id: Any,
        item_id: Any,
    ) -> None:
        actor = _require_actor(actor)
        shipment = self._load_editable_shipment(actor, shipment_id)
        load = self._contained_load(shipment, load_id)
        item = self._contained_item(load, item_id)
        if not self.items.delete(item.id):
            raise NotFound(message=f"Load item with ID {item_id} not found")
        flow_info(
            logger,
            "load_item_deleted load=%s item=%s by=%s",
            load.id,
            item_id,
            actor.audit_tag,
            category="load_item",
        )
