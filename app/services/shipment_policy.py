"""
Role/status authorization rules for shipments and their loads and items.

Every `can_*` function is a pure decision over (role, actor id, shipment);
the `require_*` variants raise `Forbidden` so callers can chain them ahead of
any persistence write. `shipment` is anything exposing `shipper_id`,
`forwarder_id` and `status` (the ORM row in practice).
"""
from __future__ import annotations

import logging
from typing import Any

from app.models.shipment import ShipmentStatus
from app.schemas.request_identity import ActorRole
from app.services import shipment_lifecycle
from app.services.errors import Forbidden

logger = logging.getLogger(__name__)

SHIPMENT_CREATOR_ROLES = frozenset({ActorRole.SHIPPER, ActorRole.ADMIN})
LOAD_EDITOR_ROLES = frozenset({ActorRole.SHIPPER, ActorRole.FORWARDER, ActorRole.ADMIN})


def _role(value: ActorRole | str | None) -> ActorRole | None:
    if isinstance(value, ActorRole):
        return value
    try:
        return ActorRole(str(value or "").strip().lower())
    except ValueError:
        return None


def _same_actor(owner_id: Any, actor_id: Any) -> bool:
    if owner_id is None or actor_id is None:
        return False
    return str(owner_id) == str(actor_id)


def is_owner(actor_id: Any, shipment) -> bool:
    return _same_actor(shipment.shipper_id, actor_id)


def is_assignee(actor_id: Any, shipment) -> bool:
    return _same_actor(shipment.forwarder_id, actor_id)


def _is_draft(shipment) -> bool:
    return shipment_lifecycle.parse_status(shipment.status) == ShipmentStatus.DRAFT


def can_view(role: ActorRole | str, actor_id: Any, shipment) -> bool:
    role = _role(role)
    if role == ActorRole.ADMIN:
        return True
    if role == ActorRole.SHIPPER:
        return is_owner(actor_id, shipment)
    if role == ActorRole.FORWARDER:
        return is_assignee(actor_id, shipment)
    return False


def can_create_shipment(role: ActorRole | str) -> bool:
    return _role(role) in SHIPMENT_CREATOR_ROLES


def can_update_shipment(role: ActorRole | str, actor_id: Any, shipment) -> bool:
    role = _role(role)
    if role == ActorRole.ADMIN:
        return True
    if role == ActorRole.SHIPPER:
        return is_owner(actor_id, shipment) and _is_draft(shipment)
    if role == ActorRole.FORWARDER:
        # No status restriction on the general-update path.
        return is_assignee(actor_id, shipment)
    return False


def can_delete_shipment(role: ActorRole | str, actor_id: Any, shipment) -> bool:
    role = _role(role)
    if role == ActorRole.ADMIN:
        allowed = True
    elif role == ActorRole.SHIPPER:
        allowed = is_owner(actor_id, shipment)
    else:
        allowed = False
    # Draft-only applies to admins as well.
    return allowed and shipment_lifecycle.allows_deletion(shipment.status)


def can_assign_forwarder(role: ActorRole | str) -> bool:
    return _role(role) == ActorRole.ADMIN


def can_submit(role: ActorRole | str, actor_id: Any, shipment) -> bool:
    role = _role(role)
    if role == ActorRole.ADMIN:
        allowed = True
    elif role == ActorRole.SHIPPER:
        allowed = is_owner(actor_id, shipment)
    else:
        allowed = False
    return allowed and _is_draft(shipment)


def role_may_change_status(
    role: ActorRole | str,
    actor_id: Any,
    shipment,
    target: ShipmentStatus | str,
) -> bool:
    """Role half of a status change; the state table is checked separately."""
    role = _role(role)
    current = shipment_lifecycle.parse_status(shipment.status)
    target = shipment_lifecycle.parse_status(target)
    if role == ActorRole.ADMIN:
        return True
    if role == ActorRole.SHIPPER:
        return (
            is_owner(actor_id, shipment)
            and current == ShipmentStatus.DRAFT
            and target == ShipmentStatus.SUBMITTED
        )
    if role == ActorRole.FORWARDER:
        if not is_assignee(actor_id, shipment):
            return False
        if current == ShipmentStatus.DRAFT:
            return False
        # Delivered and cancelled shipments are closed to forwarders.
        if shipment_lifecycle.is_terminal(current):
            return False
        return True
    return False


def can_manage_loads(role: ActorRole | str, actor_id: Any, shipment) -> bool:
    """Loads and items: shipment visibility plus membership in the editor role set."""
    return can_view(role, actor_id, shipment) and _role(role) in LOAD_EDITOR_ROLES


def list_scope(role: ActorRole | str, actor_id: Any) -> dict[str, Any] | None:
    """
    Persistence filter for list-for-role. `{}` means unrestricted; `None`
    means the role sees nothing.
    """
    role = _role(role)
    if role == ActorRole.ADMIN:
        return {}
    if role == ActorRole.SHIPPER:
        return {"shipper_id": actor_id}
    if role == ActorRole.FORWARDER:
        return {"forwarder_id": actor_id}
    return None


def _deny(action: str, role: Any, actor_id: Any, shipment, message: str) -> Forbidden:
    logger.warning(
        "shipment_policy_denied action=%s role=%s actor=%s shipment=%s status=%s",
        action,
        getattr(_role(role), "value", role),
        actor_id,
        getattr(shipment, "id", "-"),
        getattr(shipment, "status", "-"),
    )
    return Forbidden(message=message)


def require_view(role: ActorRole | str, actor_id: Any, shipment) -> None:
    if not can_view(role, actor_id, shipment):
        raise _deny(
            "view", role, actor_id, shipment,
            "You do not have permission to view this shipment",
        )


def require_create_shipment(role: ActorRole | str, actor_id: Any) -> None:
    if not can_create_shipment(role):
        raise _deny(
            "create", role, actor_id, None,
            "Only shippers and admins can create shipments",
        )


def require_update_shipment(role: ActorRole | str, actor_id: Any, shipment) -> None:
    if can_update_shipment(role, actor_id, shipment):
        return
    if _role(role) == ActorRole.SHIPPER and is_owner(actor_id, shipment):
        message = "Shippers can only update draft shipments"
    else:
        message = "You do not have permission to update this shipment"
    raise _deny("update", role, actor_id, shipment, message)


def require_delete_shipment(role: ActorRole | str, actor_id: Any, shipment) -> None:
    if can_delete_shipment(role, actor_id, shipment):
        return
    role_ok = _role(role) == ActorRole.ADMIN or (
        _role(role) == ActorRole.SHIPPER and is_owner(actor_id, shipment)
    )
    if role_ok:
        message = "Only draft shipments can be deleted"
    else:
        message = "You do not have permission to delete this shipment"
    raise _deny("delete", role, actor_id, shipment, message)


def require_assign_forwarder(role: ActorRole | str, actor_id: Any, shipment=None) -> None:
    if not can_assign_forwarder(role):
        raise _deny(
            "assign_forwarder", role, actor_id, shipment,
            "Only admins can assign forwarders",
        )


def require_submit(role: ActorRole | str, actor_id: Any, shipment) -> None:
    if can_submit(role, actor_id, shipment):
        return
    role_ok = _role(role) == ActorRole.ADMIN or (
        _role(role) == ActorRole.SHIPPER and is_owner(actor_id, shipment)
    )
    if role_ok:
        message = "Only draft shipments can be submitted"
    else:
        message = "You do not have permission to submit this shipment"
    raise _deny("submit", role, actor_id, shipment, message)


def require_status_change(
    role: ActorRole | str,
    actor_id: Any,
    shipment,
    target: ShipmentStatus | str,
) -> None:
    """State table first, then the role rules. Both deny with `Forbidden`."""
    if not shipment_lifecycle.can_transition(shipment.status, target):
        logger.warning(
            "shipment_transition_rejected shipment=%s from=%s to=%s allowed=%s",
            getattr(shipment, "id", "-"),
            shipment.status,
            getattr(target, "value", target),
            shipment_lifecycle.allowed_targets(shipment.status),
        )
        raise Forbidden(
            code="TRANSITION_NOT_ALLOWED",
            message=(
                f"Shipment cannot move from {shipment.status} "
                f"to {getattr(target, 'value', target)}"
            ),
        )
    if not role_may_change_status(role, actor_id, shipment, target):
        raise _deny(
            "update_status", role, actor_id, shipment,
            "You do not have permission to change this shipment's status",
        )


def require_manage_loads(role: ActorRole | str, actor_id: Any, shipment) -> None:
    if can_manage_loads(role, actor_id, shipment):
        return
    require_view(role, actor_id, shipment)
    raise _deny(
        "manage_loads", role, actor_id, shipment,
        "You do not have permission to perform this action",
    )
