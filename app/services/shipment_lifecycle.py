from __future__ import annotations

from app.models.shipment import ShipmentStatus

INITIAL_STATUS = ShipmentStatus.DRAFT

TERMINAL_STATUSES = frozenset({ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED})

# Forward progression through the happy path.
_PROGRESSION = (
    ShipmentStatus.DRAFT,
    ShipmentStatus.SUBMITTED,
    ShipmentStatus.CONFIRMED,
    ShipmentStatus.IN_PROGRESS,
    ShipmentStatus.DELIVERED,
)


def _build_transition_table() -> dict[ShipmentStatus, frozenset[ShipmentStatus]]:
    table: dict[ShipmentStatus, frozenset[ShipmentStatus]] = {}
    for index, current in enumerate(_PROGRESSION):
        if current in TERMINAL_STATUSES:
            table[current] = frozenset()
            continue
        # Any later step may be reached directly (e.g. submitted -> in_progress
        # when the forwarder skips explicit confirmation), and every
        # non-terminal state may be cancelled.
        targets = set(_PROGRESSION[index + 1 :])
        targets.add(ShipmentStatus.CANCELLED)
        table[current] = frozenset(targets)
    table[ShipmentStatus.CANCELLED] = frozenset()
    return table


TRANSITIONS: dict[ShipmentStatus, frozenset[ShipmentStatus]] = _build_transition_table()


def parse_status(value: object) -> ShipmentStatus | None:
    if isinstance(value, ShipmentStatus):
        return value
    token = str(value or "").strip().lower()
    try:
        return ShipmentStatus(token)
    except ValueError:
        return None


def is_terminal(status: ShipmentStatus | str) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def can_transition(current: ShipmentStatus | str, target: ShipmentStatus | str) -> bool:
    """True when the state table has an edge current -> target."""
    current_status = parse_status(current)
    target_status = parse_status(target)
    if current_status is None or target_status is None:
        return False
    return target_status in TRANSITIONS[current_status]


def allows_deletion(status: ShipmentStatus | str) -> bool:
    return parse_status(status) == ShipmentStatus.DRAFT


def allowed_targets(current: ShipmentStatus | str) -> list[str]:
    current_status = parse_status(current)
    if current_status is None:
        return []
    return sorted(s.value for s in TRANSITIONS[current_status])
