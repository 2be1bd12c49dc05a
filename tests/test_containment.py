from __future__ import annotations

from types import SimpleNamespace

import pytest

from app.services.containment import (
    verify_item_belongs_to_load,
    verify_load_belongs_to_shipment,
)
from app.services.errors import NotFound


def test_load_under_its_own_shipment_passes():
    load = SimpleNamespace(id=7, shipment_id=3)
    verify_load_belongs_to_shipment(load, 3)
    verify_load_belongs_to_shipment(load, "3")


def test_load_under_another_shipment_is_not_found():
    load = SimpleNamespace(id=7, shipment_id=3)
    with pytest.raises(NotFound) as exc_info:
        verify_load_belongs_to_shipment(load, 4)
    assert exc_info.value.status_code == 404


def test_item_under_another_load_is_not_found():
    item = SimpleNamespace(id=11, shipment_load_id=7)
    verify_item_belongs_to_load(item, 7)
    with pytest.raises(NotFound):
        verify_item_belongs_to_load(item, 8)


def test_missing_parent_id_never_matches():
    with pytest.raises(NotFound):
        verify_load_belongs_to_shipment(SimpleNamespace(id=7, shipment_id=None), None)
