"""Tests for the per-category selection registries."""

import pytest

from tests.conftest import gbp
from tripquote.schemas.selections import (
    EventGroupBinding,
    EventSelection,
    FlightSelection,
    HotelSelection,
    ServiceCategory,
    TransferLeg,
    TransferSelection,
)
from tripquote.services.errors import CategoryDisabledError, CompositionFrozenError
from tripquote.services.selection_registry import CategoryRegistry, SelectionRegistry


def _hotels(enabled=True) -> CategoryRegistry:
    return CategoryRegistry(ServiceCategory.HOTELS, enabled=enabled)


def test_add_and_list_keep_insertion_order():
    registry = _hotels()
    registry.add(HotelSelection(group_id="a", destination_city="Nice"))
    registry.add(HotelSelection(group_id="b", destination_city="Monaco"))

    assert [s.group_id for s in registry.list()] == ["a", "b"]
    assert len(registry) == 2


def test_one_selection_per_group():
    registry = _hotels()
    registry.add(HotelSelection(group_id="a"))
    with pytest.raises(ValueError):
        registry.add(HotelSelection(group_id="a"))


def test_add_to_disabled_category_raises():
    with pytest.raises(CategoryDisabledError):
        _hotels(enabled=False).add(HotelSelection(group_id="a"))


def test_update_validates_partial_changes():
    registry = _hotels()
    registry.add(HotelSelection(group_id="a", room_count=1))

    updated = registry.update("a", room_count=3, star_rating=5)
    assert updated.room_count == 3
    assert registry.get("a").star_rating == 5

    with pytest.raises(ValueError):
        registry.update("a", room_count=0)


def test_update_cannot_rebind_group():
    registry = _hotels()
    registry.add(HotelSelection(group_id="a"))
    with pytest.raises(ValueError):
        registry.update("a", group_id="b")


def test_remove_and_missing_keys():
    registry = _hotels()
    registry.add(HotelSelection(group_id="a"))
    registry.remove("a")
    assert registry.list() == []
    with pytest.raises(ValueError):
        registry.remove("a")


def test_registry_does_not_check_group_ids():
    registry = CategoryRegistry(ServiceCategory.FLIGHTS, enabled=True)
    registry.add(FlightSelection(group_id="no-such-group"))
    assert registry.referenced_group_ids() == {"no-such-group"}


def test_disable_then_enable_starts_empty():
    registry = SelectionRegistry()
    registry.transfers.set_enabled(True)
    registry.transfers.add(TransferSelection(
        group_id="a",
        legs=[TransferLeg(kind="arrival", pickup="NCE", dropoff="Hotel de Paris")],
    ))

    registry.transfers.set_enabled(False)
    registry.transfers.set_enabled(True)
    assert registry.transfers.list() == []


def test_event_bindings():
    registry = SelectionRegistry()
    registry.events.set_enabled(True)
    registry.events.add(EventSelection(
        event_id="monaco-gp",
        name="Monaco Grand Prix",
        groups=[EventGroupBinding(group_id="a", ticket_quantity=2, unit_price=gbp("450"))],
    ))

    registry.events.bind_group("monaco-gp", EventGroupBinding(group_id="b", unit_price=gbp("450")))
    assert registry.events.get("monaco-gp").group_ids == ["a", "b"]
    assert registry.events.referenced_group_ids() == {"a", "b"}

    with pytest.raises(ValueError):
        registry.events.bind_group("monaco-gp", EventGroupBinding(group_id="a", unit_price=gbp("1")))

    registry.events.unbind_group("monaco-gp", "a")
    assert registry.events.get("monaco-gp").group_ids == ["b"]


def test_event_update_by_event_id():
    registry = SelectionRegistry()
    registry.events.set_enabled(True)
    registry.events.add(EventSelection(event_id="e1"))
    assert registry.events.update("e1", name="Gala").name == "Gala"
    with pytest.raises(ValueError):
        registry.events.update("e1", event_id="e2")


def test_category_lookup():
    registry = SelectionRegistry()
    assert registry.category(ServiceCategory.EVENTS) is registry.events
    assert [r.category for r in registry.all()] == list(ServiceCategory)


def test_unbinding_last_group_removes_event():
    registry = SelectionRegistry()
    registry.events.set_enabled(True)
    registry.events.add(EventSelection(
        event_id="gala",
        groups=[EventGroupBinding(group_id="a", unit_price=gbp("80"))],
    ))

    registry.events.unbind_group("gala", "a")
    assert registry.events.get("gala") is None
    assert len(registry.events) == 0


def test_frozen_registry_rejects_every_mutation():
    registry = _hotels()
    registry.add(HotelSelection(group_id="a"))
    registry.freeze()

    with pytest.raises(CompositionFrozenError):
        registry.add(HotelSelection(group_id="b"))
    with pytest.raises(CompositionFrozenError):
        registry.update("a", room_count=2)
    with pytest.raises(CompositionFrozenError):
        registry.remove("a")
    with pytest.raises(CompositionFrozenError):
        registry.set_enabled(False)
    assert registry.get("a").room_count == 1
