"""Service selection registry: per-category selections bound to traveler groups."""

import logging
from typing import Generic, TypeVar

from pydantic import BaseModel

from tripquote.schemas.selections import (
    EventGroupBinding,
    EventSelection,
    FlightSelection,
    HotelSelection,
    ServiceCategory,
    TransferSelection,
)
from tripquote.services.errors import CategoryDisabledError, CompositionFrozenError

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=BaseModel)


class CategoryRegistry(Generic[S]):
    """Selections for one category, keyed by ``selection.key``.

    Group ids are stored as given; checking them against the ledger is the
    validator's job.
    """

    key_field = "group_id"

    def __init__(self, category: ServiceCategory, enabled: bool = False, selections: list[S] | None = None):
        self.category = category
        self._enabled = enabled
        self._selections: dict[str, S] = {}
        self._frozen = False
        for s in selections or []:
            self.add(s)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool):
        """Switch the category on or off. Switching off discards every selection."""
        self._check_editable()
        if not enabled and self._selections:
            logger.info(f"{self.category.value} disabled, clearing {len(self._selections)} selections")
            self._selections.clear()
        self._enabled = enabled

    def add(self, selection: S) -> S:
        self._check_editable()
        if not self._enabled:
            raise CategoryDisabledError(f"{self.category.value} is disabled")
        key = selection.key
        if key in self._selections:
            raise ValueError(f"{self.category.value} already has a selection for {key}")
        self._selections[key] = selection
        return selection

    def get(self, key: str) -> S | None:
        return self._selections.get(key)

    def update(self, key: str, **changes) -> S:
        self._check_editable()
        current = self._require(key)
        if changes.get(self.key_field, key) != key:
            raise ValueError(f"Cannot change {self.key_field} of an existing selection")
        updated = type(current).model_validate({**current.model_dump(), **changes})
        self._selections[key] = updated
        return updated

    def replace(self, selection: S) -> S:
        """Store ``selection`` over the existing entry with the same key."""
        self._check_editable()
        self._require(selection.key)
        self._selections[selection.key] = selection
        return selection

    def remove(self, key: str) -> S:
        self._check_editable()
        selection = self._require(key)
        del self._selections[key]
        return selection

    def list(self) -> list[S]:
        return list(self._selections.values())

    def __len__(self) -> int:
        return len(self._selections)

    def referenced_group_ids(self) -> set[str]:
        return {s.group_id for s in self._selections.values()}

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        self._frozen = True

    def _check_editable(self):
        if self._frozen:
            raise CompositionFrozenError(f"{self.category.value} selections are frozen")

    def _require(self, key: str) -> S:
        selection = self._selections.get(key)
        if selection is None:
            raise ValueError(f"No {self.category.value} selection for {key}")
        return selection


class EventRegistry(CategoryRegistry[EventSelection]):
    """Events are keyed by event id; each event binds tickets to one or more groups."""

    key_field = "event_id"

    def bind_group(self, event_id: str, binding: EventGroupBinding) -> EventSelection:
        self._check_editable()
        event = self._require(event_id)
        if binding.group_id in event.group_ids:
            raise ValueError(f"Group {binding.group_id} is already bound to event {event_id}")
        updated = event.model_copy(update={"groups": [*event.groups, binding]})
        self._selections[event_id] = updated
        return updated

    def unbind_group(self, event_id: str, group_id: str) -> EventSelection:
        """Drop one group's tickets. An event left with no groups is removed."""
        self._check_editable()
        event = self._require(event_id)
        if group_id not in event.group_ids:
            raise ValueError(f"Group {group_id} is not bound to event {event_id}")
        remaining = [b for b in event.groups if b.group_id != group_id]
        updated = event.model_copy(update={"groups": remaining})
        if remaining:
            self._selections[event_id] = updated
        else:
            del self._selections[event_id]
        return updated

    def referenced_group_ids(self) -> set[str]:
        return {gid for s in self._selections.values() for gid in s.group_ids}


class SelectionRegistry:
    """One sub-registry per service category."""

    def __init__(self):
        self.flights: CategoryRegistry[FlightSelection] = CategoryRegistry(ServiceCategory.FLIGHTS)
        self.hotels: CategoryRegistry[HotelSelection] = CategoryRegistry(ServiceCategory.HOTELS)
        self.transfers: CategoryRegistry[TransferSelection] = CategoryRegistry(ServiceCategory.TRANSFERS)
        self.events = EventRegistry(ServiceCategory.EVENTS)

    def category(self, category: ServiceCategory) -> CategoryRegistry:
        return {
            ServiceCategory.FLIGHTS: self.flights,
            ServiceCategory.HOTELS: self.hotels,
            ServiceCategory.TRANSFERS: self.transfers,
            ServiceCategory.EVENTS: self.events,
        }[category]

    def all(self) -> list[CategoryRegistry]:
        return [self.flights, self.hotels, self.transfers, self.events]
