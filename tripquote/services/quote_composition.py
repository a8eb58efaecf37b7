"""Quote composition: the aggregate root the wizard mutates step by step."""

import logging
from datetime import datetime, timezone
from typing import Callable

from tripquote.schemas.composition import (
    ClientInfo,
    CompositionIn,
    EventsSection,
    FlightsSection,
    HotelsSection,
    Preferences,
    PriceBreakdown,
    QuotePayload,
    TransfersSection,
    TripDetails,
)
from tripquote.schemas.selections import ServiceCategory
from tripquote.schemas.travelers import TripParty
from tripquote.services.errors import CompositionFrozenError
from tripquote.services.selection_registry import SelectionRegistry
from tripquote.services.smart_split import new_group_id
from tripquote.services.traveler_ledger import TravelerLedger

logger = logging.getLogger(__name__)


class QuoteComposition:
    """Client, trip, traveler groups, preferences and per-category selections."""

    def __init__(
        self,
        client: ClientInfo | None = None,
        trip: TripDetails | None = None,
        preferences: Preferences | None = None,
        id_factory: Callable[[], str] = new_group_id,
    ):
        self._frozen_at: datetime | None = None
        self._client = client or ClientInfo()
        self._trip = trip or TripDetails()
        self._preferences = preferences or Preferences()
        self.ledger = TravelerLedger(self._trip.party, id_factory=id_factory)
        self.selections = SelectionRegistry()

    @property
    def client(self) -> ClientInfo:
        return self._client

    @client.setter
    def client(self, value: ClientInfo):
        self.ensure_editable()
        self._client = value

    @property
    def trip(self) -> TripDetails:
        return self._trip

    @trip.setter
    def trip(self, value: TripDetails):
        self.ensure_editable()
        self._trip = value

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    @preferences.setter
    def preferences(self, value: Preferences):
        self.ensure_editable()
        self._preferences = value

    @property
    def party(self) -> TripParty:
        return self.ledger.party

    @property
    def preferred_currency(self) -> str:
        return (self.preferences.currency or "").upper()

    @property
    def frozen(self) -> bool:
        return self._frozen_at is not None

    def ensure_editable(self):
        if self.frozen:
            raise CompositionFrozenError("Composition was already finalized")

    def set_category_enabled(self, category: ServiceCategory, enabled: bool):
        self.ensure_editable()
        self.selections.category(category).set_enabled(enabled)

    def traveler_count(self, group_id: str) -> int | None:
        """Adult-equivalent headcount used for per-person pricing, None if dangling."""
        group = self.ledger.resolve(group_id)
        if group is None:
            return None
        if self.ledger.use_subgroups:
            return group.adults
        return self.party.total_adults

    def freeze(self) -> datetime:
        """Finalize: every later edit through the composition, its ledger or its
        registries raises CompositionFrozenError."""
        self.ensure_editable()
        self.ledger.freeze()
        for registry in self.selections.all():
            registry.freeze()
        self._frozen_at = datetime.now(timezone.utc)
        return self._frozen_at

    # Wire conversion

    def to_input(self) -> CompositionIn:
        party = self.party
        return CompositionIn(
            client=self.client,
            trip=self.trip.model_copy(update={"party": party}),
            groups=self.ledger.groups,
            preferences=self.preferences,
            flights=FlightsSection(enabled=self.selections.flights.enabled, selections=self.selections.flights.list()),
            hotels=HotelsSection(enabled=self.selections.hotels.enabled, selections=self.selections.hotels.list()),
            transfers=TransfersSection(enabled=self.selections.transfers.enabled, selections=self.selections.transfers.list()),
            events=EventsSection(enabled=self.selections.events.enabled, selections=self.selections.events.list()),
        )

    def to_payload(self, breakdown: PriceBreakdown) -> QuotePayload:
        if self._frozen_at is None:
            raise ValueError("Composition must be finalized before export")
        return QuotePayload(
            **self.to_input().model_dump(),
            breakdown=breakdown,
            finalized_at=self._frozen_at,
        )

    @classmethod
    def from_input(cls, data: CompositionIn) -> "QuoteComposition":
        composition = cls(client=data.client, trip=data.trip, preferences=data.preferences)
        composition.ledger = TravelerLedger(data.trip.party, data.groups)
        sections = (
            (composition.selections.flights, data.flights),
            (composition.selections.hotels, data.hotels),
            (composition.selections.transfers, data.transfers),
            (composition.selections.events, data.events),
        )
        for registry, section in sections:
            registry.set_enabled(section.enabled)
            if section.enabled:
                for selection in section.selections:
                    registry.add(selection)
            elif section.selections:
                logger.debug(f"Ignoring {len(section.selections)} selections of disabled {registry.category.value}")
        return composition
