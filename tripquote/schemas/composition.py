from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from tripquote.config import settings
from tripquote.schemas.selections import (
    EventSelection,
    FlightSelection,
    HotelSelection,
    ServiceCategory,
    TransferSelection,
)
from tripquote.schemas.travelers import TravelerGroup, TripParty


class Tone(str, Enum):
    LUXURY = "luxury"
    PLAYFUL = "playful"
    ROMANTIC = "romantic"
    ADVENTURE = "adventure"


class ClientInfo(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None


class TripDetails(BaseModel):
    primary_destination: str = ""
    start_date: date | None = None
    end_date: date | None = None
    party: TripParty = Field(default_factory=lambda: TripParty(total_adults=1))

    @property
    def nights(self) -> int:
        """Whole nights between start and end, never less than 1."""
        if not self.start_date or not self.end_date:
            return 1
        return max(1, (self.end_date - self.start_date).days)


class Preferences(BaseModel):
    tone: Tone | None = Tone.LUXURY
    currency: str | None = Field(default_factory=lambda: settings.default_currency)
    budget_amount: Decimal | None = None


class FlightsSection(BaseModel):
    enabled: bool = False
    selections: list[FlightSelection] = Field(default_factory=list)


class HotelsSection(BaseModel):
    enabled: bool = False
    selections: list[HotelSelection] = Field(default_factory=list)


class TransfersSection(BaseModel):
    enabled: bool = False
    selections: list[TransferSelection] = Field(default_factory=list)


class EventsSection(BaseModel):
    enabled: bool = False
    selections: list[EventSelection] = Field(default_factory=list)


class CompositionIn(BaseModel):
    """Wire form of a composition as the wizard holds it."""

    client: ClientInfo = Field(default_factory=ClientInfo)
    trip: TripDetails = Field(default_factory=TripDetails)
    groups: list[TravelerGroup] = Field(default_factory=list)
    preferences: Preferences = Field(default_factory=Preferences)
    flights: FlightsSection = Field(default_factory=FlightsSection)
    hotels: HotelsSection = Field(default_factory=HotelsSection)
    transfers: TransfersSection = Field(default_factory=TransfersSection)
    events: EventsSection = Field(default_factory=EventsSection)


class LineItem(BaseModel):
    category: ServiceCategory
    label: str
    group_id: str
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    currency_code: str
    unconverted: bool = False


class DanglingReference(BaseModel):
    category: ServiceCategory
    key: str
    group_id: str


class PriceBreakdown(BaseModel):
    currency: str
    subtotals: dict[ServiceCategory, Decimal]
    total: Decimal
    line_items: list[LineItem] = Field(default_factory=list)
    dangling_references: list[DanglingReference] = Field(default_factory=list)
    unconverted_items: list[LineItem] = Field(default_factory=list)

    @property
    def has_unconverted_prices(self) -> bool:
        return bool(self.unconverted_items)


class ReadinessReport(BaseModel):
    client: bool
    trip: bool
    travelers: bool
    preferences: bool
    flights: bool
    hotels: bool
    transfers: bool
    events: bool
    reasons: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def ready(self) -> bool:
        return all((
            self.client, self.trip, self.travelers, self.preferences,
            self.flights, self.hotels, self.transfers, self.events,
        ))


class QuotePayload(CompositionIn):
    """Finalized composition handed to the downstream quote-creation service."""

    breakdown: PriceBreakdown
    finalized_at: datetime
