from datetime import date, time
from enum import Enum

from pydantic import BaseModel, Field

from tripquote.schemas.money import ConvertedMoney, Money
from tripquote.schemas.travelers import DEFAULT_GROUP_ID


class ServiceCategory(str, Enum):
    FLIGHTS = "flights"
    HOTELS = "hotels"
    TRANSFERS = "transfers"
    EVENTS = "events"


class CabinClass(str, Enum):
    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium_economy"
    BUSINESS = "business"
    FIRST = "first"


class TransferLegKind(str, Enum):
    ARRIVAL = "arrival"
    DEPARTURE = "departure"


# Offers as returned by an external search provider, before selection

class FlightOffer(BaseModel):
    offer_id: str
    price: Money
    routing: str
    airline: str | None = None
    flight_number: str | None = None


class HotelOffer(BaseModel):
    offer_id: str
    hotel_name: str
    price_per_night: Money
    room_type: str | None = None


class TicketOffer(BaseModel):
    offer_id: str
    name: str
    price: Money


# Chosen offers: original offer plus a snapshot at the preferred currency

class ChosenFlight(BaseModel):
    offer: FlightOffer
    price: ConvertedMoney
    routing: str


class ChosenHotel(BaseModel):
    offer: HotelOffer
    price_per_night: ConvertedMoney
    room_type: str | None = None


class FlightSelection(BaseModel):
    group_id: str = DEFAULT_GROUP_ID
    cabin_class: CabinClass = CabinClass.ECONOMY
    origin: str = ""
    destination: str = ""
    preferred_airlines: list[str] = Field(default_factory=list)
    chosen_offer: ChosenFlight | None = None

    @property
    def key(self) -> str:
        return self.group_id


class HotelSelection(BaseModel):
    group_id: str = DEFAULT_GROUP_ID
    destination_city: str = ""
    room_count: int = Field(default=1, ge=1)
    star_rating: int = Field(default=3, ge=1, le=5)
    chosen_offer: ChosenHotel | None = None

    @property
    def key(self) -> str:
        return self.group_id


class TransferLeg(BaseModel):
    kind: TransferLegKind
    pickup: str
    dropoff: str
    travel_date: date | None = None
    pickup_time: time | None = None


class TransferSelection(BaseModel):
    group_id: str = DEFAULT_GROUP_ID
    vehicle_type: str = "private_car"
    legs: list[TransferLeg] = Field(default_factory=list)
    price_per_transfer: ConvertedMoney | None = None

    @property
    def key(self) -> str:
        return self.group_id


class EventGroupBinding(BaseModel):
    group_id: str = DEFAULT_GROUP_ID
    ticket_quantity: int = Field(default=1, ge=1)
    unit_price: ConvertedMoney
    ticket_offer: TicketOffer | None = None


class EventSelection(BaseModel):
    event_id: str
    name: str = ""
    groups: list[EventGroupBinding] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return self.event_id

    @property
    def group_ids(self) -> list[str]:
        return [b.group_id for b in self.groups]
