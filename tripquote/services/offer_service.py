"""Offer selection: binds externally found offers to groups with a converted price snapshot."""

import logging
from datetime import date
from typing import Protocol

from pydantic import BaseModel

from tripquote.schemas.money import Money
from tripquote.schemas.selections import (
    ChosenFlight,
    ChosenHotel,
    EventGroupBinding,
    EventSelection,
    FlightOffer,
    FlightSelection,
    HotelOffer,
    HotelSelection,
    ServiceCategory,
    TicketOffer,
    TransferSelection,
)
from tripquote.services.currency_service import CurrencyService, currency_service
from tripquote.services.quote_composition import QuoteComposition

logger = logging.getLogger(__name__)


class OfferCriteria(BaseModel):
    origin: str | None = None
    destination: str | None = None
    city: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    party_size: int = 1


class OfferSearchProvider(Protocol):
    """External flight/hotel/event search. The engine never calls it itself."""

    async def search(self, category: ServiceCategory, criteria: OfferCriteria) -> list[BaseModel]:
        ...


class OfferSelectionService:
    """Applies a caller-chosen offer to a composition.

    The price is converted once, at the preferred currency of the moment, and
    stored with the selection. Changing the preferred currency later does not
    touch existing snapshots.
    """

    def __init__(self, currency: CurrencyService | None = None):
        self._currency = currency or currency_service

    async def choose_flight(
        self,
        composition: QuoteComposition,
        group_id: str,
        offer: FlightOffer,
    ) -> FlightSelection:
        composition.ensure_editable()
        price = await self._currency.convert_money(offer.price, composition.preferred_currency)
        chosen = ChosenFlight(offer=offer, price=price, routing=offer.routing)
        registry = composition.selections.flights
        if registry.get(group_id) is None:
            selection = registry.add(FlightSelection(group_id=group_id, chosen_offer=chosen))
        else:
            selection = registry.update(group_id, chosen_offer=chosen)
        logger.info(f"Flight {offer.offer_id} chosen for {group_id} at {price.amount} {price.currency_code}")
        return selection

    async def choose_hotel(
        self,
        composition: QuoteComposition,
        group_id: str,
        offer: HotelOffer,
    ) -> HotelSelection:
        composition.ensure_editable()
        price = await self._currency.convert_money(offer.price_per_night, composition.preferred_currency)
        chosen = ChosenHotel(offer=offer, price_per_night=price, room_type=offer.room_type)
        registry = composition.selections.hotels
        if registry.get(group_id) is None:
            selection = registry.add(HotelSelection(group_id=group_id, chosen_offer=chosen))
        else:
            selection = registry.update(group_id, chosen_offer=chosen)
        logger.info(f"Hotel {offer.offer_id} chosen for {group_id} at {price.amount} {price.currency_code}/night")
        return selection

    async def price_transfer(
        self,
        composition: QuoteComposition,
        group_id: str,
        price_per_transfer: Money,
    ) -> TransferSelection:
        composition.ensure_editable()
        price = await self._currency.convert_money(price_per_transfer, composition.preferred_currency)
        registry = composition.selections.transfers
        if registry.get(group_id) is None:
            return registry.add(TransferSelection(group_id=group_id, price_per_transfer=price))
        return registry.update(group_id, price_per_transfer=price)

    async def choose_tickets(
        self,
        composition: QuoteComposition,
        event_id: str,
        group_id: str,
        offer: TicketOffer,
        quantity: int = 1,
        event_name: str = "",
    ) -> EventSelection:
        composition.ensure_editable()
        price = await self._currency.convert_money(offer.price, composition.preferred_currency)
        binding = EventGroupBinding(
            group_id=group_id,
            ticket_quantity=quantity,
            unit_price=price,
            ticket_offer=offer,
        )
        registry = composition.selections.events
        event = registry.get(event_id)
        if event is None:
            return registry.add(EventSelection(event_id=event_id, name=event_name or offer.name, groups=[binding]))
        if group_id in event.group_ids:
            groups = [binding if b.group_id == group_id else b for b in event.groups]
            return registry.update(event_id, groups=groups)
        return registry.bind_group(event_id, binding)


offer_selection_service = OfferSelectionService()
