"""Pricing aggregator: sums pre-converted line items into category and grand totals."""

import logging
from decimal import Decimal

from tripquote.schemas.composition import DanglingReference, LineItem, PriceBreakdown
from tripquote.schemas.money import ConvertedMoney
from tripquote.schemas.selections import ServiceCategory
from tripquote.services.quote_composition import QuoteComposition

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class PricingAggregator:
    """Builds a PriceBreakdown from a composition.

    Every price was converted when its offer was chosen, so this is pure
    summation. Selections whose group no longer resolves are left out of the
    totals and reported as dangling.
    """

    def compute_breakdown(self, composition: QuoteComposition) -> PriceBreakdown:
        line_items: list[LineItem] = []
        dangling: list[DanglingReference] = []

        self._flights(composition, line_items, dangling)
        self._hotels(composition, line_items, dangling)
        self._transfers(composition, line_items, dangling)
        self._events(composition, line_items, dangling)

        subtotals = {category: ZERO for category in ServiceCategory}
        for item in line_items:
            subtotals[item.category] += item.subtotal

        if dangling:
            logger.warning(f"{len(dangling)} selections reference removed traveler groups")

        return PriceBreakdown(
            currency=composition.preferred_currency,
            subtotals=subtotals,
            total=sum(subtotals.values(), ZERO),
            line_items=line_items,
            dangling_references=dangling,
            unconverted_items=[i for i in line_items if i.unconverted],
        )

    def _flights(self, composition, line_items, dangling):
        registry = composition.selections.flights
        if not registry.enabled:
            return
        for sel in registry.list():
            if sel.chosen_offer is None:
                continue
            # Fares are per adult and children are not charged; a children-only
            # group prices at zero and the readiness report warns about it
            travelers = composition.traveler_count(sel.group_id)
            if travelers is None:
                dangling.append(DanglingReference(category=registry.category, key=sel.key, group_id=sel.group_id))
                continue
            line_items.append(_line(
                registry.category,
                f"{sel.cabin_class.value.replace('_', ' ').title()} flight: {sel.chosen_offer.routing}",
                sel.group_id,
                sel.chosen_offer.price,
                travelers,
            ))

    def _hotels(self, composition, line_items, dangling):
        registry = composition.selections.hotels
        if not registry.enabled:
            return
        nights = composition.trip.nights
        for sel in registry.list():
            if sel.chosen_offer is None:
                continue
            if composition.ledger.resolve(sel.group_id) is None:
                dangling.append(DanglingReference(category=registry.category, key=sel.key, group_id=sel.group_id))
                continue
            label = sel.chosen_offer.offer.hotel_name
            if sel.chosen_offer.room_type:
                label = f"{label} ({sel.chosen_offer.room_type})"
            line_items.append(_line(
                registry.category,
                f"{label}, {sel.room_count} room(s) x {nights} night(s)",
                sel.group_id,
                sel.chosen_offer.price_per_night,
                sel.room_count * nights,
            ))

    def _transfers(self, composition, line_items, dangling):
        registry = composition.selections.transfers
        if not registry.enabled:
            return
        for sel in registry.list():
            if not sel.legs:
                continue
            if composition.ledger.resolve(sel.group_id) is None:
                dangling.append(DanglingReference(category=registry.category, key=sel.key, group_id=sel.group_id))
                continue
            # Unpriced transfers are listed at zero, never estimated
            price = sel.price_per_transfer
            line_items.append(LineItem(
                category=registry.category,
                label=f"{sel.vehicle_type.replace('_', ' ').title()} transfer",
                group_id=sel.group_id,
                unit_price=price.amount if price else ZERO,
                quantity=len(sel.legs),
                subtotal=price.amount * len(sel.legs) if price else ZERO,
                currency_code=price.currency_code if price else composition.preferred_currency,
                unconverted=price.unconverted if price else False,
            ))

    def _events(self, composition, line_items, dangling):
        registry = composition.selections.events
        if not registry.enabled:
            return
        for event in registry.list():
            for binding in event.groups:
                if composition.ledger.resolve(binding.group_id) is None:
                    dangling.append(DanglingReference(category=registry.category, key=event.key, group_id=binding.group_id))
                    continue
                line_items.append(_line(
                    registry.category,
                    event.name or event.event_id,
                    binding.group_id,
                    binding.unit_price,
                    binding.ticket_quantity,
                ))


def _line(
    category: ServiceCategory,
    label: str,
    group_id: str,
    price: ConvertedMoney,
    quantity: int,
) -> LineItem:
    return LineItem(
        category=category,
        label=label,
        group_id=group_id,
        unit_price=price.amount,
        quantity=quantity,
        subtotal=price.amount * quantity,
        currency_code=price.currency_code,
        unconverted=price.unconverted,
    )


pricing_aggregator = PricingAggregator()
