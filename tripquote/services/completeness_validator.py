"""Completeness validator: decides whether a composition may be submitted as a quote."""

import logging

from tripquote.schemas.composition import ReadinessReport
from tripquote.schemas.selections import ServiceCategory
from tripquote.services.quote_composition import QuoteComposition
from tripquote.services.selection_registry import CategoryRegistry

logger = logging.getLogger(__name__)


class CompletenessValidator:
    """Hard gates produce ``reasons``; per-group coverage gaps are only ``warnings``."""

    def is_ready(self, composition: QuoteComposition) -> bool:
        return self.is_ready_detailed(composition).ready

    def is_ready_detailed(self, composition: QuoteComposition) -> ReadinessReport:
        reasons: list[str] = []
        warnings: list[str] = []

        client = composition.client
        client_ok = bool(client.first_name.strip() and client.last_name.strip())
        if not client_ok:
            reasons.append("Client first and last name are required")

        trip = composition.trip
        trip_ok = bool(trip.primary_destination.strip())
        if not trip_ok:
            reasons.append("Primary destination is required")
        if not trip.start_date or not trip.end_date:
            trip_ok = False
            reasons.append("Trip start and end dates are required")
        elif trip.end_date < trip.start_date:
            trip_ok = False
            reasons.append("Trip end date must not be before the start date")

        travelers_ok = composition.party.total_adults + composition.party.total_children > 0
        if not travelers_ok:
            reasons.append("At least one traveler is required")
        allocation = composition.ledger.validate()
        if not allocation.valid:
            travelers_ok = False
            reasons.append(allocation.reason)

        prefs = composition.preferences
        preferences_ok = bool(prefs.tone and prefs.currency)
        if not preferences_ok:
            reasons.append("Preferred tone and currency are required")

        sections = {}
        for registry in composition.selections.all():
            sections[registry.category] = self._category_ready(registry, reasons)
            if registry.enabled:
                warnings.extend(self._coverage_warnings(composition, registry))
        warnings.extend(self._zero_adult_flights(composition))

        return ReadinessReport(
            client=client_ok,
            trip=trip_ok,
            travelers=travelers_ok,
            preferences=preferences_ok,
            flights=sections[ServiceCategory.FLIGHTS],
            hotels=sections[ServiceCategory.HOTELS],
            transfers=sections[ServiceCategory.TRANSFERS],
            events=sections[ServiceCategory.EVENTS],
            reasons=reasons,
            warnings=warnings,
        )

    def _category_ready(self, registry: CategoryRegistry, reasons: list[str]) -> bool:
        # A disabled category is vacuously complete
        if not registry.enabled:
            return True
        selected = len(registry)
        if registry.category == ServiceCategory.EVENTS:
            # events whose groups were all unbound select nothing
            selected = sum(1 for event in registry.list() if event.groups)
        if selected == 0:
            reasons.append(f"{registry.category.value.title()} are enabled but nothing is selected")
            return False
        return True

    def _zero_adult_flights(self, composition: QuoteComposition) -> list[str]:
        """Flights are priced per adult, so a children-only group flies at zero."""
        registry = composition.selections.flights
        if not registry.enabled:
            return []
        warnings = []
        for sel in registry.list():
            if sel.chosen_offer is not None and composition.traveler_count(sel.group_id) == 0:
                group = composition.ledger.resolve(sel.group_id)
                warnings.append(f"{group.name} has no adults; its flight is priced at zero")
        return warnings

    def _coverage_warnings(self, composition: QuoteComposition, registry: CategoryRegistry) -> list[str]:
        warnings = []
        valid_ids = composition.ledger.group_ids()
        referenced = registry.referenced_group_ids()
        label = registry.category.value

        for group_id in sorted(referenced - set(valid_ids)):
            warnings.append(f"{label} selection references removed group {group_id}")

        if len(registry):
            for group_id in valid_ids:
                if group_id not in referenced:
                    group = composition.ledger.resolve(group_id)
                    name = group.name if group else group_id
                    warnings.append(f"{name} has no {label} selection")

        preferred = composition.preferred_currency
        for item in _snapshot_currencies(registry):
            if preferred and item != preferred:
                warnings.append(f"Some {label} prices are in {item}, not {preferred}")
        return warnings


def _snapshot_currencies(registry: CategoryRegistry) -> list[str]:
    currencies = set()
    for sel in registry.list():
        if registry.category == ServiceCategory.FLIGHTS and sel.chosen_offer:
            currencies.add(sel.chosen_offer.price.currency_code)
        elif registry.category == ServiceCategory.HOTELS and sel.chosen_offer:
            currencies.add(sel.chosen_offer.price_per_night.currency_code)
        elif registry.category == ServiceCategory.TRANSFERS and sel.price_per_transfer:
            currencies.add(sel.price_per_transfer.currency_code)
        elif registry.category == ServiceCategory.EVENTS:
            currencies.update(b.unit_price.currency_code for b in sel.groups)
    return sorted(currencies)


completeness_validator = CompletenessValidator()
