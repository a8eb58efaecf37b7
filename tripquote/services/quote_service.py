"""Quote finalization: freezes a ready composition into the downstream payload."""

import logging
from dataclasses import dataclass

from tripquote.schemas.composition import PriceBreakdown, QuotePayload, ReadinessReport
from tripquote.services.completeness_validator import CompletenessValidator, completeness_validator
from tripquote.services.pricing_aggregator import PricingAggregator, pricing_aggregator
from tripquote.services.quote_composition import QuoteComposition

logger = logging.getLogger(__name__)


@dataclass
class FinalizeResult:
    readiness: ReadinessReport
    breakdown: PriceBreakdown
    payload: QuotePayload | None = None

    @property
    def submitted(self) -> bool:
        return self.payload is not None


class QuoteService:
    def __init__(
        self,
        aggregator: PricingAggregator | None = None,
        validator: CompletenessValidator | None = None,
    ):
        self._aggregator = aggregator or pricing_aggregator
        self._validator = validator or completeness_validator

    def finalize(self, composition: QuoteComposition) -> FinalizeResult:
        """Freeze and export the composition if it is ready.

        Raises StructuralValidationError when travelers are not fully
        allocated. Any other gap leaves the composition editable and is
        returned in ``readiness.reasons``.
        """
        composition.ledger.require_valid()
        readiness = self._validator.is_ready_detailed(composition)
        breakdown = self._aggregator.compute_breakdown(composition)

        if not readiness.ready:
            logger.info(f"Quote not ready: {'; '.join(readiness.reasons)}")
            return FinalizeResult(readiness=readiness, breakdown=breakdown)

        composition.freeze()
        payload = composition.to_payload(breakdown)
        logger.info(
            f"Quote finalized for {composition.client.first_name} {composition.client.last_name}: "
            f"{breakdown.total} {breakdown.currency}"
        )
        return FinalizeResult(readiness=readiness, breakdown=breakdown, payload=payload)


quote_service = QuoteService()
