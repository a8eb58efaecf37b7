"""Quotes router: breakdown, readiness and finalization of a posted composition."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from tripquote.dependencies import get_quote_service
from tripquote.schemas.composition import CompositionIn, PriceBreakdown, QuotePayload
from tripquote.services.completeness_validator import completeness_validator
from tripquote.services.errors import StructuralValidationError
from tripquote.services.pricing_aggregator import pricing_aggregator
from tripquote.services.quote_composition import QuoteComposition
from tripquote.services.quote_service import QuoteService

logger = logging.getLogger(__name__)

router = APIRouter()


def _load(data: CompositionIn) -> QuoteComposition:
    try:
        return QuoteComposition.from_input(data)
    except ValueError as e:
        logger.info(f"Rejected composition: {e}")
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/breakdown", response_model=PriceBreakdown)
async def compute_breakdown(data: CompositionIn):
    """Price the composition in its preferred currency."""
    return pricing_aggregator.compute_breakdown(_load(data))


@router.post("/readiness")
async def check_readiness(data: CompositionIn):
    """Per-section readiness plus the overall submit gate."""
    report = completeness_validator.is_ready_detailed(_load(data))
    return {"ready": report.ready, **report.model_dump()}


@router.post("/finalize", response_model=QuotePayload)
async def finalize_quote(
    data: CompositionIn,
    quotes: QuoteService = Depends(get_quote_service),
):
    """Freeze the composition into the payload for the quote-creation service."""
    composition = _load(data)
    try:
        result = quotes.finalize(composition)
    except StructuralValidationError as e:
        logger.info(f"Finalize rejected, travelers not allocated: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    if not result.submitted:
        raise HTTPException(
            status_code=422,
            detail={"message": "Composition is not ready", "reasons": result.readiness.reasons},
        )
    return result.payload
