"""Travelers router: party partitioning and group allocation checks."""

from fastapi import APIRouter

from tripquote.schemas.travelers import (
    GroupValidation,
    GroupValidationRequest,
    PartitionRequest,
    TravelerGroup,
    TripParty,
)
from tripquote.services.traveler_ledger import TravelerLedger, validate_groups

router = APIRouter()


@router.post("/partition", response_model=list[TravelerGroup])
async def partition_travelers(req: PartitionRequest):
    """Split a party into groups with the requested strategy."""
    ledger = TravelerLedger(TripParty(total_adults=req.total_adults, total_children=req.total_children))
    return ledger.partition(req.strategy, child_ages=req.child_ages)


@router.post("/validate", response_model=GroupValidation)
async def validate_travelers(req: GroupValidationRequest):
    """Check that the groups exactly allocate the party."""
    return validate_groups(req.party, req.groups)
