"""Smart split: the automatic traveler-grouping strategy.

Thresholds carried over from the intake tool:

* parties of up to ``SMALL_PARTY_MAX_ADULTS`` adults are split into pairs,
  larger parties into threes;
* children are bucketed only when there is more than one of them, with
  ``OLDER_CHILD_MIN_AGE`` as the older/younger cutoff;
* children without a recorded age get synthetic ages counting up from
  ``SYNTHETIC_CHILD_START_AGE``.

When children are bucketed, the adults travel with them and are shared out
across the child buckets (younger bucket takes any remainder), so no
adult-only group is emitted. Sums always reconcile with the party.
"""

import math
import uuid
from typing import Callable

from tripquote.schemas.travelers import TravelerGroup, TravelerName, TravelerType

SMALL_PARTY_MAX_ADULTS = 6
SMALL_PARTY_CHUNK = 2
LARGE_PARTY_CHUNK = 3
OLDER_CHILD_MIN_AGE = 12
SYNTHETIC_CHILD_START_AGE = 10


def new_group_id() -> str:
    return f"group_{uuid.uuid4().hex[:10]}"


def adult_chunk_size(total_adults: int) -> int:
    return SMALL_PARTY_CHUNK if total_adults <= SMALL_PARTY_MAX_ADULTS else LARGE_PARTY_CHUNK


def chunk_adults(total_adults: int) -> list[int]:
    """Adult counts per group, e.g. 5 -> [2, 2, 1], 7 -> [3, 3, 1]."""
    if total_adults <= 0:
        return []
    size = adult_chunk_size(total_adults)
    count = math.ceil(total_adults / size)
    return [min(size, total_adults - i * size) for i in range(count)]


def resolve_child_ages(total_children: int, child_ages: list[int] | None = None) -> list[int]:
    """Known ages first, then synthetic ages 10, 11, ... for the rest."""
    ages = list(child_ages or [])[:total_children]
    for i in range(len(ages), total_children):
        ages.append(SYNTHETIC_CHILD_START_AGE + i)
    return ages


def split_children_by_age(ages: list[int]) -> tuple[list[int], list[int]]:
    """Return ``(older, younger)`` as lists of indexes into ``ages``."""
    older = [i for i, age in enumerate(ages) if age >= OLDER_CHILD_MIN_AGE]
    younger = [i for i, age in enumerate(ages) if age < OLDER_CHILD_MIN_AGE]
    return older, younger


def _even_shares(total: int, parts: int) -> list[int]:
    base, extra = divmod(total, parts)
    return [base + (1 if i >= parts - extra else 0) for i in range(parts)]


def _adult_names(start: int, count: int) -> list[TravelerName]:
    return [
        TravelerName(name=f"Adult {start + j + 1}", type=TravelerType.ADULT)
        for j in range(count)
    ]


def _child_names(ages: list[int], indexes: list[int]) -> list[TravelerName]:
    return [
        TravelerName(name=f"Child {i + 1}", type=TravelerType.CHILD, age=ages[i])
        for i in indexes
    ]


def smart_split(
    total_adults: int,
    total_children: int,
    child_ages: list[int] | None = None,
    id_factory: Callable[[], str] = new_group_id,
) -> list[TravelerGroup]:
    """Partition a party into traveler groups."""
    if total_adults < 0 or total_children < 0:
        raise ValueError("Traveler counts must not be negative")

    ages = resolve_child_ages(total_children, child_ages)

    if total_children > 1:
        older, younger = split_children_by_age(ages)
        buckets = [
            (label, idx, note)
            for label, idx, note in (
                ("Older Children", older, f"Children {OLDER_CHILD_MIN_AGE}+ years old"),
                ("Younger Children", younger, f"Children under {OLDER_CHILD_MIN_AGE} years old"),
            )
            if idx
        ]
        shares = _even_shares(total_adults, len(buckets))
        groups = []
        assigned = 0
        for (label, idx, note), adults in zip(buckets, shares):
            if adults:
                note = f"{note}, with {adults} accompanying adult{'s' if adults != 1 else ''}"
            groups.append(TravelerGroup(
                id=id_factory(),
                name=label,
                adults=adults,
                children=len(idx),
                child_ages=[ages[i] for i in idx],
                traveler_names=_adult_names(assigned, adults) + _child_names(ages, idx),
                notes=note,
            ))
            assigned += adults
        return groups

    chunks = chunk_adults(total_adults)
    if not chunks:
        if total_children == 0:
            return []
        chunks = [0]

    groups = []
    size = adult_chunk_size(total_adults)
    for i, adults in enumerate(chunks):
        children_idx = list(range(total_children)) if i == 0 else []
        groups.append(TravelerGroup(
            id=id_factory(),
            name=f"Group {i + 1}",
            adults=adults,
            children=len(children_idx),
            child_ages=[ages[j] for j in children_idx],
            traveler_names=_adult_names(i * size, adults) + _child_names(ages, children_idx),
            notes=f"Travel group {i + 1}",
        ))
    return groups
