"""Traveler group ledger: partitions the trip party into named groups."""

import logging
from typing import Callable

from tripquote.schemas.travelers import (
    DEFAULT_GROUP_ID,
    GroupValidation,
    PartitionStrategy,
    TravelerGroup,
    TripParty,
)
from tripquote.services.errors import (
    CompositionFrozenError,
    GroupRemovalNotConfirmed,
    StructuralValidationError,
)
from tripquote.services.smart_split import new_group_id, resolve_child_ages, smart_split

logger = logging.getLogger(__name__)


def default_group(party: TripParty, child_ages: list[int] | None = None) -> TravelerGroup:
    """The implicit whole-party group used when subgrouping is off."""
    return TravelerGroup(
        id=DEFAULT_GROUP_ID,
        name="All Travelers",
        adults=party.total_adults,
        children=party.total_children,
        child_ages=resolve_child_ages(party.total_children, child_ages),
    )


def validate_groups(party: TripParty, groups: list[TravelerGroup]) -> GroupValidation:
    """Check that groups exactly allocate the party. Always valid without subgroups."""
    if not party.use_subgroups:
        return GroupValidation(valid=True)

    if not groups:
        return GroupValidation(valid=False, reason="Please create at least one travel group")

    group_adults = sum(g.adults for g in groups)
    group_children = sum(g.children for g in groups)

    if group_adults != party.total_adults:
        return GroupValidation(
            valid=False,
            reason=f"All adults must be assigned to groups. Found {group_adults}/{party.total_adults} adults assigned.",
        )
    if group_children != party.total_children:
        return GroupValidation(
            valid=False,
            reason=f"All children must be assigned to groups. Found {group_children}/{party.total_children} children assigned.",
        )
    if any(g.traveler_count == 0 for g in groups):
        return GroupValidation(valid=False, reason="All groups must have at least one traveler assigned")

    return GroupValidation(valid=True)


class TravelerLedger:
    """Owns the traveler groups of one composition.

    Groups are stored by id and always looked up again on read, so a removed
    group simply stops resolving. The ``"default"`` sentinel is never stored;
    it resolves to the whole party while subgrouping is off.
    """

    def __init__(
        self,
        party: TripParty,
        groups: list[TravelerGroup] | None = None,
        id_factory: Callable[[], str] = new_group_id,
    ):
        self._party = party
        self._groups: dict[str, TravelerGroup] = {}
        self._id_factory = id_factory
        self._frozen = False
        for g in groups or []:
            if g.id == DEFAULT_GROUP_ID:
                continue
            self._groups[g.id] = g

    @property
    def party(self) -> TripParty:
        return self._party

    @property
    def use_subgroups(self) -> bool:
        return self._party.use_subgroups

    @property
    def groups(self) -> list[TravelerGroup]:
        """Stored groups in insertion order (empty while subgrouping is off)."""
        return list(self._groups.values())

    def set_party(self, total_adults: int, total_children: int = 0):
        self._check_editable()
        self._party = self._party.model_copy(
            update={"total_adults": total_adults, "total_children": total_children}
        )

    def set_subgrouping(self, enabled: bool):
        """Toggle subgrouping. Turning it off collapses to the default group."""
        self._check_editable()
        if not enabled and self._groups:
            logger.info(f"Subgrouping disabled, dropping {len(self._groups)} groups")
            self._groups.clear()
        self._party = self._party.model_copy(update={"use_subgroups": enabled})

    def partition(
        self,
        strategy: PartitionStrategy,
        child_ages: list[int] | None = None,
    ) -> list[TravelerGroup]:
        """Replace the current groups using ``strategy`` and return the result."""
        self._check_editable()
        if strategy == PartitionStrategy.GROUP_AUTO:
            groups = smart_split(
                self._party.total_adults,
                self._party.total_children,
                child_ages,
                id_factory=self._id_factory,
            )
            self._groups = {g.id: g for g in groups}
            self._party = self._party.model_copy(update={"use_subgroups": True})
            logger.info(f"Smart split created {len(groups)} groups")
            return groups

        # solo, couple and family all travel as one implicit group
        self.set_subgrouping(False)
        return [default_group(self._party, child_ages)]

    def add_group(
        self,
        name: str | None = None,
        adults: int = 0,
        children: int = 0,
        child_ages: list[int] | None = None,
    ) -> TravelerGroup:
        self._check_editable()
        group = TravelerGroup(
            id=self._id_factory(),
            name=name or f"Group {len(self._groups) + 1}",
            adults=adults,
            children=children,
            child_ages=child_ages or [],
        )
        self._groups[group.id] = group
        return group

    def update_group(self, group_id: str, **changes) -> TravelerGroup:
        self._check_editable()
        group = self._require(group_id)
        changes.pop("id", None)
        updated = TravelerGroup.model_validate({**group.model_dump(), **changes})
        self._groups[group_id] = updated
        return updated

    def remove_group(self, group_id: str, confirmed: bool = False) -> TravelerGroup:
        """Remove a group. Non-empty groups need ``confirmed=True`` from the caller."""
        self._check_editable()
        group = self._require(group_id)
        if group.traveler_count > 0 and not confirmed:
            raise GroupRemovalNotConfirmed(
                f'Removing "{group.name}" unassigns {group.adults} adults and '
                f"{group.children} children; confirmation required"
            )
        del self._groups[group_id]
        if group.traveler_count > 0:
            logger.info(f"Removed group {group_id} with {group.traveler_count} travelers")
        return group

    def duplicate_group(self, group_id: str) -> TravelerGroup:
        self._check_editable()
        source = self._require(group_id)
        copy = source.model_copy(
            update={"id": self._id_factory(), "name": f"{source.name} (Copy)"},
            deep=True,
        )
        self._groups[copy.id] = copy
        return copy

    def resolve(self, group_id: str) -> TravelerGroup | None:
        """Look a group up by id; the sentinel resolves only while subgrouping is off."""
        if group_id == DEFAULT_GROUP_ID:
            return None if self.use_subgroups else default_group(self._party)
        if not self.use_subgroups:
            return None
        return self._groups.get(group_id)

    def group_ids(self) -> list[str]:
        """Ids a selection may legitimately reference right now."""
        if not self.use_subgroups:
            return [DEFAULT_GROUP_ID]
        return list(self._groups)

    def validate(
        self,
        total_adults: int | None = None,
        total_children: int | None = None,
    ) -> GroupValidation:
        party = self._party
        if total_adults is not None or total_children is not None:
            party = party.model_copy(update={
                "total_adults": party.total_adults if total_adults is None else total_adults,
                "total_children": party.total_children if total_children is None else total_children,
            })
        return validate_groups(party, self.groups)

    def require_valid(self):
        result = self.validate()
        if not result.valid:
            raise StructuralValidationError(result.reason)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        self._frozen = True

    def _check_editable(self):
        if self._frozen:
            raise CompositionFrozenError("Traveler groups are frozen")

    def _require(self, group_id: str) -> TravelerGroup:
        group = self._groups.get(group_id)
        if group is None:
            raise ValueError(f"Traveler group {group_id} not found")
        return group
