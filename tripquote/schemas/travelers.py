from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_GROUP_ID = "default"


class PartitionStrategy(str, Enum):
    SOLO = "solo"
    COUPLE = "couple"
    FAMILY = "family"
    GROUP_AUTO = "group_auto"


class TravelerType(str, Enum):
    ADULT = "adult"
    CHILD = "child"


class TripParty(BaseModel):
    total_adults: int = Field(ge=0)
    total_children: int = Field(default=0, ge=0)
    use_subgroups: bool = False

    @property
    def total_travelers(self) -> int:
        return self.total_adults + self.total_children


class TravelerName(BaseModel):
    name: str
    type: TravelerType
    age: int | None = None


class TravelerGroup(BaseModel):
    id: str
    name: str
    adults: int = Field(default=0, ge=0)
    children: int = Field(default=0, ge=0)
    child_ages: list[int] = Field(default_factory=list)
    traveler_names: list[TravelerName] = Field(default_factory=list)
    notes: str | None = None

    @property
    def traveler_count(self) -> int:
        return self.adults + self.children


class GroupValidation(BaseModel):
    valid: bool
    reason: str | None = None


class PartitionRequest(BaseModel):
    total_adults: int = Field(ge=0)
    total_children: int = Field(default=0, ge=0)
    strategy: PartitionStrategy = PartitionStrategy.GROUP_AUTO
    child_ages: list[int] | None = None


class GroupValidationRequest(BaseModel):
    party: TripParty
    groups: list[TravelerGroup] = Field(default_factory=list)
