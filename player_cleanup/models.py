"""
Data models (Pydantic)
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from database.store import coerce_age


class PlayerRecord(BaseModel):
    """Player row as read from the store"""
    id: Any = Field(..., description="Opaque unique identifier")
    name: Optional[str] = Field(None, description="Display name")
    team: Optional[str] = Field(None, description="Team label")
    age: Optional[int] = Field(None, description="Age in years")
    raw: Dict[str, Any] = Field(default_factory=dict, description="Original row")

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PlayerRecord":
        """Build a record from a store row, accepting `_id` as the key column"""
        record_id = row.get("id", row.get("_id"))
        return cls(
            id=record_id,
            name=row.get("name"),
            team=row.get("team"),
            age=coerce_age(row.get("age")),
            raw=dict(row),
        )

    @property
    def age_or_zero(self) -> int:
        """Age used for distance checks; missing age counts as 0"""
        return self.age or 0

    def describe(self) -> str:
        return f'"{self.name}" | {self.team} | Age: {self.age} | ID: {self.id}'


class DuplicateGroup(BaseModel):
    """Records one phase believes denote the same player"""
    phase: int = Field(..., description="Phase that produced the group")
    key: Optional[str] = Field(None, description="Team or surname the group was found under")
    members: List[PlayerRecord] = Field(..., description="Members in scan order")
    keep: PlayerRecord = Field(..., description="Canonical record")

    @property
    def remove(self) -> List[PlayerRecord]:
        return [m for m in self.members if m.id != self.keep.id]


class AbbreviatedMatch(BaseModel):
    """Phase 1 result: abbreviated record superseded by a full-name record"""
    abbreviated: PlayerRecord
    full_name: PlayerRecord


class CleanupReport(BaseModel):
    """Outcome of one cleanup run"""
    dry_run: bool = True
    removed_by_phase: Dict[int, int] = Field(default_factory=dict)
    abbreviated_matches: List[AbbreviatedMatch] = Field(default_factory=list)
    groups: List[DuplicateGroup] = Field(default_factory=list)
    invalid_names: int = 0
    updated: int = 0
    final_count: Optional[int] = None
    remaining_abbreviated: Optional[int] = None
    success: bool = False
    errors: List[str] = Field(default_factory=list)

    @property
    def removed(self) -> int:
        return sum(self.removed_by_phase.values())

    def add_removed(self, phase: int, count: int = 1) -> None:
        self.removed_by_phase[phase] = self.removed_by_phase.get(phase, 0) + count
