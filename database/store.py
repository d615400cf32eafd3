"""
Player store contract

The cleanup routine only needs filtered reads, single deletes, one bulk
delete and a count, so any backend implementing PlayerStore can be used.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


def coerce_age(value: Any) -> Optional[int]:
    """Whole years from a stored age (fractions truncated, numeric strings parsed)"""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return int(float(value))
    return int(value)


@dataclass
class PlayerQuery:
    """Filter for player reads (all conditions are combined with AND)"""
    name_pattern: Optional[str] = None   # regex, searched anywhere in name
    case_insensitive: bool = False
    exclude_name: Optional[str] = None   # name must differ from this
    team: Optional[str] = None           # exact, case-sensitive
    match_team: bool = False             # apply `team` even when it is None
    min_age: Optional[int] = None        # missing age counts as 0
    max_age: Optional[int] = None

    def matches(self, row: Dict[str, Any]) -> bool:
        """Evaluate the filter against a raw row"""
        name = row.get("name")

        if self.name_pattern is not None:
            if not isinstance(name, str):
                return False
            flags = re.IGNORECASE if self.case_insensitive else 0
            if re.search(self.name_pattern, name, flags) is None:
                return False

        if self.exclude_name is not None and name == self.exclude_name:
            return False

        if self.match_team and row.get("team") != self.team:
            return False

        age = coerce_age(row.get("age")) or 0
        if self.min_age is not None and age < self.min_age:
            return False
        if self.max_age is not None and age > self.max_age:
            return False

        return True


class PlayerStore(ABC):
    """Record store used by the cleanup routine"""

    @abstractmethod
    async def find(self, query: Optional[PlayerQuery] = None) -> List[Dict[str, Any]]:
        """All rows matching `query` (all rows when None)"""

    @abstractmethod
    async def find_invalid_names(self) -> List[Dict[str, Any]]:
        """Rows whose name is missing, null, empty or whitespace only"""

    @abstractmethod
    async def delete_by_id(self, record_id: Any) -> bool:
        """Delete one row; False when it was already gone"""

    @abstractmethod
    async def delete_invalid_names(self) -> int:
        """Bulk delete every row with an invalid name"""

    @abstractmethod
    async def count(self, query: Optional[PlayerQuery] = None) -> int:
        """Number of rows matching `query`"""

    async def close(self) -> None:
        """Release the connection"""
