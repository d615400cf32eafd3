"""
In-memory player store

Same contract as the Supabase store over a list of rows. Used to rehearse
a cleanup against a JSON export before touching the live database.
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from loguru import logger

from database.store import PlayerQuery, PlayerStore
from player_cleanup.normalizer import is_invalid_name


class InMemoryPlayerStore(PlayerStore):
    """Player rows kept in a list, in insertion order"""

    def __init__(self, rows: Optional[Iterable[Dict[str, Any]]] = None):
        self.rows: List[Dict[str, Any]] = [dict(row) for row in rows or []]
        self.deleted_ids: List[Any] = []
        self.closed = False

    # ==================== JSON import/export ====================

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryPlayerStore":
        """Load a JSON array of player rows"""
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise ValueError(f"{path}: expected a JSON array of player rows")
        logger.info(f"Loaded {len(rows)} players from {path}")
        return cls(rows)

    def dump_json_file(self, path: Union[str, Path]) -> None:
        """Write the remaining rows as a JSON array"""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.rows, f, ensure_ascii=False, indent=2, default=str)
        logger.info(f"Wrote {len(self.rows)} players to {path}")

    # ==================== PlayerStore ====================

    @staticmethod
    def _row_id(row: Dict[str, Any]) -> Any:
        return row.get("id", row.get("_id"))

    async def find(self, query: Optional[PlayerQuery] = None) -> List[Dict[str, Any]]:
        if query is None:
            return [dict(row) for row in self.rows]
        return [dict(row) for row in self.rows if query.matches(row)]

    async def find_invalid_names(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.rows if is_invalid_name(row.get("name"))]

    async def delete_by_id(self, record_id: Any) -> bool:
        for index, row in enumerate(self.rows):
            if self._row_id(row) == record_id:
                del self.rows[index]
                self.deleted_ids.append(record_id)
                return True
        return False

    async def delete_invalid_names(self) -> int:
        invalid = [row for row in self.rows if is_invalid_name(row.get("name"))]
        self.rows = [row for row in self.rows if not is_invalid_name(row.get("name"))]
        self.deleted_ids.extend(self._row_id(row) for row in invalid)
        return len(invalid)

    async def count(self, query: Optional[PlayerQuery] = None) -> int:
        if query is None:
            return len(self.rows)
        return sum(1 for row in self.rows if query.matches(row))

    async def close(self) -> None:
        self.closed = True
