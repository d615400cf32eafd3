"""
Supabase player store
"""
from typing import Any, Callable, Dict, List, Optional

from loguru import logger
from supabase import Client, create_client

from database.store import PlayerQuery, PlayerStore
from player_cleanup.config import SupabaseConfig
from player_cleanup.errors import StoreConnectionError, StoreOperationError


# PostgREST filter for missing, empty or whitespace-only names
INVALID_NAME_FILTER = r"name.is.null,name.match.^\s*$"


class SupabasePlayerStore(PlayerStore):
    """Player rows in a Supabase (PostgREST) table"""

    def __init__(self, config: Optional[SupabaseConfig] = None, client: Optional[Client] = None):
        self.config = config or SupabaseConfig()
        self.table_name = self.config.players_table

        if client is not None:
            self.client: Optional[Client] = client
            return

        if not self.config.supabase_url or not self.config.supabase_key:
            raise StoreConnectionError("Set the SUPABASE_URL and SUPABASE_KEY environment variables")

        try:
            self.client = create_client(self.config.supabase_url, self.config.supabase_key)
        except Exception as e:
            logger.error(f"Supabase connection error: {e}")
            raise StoreConnectionError(str(e)) from e

        logger.info(f"Connected to Supabase (table: {self.table_name})")

    def _table(self):
        if self.client is None:
            raise StoreOperationError("access", "store is closed")
        return self.client.table(self.table_name)

    # ==================== Query helpers ====================

    @staticmethod
    def _apply_query(builder, query: Optional[PlayerQuery]):
        """Translate a PlayerQuery into PostgREST filters"""
        if query is None:
            return builder

        if query.name_pattern is not None:
            operator = "imatch" if query.case_insensitive else "match"
            builder = builder.filter("name", operator, query.name_pattern)

        if query.exclude_name is not None:
            builder = builder.neq("name", query.exclude_name)

        if query.match_team:
            if query.team is None:
                builder = builder.is_("team", "null")
            else:
                builder = builder.eq("team", query.team)

        bounds = []
        if query.min_age is not None:
            bounds.append(f"age.gte.{query.min_age}")
        if query.max_age is not None:
            bounds.append(f"age.lte.{query.max_age}")

        if bounds:
            includes_zero = (
                (query.min_age is None or query.min_age <= 0)
                and (query.max_age is None or query.max_age >= 0)
            )
            if includes_zero:
                # missing age counts as 0
                in_range = bounds[0] if len(bounds) == 1 else f"and({','.join(bounds)})"
                builder = builder.or_(f"age.is.null,{in_range}")
            else:
                if query.min_age is not None:
                    builder = builder.gte("age", query.min_age)
                if query.max_age is not None:
                    builder = builder.lte("age", query.max_age)

        return builder

    def _fetch_all(self, operation: str, build: Callable[[], Any]) -> List[Dict[str, Any]]:
        """Read every page of a select"""
        rows: List[Dict[str, Any]] = []
        offset = 0
        limit = self.config.page_size

        while True:
            try:
                result = build().order("id").range(offset, offset + limit - 1).execute()
            except Exception as e:
                logger.error(f"Player {operation} error: {e}")
                raise StoreOperationError(operation, str(e)) from e

            page = result.data or []
            rows.extend(page)

            if len(page) < limit:
                break

            offset += limit

        return rows

    # ==================== PlayerStore ====================

    async def find(self, query: Optional[PlayerQuery] = None) -> List[Dict[str, Any]]:
        return self._fetch_all(
            "find",
            lambda: self._apply_query(self._table().select("*"), query),
        )

    async def find_invalid_names(self) -> List[Dict[str, Any]]:
        return self._fetch_all(
            "find_invalid_names",
            lambda: self._table().select("*").or_(INVALID_NAME_FILTER),
        )

    async def delete_by_id(self, record_id: Any) -> bool:
        try:
            result = self._table().delete().eq("id", record_id).execute()
        except Exception as e:
            logger.error(f"Player delete error: {e}")
            raise StoreOperationError("delete", str(e), record_id=record_id) from e
        return bool(result.data)

    async def delete_invalid_names(self) -> int:
        try:
            result = self._table().delete().or_(INVALID_NAME_FILTER).execute()
        except Exception as e:
            logger.error(f"Invalid-name delete error: {e}")
            raise StoreOperationError("delete_invalid_names", str(e)) from e
        return len(result.data or [])

    async def count(self, query: Optional[PlayerQuery] = None) -> int:
        try:
            builder = self._apply_query(self._table().select("id", count="exact"), query)
            result = builder.execute()
        except Exception as e:
            logger.error(f"Player count error: {e}")
            raise StoreOperationError("count", str(e)) from e
        return result.count or 0

    async def close(self) -> None:
        if self.client is None:
            return
        self.client.postgrest.aclose()
        self.client = None
        logger.info("Disconnected from Supabase")
