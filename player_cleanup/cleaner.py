"""
Duplicate player cleanup

Phases (run in order, each sees the result of the previous ones):
1. Abbreviated vs full names: "J. Silva" removed when "Joao Silva" exists
   in the same team with an age within a year
2. Same-team near duplicates: similar names, age within a year
3. Same-surname near duplicates: very similar names, same team, same age
4. Invalid names: missing, empty or whitespace-only names

With `dry_run` (the default) nothing is deleted: planned removals are
logged and tracked in memory so later phases behave as after a real run.
"""
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Set

from loguru import logger

from database.store import PlayerQuery, PlayerStore
from .config import CleanupConfig
from .errors import CleanupError
from .grouping import (
    are_potential_duplicates,
    are_very_likely_duplicates,
    comparable,
    forward_scan_groups,
    group_by_surname,
    group_by_team,
)
from .models import AbbreviatedMatch, CleanupReport, DuplicateGroup, PlayerRecord
from .normalizer import ABBREVIATED_PATTERN, escape_pattern
from .selector import select_best_version


PHASE_NAMES = {
    1: "abbreviated vs full name duplicates",
    2: "same-team duplicates with different name formats",
    3: "similar surnames",
    4: "invalid names",
}


class DuplicateCleaner:
    """Runs the cleanup phases against one player store"""

    def __init__(self, store: PlayerStore, config: Optional[CleanupConfig] = None):
        self.store = store
        self.config = config or CleanupConfig()
        self.report = CleanupReport(dry_run=self.config.dry_run)
        # ids deleted (or planned for deletion) during this run
        self._removed_ids: Set[Any] = set()

    # ==================== Store helpers ====================

    async def _fetch_remaining(self, query: Optional[PlayerQuery] = None) -> List[PlayerRecord]:
        rows = await self.store.find(query)
        records = [PlayerRecord.from_row(row) for row in rows]
        return [r for r in records if r.id not in self._removed_ids]

    async def _remove(self, phase: int, player: PlayerRecord) -> None:
        if not self.config.dry_run:
            await self.store.delete_by_id(player.id)
        self._removed_ids.add(player.id)
        self.report.add_removed(phase)

    async def _resolve_group(self, phase: int, key: Optional[str], members: List[PlayerRecord]) -> int:
        """Keep the canonical record of a group and remove the rest"""
        keep = select_best_version(members)
        group = DuplicateGroup(phase=phase, key=key, members=members, keep=keep)

        logger.info(f"Duplicate group found ({key}):")
        for member in members:
            logger.info(f"   {member.describe()}")
        logger.info(f'   Keeping: "{keep.name}"')

        for member in group.remove:
            await self._remove(phase, member)

        self.report.groups.append(group)
        return len(group.remove)

    @property
    def _verb(self) -> str:
        return "Would remove" if self.config.dry_run else "Removing"

    # ==================== Phases ====================

    async def cleanup_abbreviated_names(self) -> int:
        """Phase 1: remove "J. Silva" when a matching full name exists"""
        logger.info(f"Phase 1: {PHASE_NAMES[1]}")

        abbreviated = await self._fetch_remaining(PlayerQuery(name_pattern=ABBREVIATED_PATTERN))
        logger.info(f"Found {len(abbreviated)} abbreviated names to check")

        window = self.config.abbreviated_max_age_diff
        removed = 0

        for player in abbreviated:
            parts = player.name.split(" ")
            if len(parts) < 2:
                continue

            initial = parts[0].replace(".", "", 1)
            rest_of_name = " ".join(parts[1:])

            matches = await self._fetch_remaining(PlayerQuery(
                name_pattern=f"^{initial}[a-zA-Z]+.*{escape_pattern(rest_of_name)}$",
                case_insensitive=True,
                exclude_name=player.name,
                team=player.team,
                match_team=True,
                min_age=player.age_or_zero - window,
                max_age=player.age_or_zero + window,
            ))
            if not matches:
                continue

            full_name_player = matches[0]
            logger.info(f'{self._verb} abbreviated "{player.name}" in favor of "{full_name_player.name}"')

            await self._remove(1, player)
            self.report.abbreviated_matches.append(
                AbbreviatedMatch(abbreviated=player, full_name=full_name_player)
            )
            removed += 1

        return removed

    async def cleanup_team_duplicates(self) -> int:
        """Phase 2: near-duplicate names within the same team"""
        logger.info(f"Phase 2: {PHASE_NAMES[2]}")

        players = comparable(await self._fetch_remaining())
        predicate = partial(
            are_potential_duplicates,
            threshold=self.config.team_similarity_threshold,
            max_age_diff=self.config.team_max_age_diff,
        )

        removed = 0
        for team, members in group_by_team(players).items():
            if len(members) <= 1:
                continue
            for group in forward_scan_groups(members, predicate):
                removed += await self._resolve_group(2, team, group)

        return removed

    async def cleanup_surname_duplicates(self) -> int:
        """Phase 3: very similar names sharing a surname"""
        logger.info(f"Phase 3: {PHASE_NAMES[3]}")

        players = comparable(await self._fetch_remaining())
        predicate = partial(
            are_very_likely_duplicates,
            threshold=self.config.surname_similarity_threshold,
            max_age_diff=self.config.surname_max_age_diff,
        )
        surname_groups = group_by_surname(
            players,
            min_size=self.config.surname_group_min,
            max_size=self.config.surname_group_max,
        )

        removed = 0
        for surname, members in surname_groups.items():
            logger.debug(f'Checking surname "{surname}" with {len(members)} players')
            for group in forward_scan_groups(members, predicate):
                removed += await self._resolve_group(3, surname, group)

        return removed

    async def cleanup_invalid_names(self) -> int:
        """Phase 4: missing, empty or whitespace-only names"""
        logger.info(f"Phase 4: {PHASE_NAMES[4]}")

        rows = await self.store.find_invalid_names()
        invalid = [
            record for record in (PlayerRecord.from_row(row) for row in rows)
            if record.id not in self._removed_ids
        ]
        if not invalid:
            return 0

        logger.info(f"{self._verb} {len(invalid)} players with invalid names")
        removed = len(invalid)
        if not self.config.dry_run:
            removed = await self.store.delete_invalid_names()
            if removed != len(invalid):
                logger.warning(f"Found {len(invalid)} invalid names but the store deleted {removed}")

        self._removed_ids.update(record.id for record in invalid)
        self.report.add_removed(4, removed)
        self.report.invalid_names = removed
        return removed

    # ==================== Run ====================

    def _phases(self) -> Dict[int, Callable]:
        return {
            1: self.cleanup_abbreviated_names,
            2: self.cleanup_team_duplicates,
            3: self.cleanup_surname_duplicates,
            4: self.cleanup_invalid_names,
        }

    async def verify(self) -> int:
        """Count abbreviated names left after the run"""
        remaining = len(await self._fetch_remaining(PlayerQuery(name_pattern=ABBREVIATED_PATTERN)))
        self.report.remaining_abbreviated = remaining

        logger.info(f"Abbreviated names remaining: {remaining}")
        if remaining > 0:
            logger.info("(These might be unique players or need manual review)")
        return remaining

    async def run(self) -> CleanupReport:
        """Run every enabled phase, then the summary and verification"""
        if self.config.dry_run:
            logger.info("Dry run: no players will be deleted (pass --execute to apply)")
        else:
            logger.warning("Duplicate players will be permanently removed from the database")

        phases = self._phases()
        for phase in self.config.enabled_phases:
            await phases[phase]()

        total = await self.store.count()
        if self.config.dry_run:
            total -= len(self._removed_ids)
        self.report.final_count = total

        self.log_summary()
        await self.verify()

        self.report.success = True
        return self.report

    def log_summary(self) -> None:
        report = self.report
        label = "Players that would be removed" if report.dry_run else "Players removed"

        logger.info("Cleanup Summary:")
        for phase, count in sorted(report.removed_by_phase.items()):
            logger.info(f"   Phase {phase} ({PHASE_NAMES[phase]}): {count}")
        logger.info(f"   {label}: {report.removed}")
        logger.info(f"   Players updated: {report.updated}")
        if report.final_count is not None:
            logger.info(f"   Final player count: {report.final_count:,}")
        logger.info(f"   Estimated duplicates cleaned: {report.removed - report.invalid_names}")


async def run_cleanup(
    store_factory: Callable[[], PlayerStore],
    config: Optional[CleanupConfig] = None,
) -> CleanupReport:
    """
    Connect, clean up and always disconnect.

    Any error aborts the run; the returned report then has
    success=False and the counters reached before the failure.
    """
    config = config or CleanupConfig()

    try:
        store = store_factory()
    except CleanupError as e:
        logger.error(f"Could not connect to the player store: {e}")
        return CleanupReport(dry_run=config.dry_run, success=False, errors=[str(e)])

    cleaner = DuplicateCleaner(store, config)
    try:
        return await cleaner.run()
    except CleanupError as e:
        logger.error(f"Error during cleanup: {e}")
        cleaner.report.success = False
        cleaner.report.errors.append(str(e))
        cleaner.log_summary()
        return cleaner.report
    except Exception as e:
        logger.exception(f"Unexpected error during cleanup: {e}")
        cleaner.report.success = False
        cleaner.report.errors.append(f"{type(e).__name__}: {e}")
        cleaner.log_summary()
        return cleaner.report
    finally:
        await store.close()
        logger.info("Disconnected from player store")
