"""
Duplicate grouping

Matching predicates and the forward-scan grouping used by the same-team
and same-surname phases.
"""
import re
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Sequence

from .models import PlayerRecord
from .normalizer import is_invalid_name, normalize_name
from .similarity import similarity


MatchPredicate = Callable[[PlayerRecord, PlayerRecord], bool]

_SURNAME_START_RE = re.compile(r"^[A-Z]")


# =============================================================================
# Matching predicates
# =============================================================================

def _matches(
    player1: PlayerRecord,
    player2: PlayerRecord,
    threshold: float,
    max_age_diff: int,
) -> bool:
    if player1.team != player2.team:
        return False

    if abs(player1.age_or_zero - player2.age_or_zero) > max_age_diff:
        return False

    name1 = normalize_name(player1.name)
    name2 = normalize_name(player2.name)
    return similarity(name1, name2) > threshold


def are_potential_duplicates(
    player1: PlayerRecord,
    player2: PlayerRecord,
    threshold: float = 0.8,
    max_age_diff: int = 1,
) -> bool:
    """Same team, age within a year, names more than 80% similar"""
    return _matches(player1, player2, threshold, max_age_diff)


def are_very_likely_duplicates(
    player1: PlayerRecord,
    player2: PlayerRecord,
    threshold: float = 0.9,
    max_age_diff: int = 0,
) -> bool:
    """Same team, same age, names more than 90% similar"""
    return _matches(player1, player2, threshold, max_age_diff)


# =============================================================================
# Grouping
# =============================================================================

def forward_scan_groups(
    players: Sequence[PlayerRecord],
    predicate: MatchPredicate,
) -> List[List[PlayerRecord]]:
    """
    Group records with a single forward scan.

    Each unprocessed record seeds a group; every later unprocessed record
    that matches any member collected so far joins it. Members of a formed
    group are never reconsidered. This is not a transitive closure: a record
    skipped before a later member joined is not revisited.
    """
    processed = set()
    groups: List[List[PlayerRecord]] = []

    for i, seed in enumerate(players):
        if i in processed:
            continue

        member_indices = [i]
        members = [seed]

        for j in range(i + 1, len(players)):
            if j in processed:
                continue
            candidate = players[j]
            if any(predicate(member, candidate) for member in members):
                member_indices.append(j)
                members.append(candidate)

        if len(members) > 1:
            processed.update(member_indices)
            groups.append(members)

    return groups


def comparable(players: Sequence[PlayerRecord]) -> List[PlayerRecord]:
    """Drop records without a usable name (handled by invalid-name cleanup)"""
    return [p for p in players if isinstance(p.name, str) and not is_invalid_name(p.name)]


def group_by_team(players: Sequence[PlayerRecord]) -> Dict[Optional[str], List[PlayerRecord]]:
    """Partition by exact team value, keeping first-seen order"""
    by_team: Dict[Optional[str], List[PlayerRecord]] = defaultdict(list)
    for player in players:
        by_team[player.team].append(player)
    return dict(by_team)


def extract_surname(name: Optional[str]) -> Optional[str]:
    """
    Last space-separated token when it looks like a surname.

    Requires at least two tokens, more than two characters and a leading
    uppercase letter: "Joao Silva" -> "Silva", "Joao da" -> None.
    """
    if not name:
        return None
    parts = name.strip().split(" ")
    if len(parts) < 2:
        return None
    surname = parts[-1]
    if len(surname) > 2 and _SURNAME_START_RE.match(surname):
        return surname
    return None


def group_by_surname(
    players: Sequence[PlayerRecord],
    min_size: int = 2,
    max_size: int = 5,
) -> Dict[str, List[PlayerRecord]]:
    """
    Surname groups worth checking.

    Groups larger than `max_size` are too ambiguous to resolve automatically.
    """
    by_surname: Dict[str, List[PlayerRecord]] = defaultdict(list)
    for player in players:
        surname = extract_surname(player.name)
        if surname:
            by_surname[surname].append(player)

    return {
        surname: members
        for surname, members in by_surname.items()
        if min_size <= len(members) <= max_size
    }
