"""
Canonical record selection for a duplicate group
"""
from functools import reduce
from typing import Sequence

from .models import PlayerRecord
from .normalizer import is_abbreviated


def _prefer(best: PlayerRecord, current: PlayerRecord) -> PlayerRecord:
    best_name = best.name or ""
    current_name = current.name or ""

    best_is_abbrev = is_abbreviated(best_name)
    current_is_abbrev = is_abbreviated(current_name)

    # Full names beat abbreviations
    if best_is_abbrev and not current_is_abbrev:
        return current
    if current_is_abbrev and not best_is_abbrev:
        return best

    # Longer (more complete) names win
    if len(current_name) > len(best_name):
        return current

    # Ties keep the earlier record
    return best


def select_best_version(players: Sequence[PlayerRecord]) -> PlayerRecord:
    """
    Pick the record to keep.

    Left fold over the input order:
    1. a non-abbreviated name beats an abbreviated one
    2. otherwise the strictly longer name wins
    3. otherwise the first record seen is kept

    The result depends on input order when names tie.
    """
    if not players:
        raise ValueError("cannot select from an empty group")
    return reduce(_prefer, players)
