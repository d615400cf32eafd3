"""
Player duplicate cleanup package

Offline maintenance for the TransferIQ player store:
- Name normalization and edit-distance similarity
- Duplicate grouping (abbreviated names, same team, same surname)
- Canonical record selection
- Invalid-name cleanup
"""

from .config import CleanupConfig, SupabaseConfig
from .errors import CleanupError, StoreConnectionError, StoreOperationError
from .models import PlayerRecord, DuplicateGroup, AbbreviatedMatch, CleanupReport
from .normalizer import normalize_name, is_abbreviated, is_invalid_name
from .similarity import levenshtein_distance, similarity
from .selector import select_best_version
from .grouping import (
    are_potential_duplicates,
    are_very_likely_duplicates,
    forward_scan_groups,
    group_by_team,
    group_by_surname,
    extract_surname,
)
from .cleaner import DuplicateCleaner, run_cleanup

__all__ = [
    # Config
    "CleanupConfig",
    "SupabaseConfig",
    # Errors
    "CleanupError",
    "StoreConnectionError",
    "StoreOperationError",
    # Models
    "PlayerRecord",
    "DuplicateGroup",
    "AbbreviatedMatch",
    "CleanupReport",
    # Matching
    "normalize_name",
    "is_abbreviated",
    "is_invalid_name",
    "levenshtein_distance",
    "similarity",
    "select_best_version",
    "are_potential_duplicates",
    "are_very_likely_duplicates",
    "forward_scan_groups",
    "group_by_team",
    "group_by_surname",
    "extract_surname",
    # Cleanup
    "DuplicateCleaner",
    "run_cleanup",
]
