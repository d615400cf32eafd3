"""
Unit tests for duplicate grouping

Tests cover:
1. Same-team and same-surname matching predicates
2. Forward-scan grouping
3. Team and surname partitioning
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from player_cleanup.models import PlayerRecord
from player_cleanup.grouping import (
    are_potential_duplicates,
    are_very_likely_duplicates,
    comparable,
    extract_surname,
    forward_scan_groups,
    group_by_surname,
    group_by_team,
)


def _player(id, name, team="X", age=24):
    return PlayerRecord(id=id, name=name, team=team, age=age)


def _edges(*pairs):
    """Symmetric predicate over player ids"""
    linked = {frozenset(pair) for pair in pairs}
    return lambda p1, p2: frozenset((p1.id, p2.id)) in linked


# =============================================================================
# Predicate Tests
# =============================================================================

class TestPotentialDuplicates:
    """Same-team predicate: age within 1, similarity > 0.8"""

    def test_typo_within_age_window(self):
        p1 = _player(1, "Joao Silva", age=24)
        p2 = _player(2, "Joao Silvaa", age=25)
        assert are_potential_duplicates(p1, p2)

    def test_age_gap_blocks_identical_names(self):
        p1 = _player(1, "Joao Silva", age=24)
        p2 = _player(2, "Joao Silva", age=27)
        assert not are_potential_duplicates(p1, p2)

    def test_different_team(self):
        p1 = _player(1, "Joao Silva", team="X")
        p2 = _player(2, "Joao Silva", team="x")
        assert not are_potential_duplicates(p1, p2)

    def test_missing_ages_count_as_zero(self):
        p1 = _player(1, "Joao Silva", age=None)
        p2 = _player(2, "Joao Silva", age=None)
        p3 = _player(3, "Joao Silva", age=2)
        assert are_potential_duplicates(p1, p2)
        assert not are_potential_duplicates(p1, p3)

    def test_normalization_applied(self):
        p1 = _player(1, "JOAO  SILVA")
        p2 = _player(2, "joao silva.")
        assert are_potential_duplicates(p1, p2)

    def test_dissimilar_names(self):
        p1 = _player(1, "Joao Silva")
        p2 = _player(2, "Pedro Silva")
        assert not are_potential_duplicates(p1, p2)


class TestVeryLikelyDuplicates:
    """Same-surname predicate: same age, similarity > 0.9"""

    def test_same_age_one_typo(self):
        p1 = _player(1, "Joao Silva", age=24)
        p2 = _player(2, "Joao Silvaa", age=24)
        assert are_very_likely_duplicates(p1, p2)

    def test_age_must_match_exactly(self):
        p1 = _player(1, "Joao Silva", age=24)
        p2 = _player(2, "Joao Silvaa", age=25)
        assert not are_very_likely_duplicates(p1, p2)

    def test_threshold_is_strict(self):
        """One substitution in 10 letters is exactly 0.9, not above it"""
        p1 = _player(1, "Joao Silva")
        p2 = _player(2, "Joao Sylva")
        assert not are_very_likely_duplicates(p1, p2)
        assert are_potential_duplicates(p1, p2)

    def test_custom_threshold(self):
        p1 = _player(1, "Joao Silva")
        p2 = _player(2, "Joao Sylva")
        assert are_very_likely_duplicates(p1, p2, threshold=0.85)


# =============================================================================
# Forward Scan Tests
# =============================================================================

class TestForwardScanGroups:
    """Tests for forward_scan_groups"""

    def test_pair(self):
        a, b, c = _player("a", "A"), _player("b", "B"), _player("c", "C")
        groups = forward_scan_groups([a, b, c], _edges(("a", "b")))
        assert [[p.id for p in g] for g in groups] == [["a", "b"]]

    def test_joins_through_collected_member(self):
        """c matches b (already in a's group) during the same scan"""
        a, b, c = _player("a", "A"), _player("b", "B"), _player("c", "C")
        groups = forward_scan_groups([a, b, c], _edges(("a", "b"), ("b", "c")))
        assert [[p.id for p in g] for g in groups] == [["a", "b", "c"]]

    def test_no_revisit_of_skipped_records(self):
        """c is scanned before b joins, so it is not pulled in afterwards"""
        a, b, c = _player("a", "A"), _player("b", "B"), _player("c", "C")
        groups = forward_scan_groups([a, c, b], _edges(("a", "b"), ("b", "c")))
        assert [[p.id for p in g] for g in groups] == [["a", "b"]]

    def test_grouped_records_do_not_seed_new_groups(self):
        a, b, c, d = (_player(i, i) for i in "abcd")
        groups = forward_scan_groups([a, b, c, d], _edges(("a", "b"), ("c", "d"), ("b", "d")))
        assert [[p.id for p in g] for g in groups] == [["a", "b", "d"]]

    def test_no_groups(self):
        players = [_player(i, i) for i in "abc"]
        assert forward_scan_groups(players, _edges()) == []

    def test_empty(self):
        assert forward_scan_groups([], _edges()) == []


# =============================================================================
# Partition Tests
# =============================================================================

class TestPartitions:
    """Tests for team and surname partitioning"""

    def test_group_by_team_preserves_order(self):
        players = [
            _player(1, "A", team="X"),
            _player(2, "B", team="Y"),
            _player(3, "C", team="X"),
            _player(4, "D", team=None),
        ]
        groups = group_by_team(players)
        assert list(groups) == ["X", "Y", None]
        assert [p.id for p in groups["X"]] == [1, 3]

    def test_extract_surname(self):
        assert extract_surname("Joao Silva") == "Silva"
        assert extract_surname("  Kevin De Bruyne  ") == "Bruyne"
        assert extract_surname("Joao  Silva") == "Silva"

    def test_extract_surname_rejected(self):
        assert extract_surname("Pepe") is None
        assert extract_surname("Joao da") is None     # too short
        assert extract_surname("joao silva") is None  # lowercase
        assert extract_surname("Joao Çelik") is None  # not A-Z
        assert extract_surname("") is None
        assert extract_surname(None) is None

    def test_group_by_surname_size_bounds(self):
        players = [_player(i, f"Player{i} Silva") for i in range(6)]
        players += [_player(10 + i, f"Player{i} Costa") for i in range(2)]
        players += [_player(20, "Player Neves")]

        groups = group_by_surname(players)
        assert list(groups) == ["Costa"]
        assert len(groups["Costa"]) == 2

    def test_group_by_surname_upper_bound_inclusive(self):
        players = [_player(i, f"Player{i} Silva") for i in range(5)]
        assert len(group_by_surname(players)["Silva"]) == 5

    def test_comparable_drops_invalid_names(self):
        players = [_player(1, "Joao Silva"), _player(2, "   "), _player(3, None)]
        assert [p.id for p in comparable(players)] == [1]
