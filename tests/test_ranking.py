"""
tests/test_ranking.py
─────────────────────────────────────────────────────────────────────
Commitment ranking: aggregation, pardons, podium and wall of shame.
"""
from __future__ import annotations

import datetime
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from club_treasury.services.errors import ValidationError
from club_treasury.services.ranking import (
    CATEGORY_ATTENDANCE,
    CATEGORY_FINANCE,
    CATEGORY_LOGISTICS,
    RankingAggregator,
    RankingEntry,
    ScoringEvent,
    aggregate,
)
from club_treasury.services.records import Player


def _ev(eid, points, player="a", category=CATEGORY_ATTENDANCE, source=None, pardoned=False, day=1):
    return ScoringEvent(
        id=eid, player_id=player, category=category, points=points,
        event_date=datetime.date(2025, 3, day),
        source_table="attendance" if source else None, source_id=source,
        is_pardoned=pardoned,
    )


# ════════════════════════════════════════════════════════════════════
#  aggregate
# ════════════════════════════════════════════════════════════════════

class TestAggregate:

    def test_pardoned_event_excluded(self):
        events = [_ev("1", 5), _ev("2", -10, source="r2", pardoned=True), _ev("3", -3)]
        entry = aggregate("a", events)
        assert entry.total_points == 2
        assert entry.positive_points == 5
        assert entry.negative_points == -3

    def test_breakdown_by_category(self):
        events = [
            _ev("1", 2),
            _ev("2", -5),
            _ev("3", 3, category=CATEGORY_LOGISTICS),
            _ev("4", -2, category=CATEGORY_FINANCE),
        ]
        entry = aggregate("a", events)
        assert entry.breakdown[CATEGORY_ATTENDANCE] == {"pos": 2, "neg": -5}
        assert entry.breakdown[CATEGORY_LOGISTICS] == {"pos": 3, "neg": 0}
        assert entry.breakdown[CATEGORY_FINANCE] == {"pos": 0, "neg": -2}

    def test_only_own_events(self):
        assert aggregate("a", [_ev("1", 5, player="b")]).total_points == 0


class TestShameThreshold:

    @pytest.mark.parametrize("total,alert", [(-10, True), (-11, True), (-9, False), (0, False)])
    def test_threshold(self, total, alert):
        assert RankingEntry("a", total_points=total).triggers_shame_alert is alert


# ════════════════════════════════════════════════════════════════════
#  RankingAggregator
# ════════════════════════════════════════════════════════════════════

@pytest.fixture
def aggregator():
    players = [
        Player(id="a", full_name="Ana"),
        Player(id="b", full_name="Beto"),
        Player(id="c", full_name="Caro"),
        Player(id="d", full_name="Dani"),
    ]
    events = [
        _ev("a1", 6, player="a"),
        _ev("b1", 2, player="b", day=2),
        _ev("b2", -5, player="b", source="rb", day=3),
        _ev("b3", -3, player="b", category=CATEGORY_LOGISTICS, source="rb", day=3),
        _ev("c1", -10, player="c", source="rc"),
        _ev("c2", -2, player="c", category=CATEGORY_FINANCE),
    ]
    return RankingAggregator(events, players)


class TestRankingAggregator:

    def test_duplicate_event_id(self):
        with pytest.raises(ValidationError):
            RankingAggregator([_ev("x", 1), _ev("x", 2)])

    def test_leaderboard_order(self, aggregator):
        board = aggregator.leaderboard()
        assert [e.player_id for e in board] == ["a", "d", "b", "c"]
        assert [e.total_points for e in board] == [6, 0, -6, -12]
        assert board[0].full_name == "Ana"

    def test_podium_excludes_negative_totals(self, aggregator):
        assert [e.player_id for e in aggregator.podium()] == ["a", "d"]

    def test_wall_of_shame_worst_first(self, aggregator):
        assert [e.player_id for e in aggregator.wall_of_shame()] == ["c", "b"]
        assert aggregator.shame_alert is True

    def test_events_for_newest_first(self, aggregator):
        assert [e.id for e in aggregator.events_for("b")] == ["b3", "b2", "b1"]

    def test_pardon_clears_every_negative_of_source_row(self, aggregator):
        entry = aggregator.pardon("b2")
        assert entry.total_points == 2
        assert all(e.is_pardoned for e in aggregator.events_for("b") if e.points < 0)
        assert aggregator.pardoned_sources() == {"attendance": ["rb"]}

    def test_pardon_idempotent(self, aggregator):
        first = aggregator.pardon("c1")
        second = aggregator.pardon("c1")
        assert first.total_points == second.total_points == -2
        assert aggregator.shame_alert is False

    @pytest.mark.parametrize("event_id", ["a1", "c2", "missing"])
    def test_pardon_rejected(self, aggregator, event_id):
        with pytest.raises(ValidationError):
            aggregator.pardon(event_id)
