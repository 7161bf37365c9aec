"""
tests/test_records.py
─────────────────────────────────────────────────────────────────────
Row parsers and amount validation.
"""
from __future__ import annotations

import datetime
from decimal import Decimal
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from club_treasury.services.errors import InconsistentState, ValidationError
from club_treasury.services.records import (
    check_year,
    parse_attendance,
    parse_closing,
    parse_fee,
    parse_payment,
    parse_player,
    to_amount,
)


# ════════════════════════════════════════════════════════════════════
#  to_amount
# ════════════════════════════════════════════════════════════════════

class TestToAmount:

    @pytest.mark.parametrize("value,expected", [
        (None,       Decimal("0")),
        ("",         Decimal("0")),
        (1000,       Decimal("1000")),
        ("1500.50",  Decimal("1500.50")),
        (0.1,        Decimal("0.1")),
        (Decimal("7"), Decimal("7")),
    ])
    def test_valid(self, value, expected):
        assert to_amount(value) == expected

    @pytest.mark.parametrize("value", [-1, "-0.01", "abc", float("nan"), float("inf"), "Infinity", True])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            to_amount(value)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            to_amount(-5)

    @pytest.mark.parametrize("value", [None, ""])
    def test_required_rejects_missing(self, value):
        with pytest.raises(ValidationError, match="amount_total"):
            to_amount(value, "amount_total", required=True)

    def test_required_accepts_zero(self):
        assert to_amount(0, "amount_total", required=True) == Decimal("0")


class TestCheckYear:

    @pytest.mark.parametrize("value,expected", [(2025, 2025), ("1999", 1999), (1000, 1000), (9999, 9999)])
    def test_valid(self, value, expected):
        assert check_year(value) == expected

    @pytest.mark.parametrize("value", [0, -5, 999, 10000, None, "abc"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            check_year(value)


# ════════════════════════════════════════════════════════════════════
#  Parsers
# ════════════════════════════════════════════════════════════════════

class TestParsers:

    def test_payment_defaults(self):
        p = parse_payment({"id": "p1", "player_id": "a", "month": "3", "year": 2025,
                           "amount_total": "1000", "is_financed_by_team": None})
        assert p.month == 3
        assert p.amount_total == Decimal("1000")
        assert p.is_financed_by_team is False
        assert p.reimbursed_to_team is False
        assert p.payment_date is None

    def test_payment_date_from_iso_string(self):
        p = parse_payment({"id": "p1", "player_id": "a", "month": 3, "year": 2025,
                           "amount_total": 1, "payment_date": "2025-03-10T12:00:00Z"})
        assert p.payment_date == datetime.date(2025, 3, 10)

    def test_payment_requires_player(self):
        with pytest.raises(ValidationError):
            parse_payment({"id": "p1", "month": 3, "year": 2025, "amount_total": 1})

    def test_payment_negative_amount(self):
        with pytest.raises(ValidationError):
            parse_payment({"id": "p1", "player_id": "a", "month": 3, "year": 2025, "amount_total": -10})

    def test_fee_unknown_category(self):
        with pytest.raises(ValidationError):
            parse_fee({"category": "vip", "month": 1, "year": 2025, "amount": 10})

    def test_player_null_status_is_kept(self):
        player = parse_player({"id": "x", "full_name": "Juan", "status": None})
        assert player.status is None
        assert player.role == "player"

    def test_player_unknown_role(self):
        with pytest.raises(ValidationError):
            parse_player({"id": "x", "role": "capitán"})

    def test_director_flag(self):
        assert parse_player({"id": "x", "role": "dt"}).is_director

    def test_closing_allows_negative_savings(self):
        c = parse_closing({"month": 3, "year": 2025, "amount_paid": 20000,
                           "collected_total": 15000, "savings": "-5000"})
        assert c.savings == Decimal("-5000")

    def test_attendance_unknown_type(self):
        with pytest.raises(ValidationError):
            parse_attendance({"id": "r", "match_id": "m", "player_id": "a", "attendance_type": "volando"})

    def test_attendance_datetime_event_date(self):
        row = parse_attendance({"id": "r", "match_id": "m", "player_id": "a",
                                "confirmation_status": "confirmed", "attendance_type": "present",
                                "event_date": datetime.datetime(2025, 3, 8, 20, 0)})
        assert row.event_date == datetime.date(2025, 3, 8)


def test_inconsistent_state_str():
    assert str(InconsistentState(2025, 4, "pagos sin cuota configurada")) == "2025/04: pagos sin cuota configurada"
