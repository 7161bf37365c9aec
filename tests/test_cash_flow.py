"""
tests/test_cash_flow.py
─────────────────────────────────────────────────────────────────────
Monthly club cash flow, the club fee discount and closings.
"""
from __future__ import annotations

from decimal import Decimal
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from club_treasury.services.account_reconciler import AccountStatus
from club_treasury.services.billing import BillingMonth
from club_treasury.services.cash_flow import (
    ClosingBook,
    ClubCashFlowAggregator,
    suggested_club_fee,
)
from club_treasury.services.errors import ValidationError
from club_treasury.services.fee_schedule import FeeScheduleResolver
from club_treasury.services.payment_ledger import PaymentLedger
from club_treasury.services.records import ClubClosing, FeeEntry, MonthlySetting, Payment

MARCH = BillingMonth(2025, 3)


def _pay(pid, player, amount="1000", month=3, financed=False, reimbursed=False):
    return Payment(id=pid, player_id=player, month=month, year=2025, amount_total=Decimal(amount),
                   is_financed_by_team=financed, reimbursed_to_team=reimbursed)


@pytest.fixture
def fees():
    return FeeScheduleResolver([FeeEntry("activo", 3, 2025, Decimal("1000"))])


# ════════════════════════════════════════════════════════════════════
#  Club fee
# ════════════════════════════════════════════════════════════════════

class TestSuggestedClubFee:

    @pytest.mark.parametrize("paid_count,expected", [
        (0,  Decimal("0")),
        (1,  Decimal("1000")),
        (15, Decimal("15000")),
        (16, Decimal("15000")),
        (17, Decimal("16000")),
    ])
    def test_threshold(self, paid_count, expected):
        assert suggested_club_fee(paid_count, Decimal("1000")) == expected


# ════════════════════════════════════════════════════════════════════
#  compute_month
# ════════════════════════════════════════════════════════════════════

class TestComputeMonth:

    def test_live_estimate(self, fees):
        payments = PaymentLedger([
            _pay("1", "a"),
            _pay("2", "b"),
            _pay("3", "c", financed=True),
            _pay("4", "d", month=4),
        ])
        stats = ClubCashFlowAggregator.compute_month(MARCH, payments, fees, ClosingBook())
        assert stats.total_collected == Decimal("3000")
        assert stats.total_financed_this_month == Decimal("1000")
        assert stats.paid_count == 3
        assert stats.suggested_club_fee == Decimal("3000")
        assert stats.amount_paid_to_club == Decimal("3000")
        assert stats.has_closed is False
        assert stats.savings == Decimal("-1000")

    def test_two_payments_same_player_count_once(self, fees):
        payments = PaymentLedger([_pay("1", "a", "500"), _pay("2", "a", "500")])
        stats = ClubCashFlowAggregator.compute_month(MARCH, payments, fees, ClosingBook())
        assert stats.paid_count == 1
        assert stats.total_collected == Decimal("1000")

    def test_zero_amount_payment_not_counted_as_payer(self, fees):
        payments = PaymentLedger([_pay("1", "a", "0")])
        stats = ClubCashFlowAggregator.compute_month(MARCH, payments, fees, ClosingBook())
        assert stats.paid_count == 0
        assert stats.suggested_club_fee == Decimal("0")

    def test_reimbursed_financed_still_counted_as_financed(self, fees):
        payments = PaymentLedger([_pay("1", "a", financed=True, reimbursed=True)])
        stats = ClubCashFlowAggregator.compute_month(MARCH, payments, fees, ClosingBook())
        assert stats.total_financed_this_month == Decimal("1000")

    def test_discount_with_sixteen_payers(self, fees):
        payments = PaymentLedger(_pay(str(i), f"p{i}") for i in range(16))
        stats = ClubCashFlowAggregator.compute_month(MARCH, payments, fees, ClosingBook())
        assert stats.suggested_club_fee == Decimal("15000")
        assert stats.savings == Decimal("1000")

    def test_closing_overrides_live_values(self, fees):
        payments = PaymentLedger([_pay("1", "a"), _pay("2", "b", financed=True)])
        closings = ClosingBook([ClubClosing(3, 2025, Decimal("1500"), Decimal("2000"),
                                            Decimal("-500"), "pagado en efectivo")])
        stats = ClubCashFlowAggregator.compute_month(MARCH, payments, fees, closings)
        assert stats.has_closed is True
        assert stats.amount_paid_to_club == Decimal("1500")
        assert stats.suggested_club_fee == Decimal("2000")
        assert stats.savings == Decimal("2000") - Decimal("1000") - Decimal("1500")
        assert stats.notes == "pagado en efectivo"


# ════════════════════════════════════════════════════════════════════
#  finalize_closing
# ════════════════════════════════════════════════════════════════════

class TestFinalizeClosing:

    def test_snapshot_is_not_changed_by_later_payments(self, fees):
        payments = PaymentLedger(_pay(str(i), f"p{i}") for i in range(16))
        closings = ClosingBook()
        closing = ClubCashFlowAggregator.finalize_closing(MARCH, 15000, "", payments, fees, closings)
        assert closing.collected_total == Decimal("16000")
        assert closing.savings == Decimal("1000")

        payments.record_payment({"player_id": "late", "month": 3, "year": 2025, "amount_total": "1000"})

        stored = closings.get(MARCH)
        assert stored.collected_total == Decimal("16000")
        assert stored.savings == Decimal("1000")
        live = ClubCashFlowAggregator.compute_month(MARCH, payments, fees, ClosingBook())
        assert live.total_collected == Decimal("17000")

    def test_refinalize_replaces(self, fees):
        payments = PaymentLedger([_pay("1", "a")])
        closings = ClosingBook()
        ClubCashFlowAggregator.finalize_closing(MARCH, 500, "primero", payments, fees, closings)
        ClubCashFlowAggregator.finalize_closing(MARCH, 800, "segundo", payments, fees, closings)
        assert len(closings) == 1
        assert closings.get(MARCH).amount_paid == Decimal("800")
        assert closings.get(MARCH).notes == "segundo"

    def test_negative_amount_leaves_book_untouched(self, fees):
        closings = ClosingBook()
        with pytest.raises(ValidationError):
            ClubCashFlowAggregator.finalize_closing(MARCH, -1, "", PaymentLedger(), fees, closings)
        assert len(closings) == 0

    def test_missing_amount_paid_rejected(self, fees):
        closings = ClosingBook()
        with pytest.raises(ValidationError, match="amount_paid"):
            ClubCashFlowAggregator.finalize_closing(MARCH, None, "", PaymentLedger(), fees, closings)
        assert len(closings) == 0


# ════════════════════════════════════════════════════════════════════
#  compute_overview
# ════════════════════════════════════════════════════════════════════

class TestOverview:

    def test_totals(self, fees):
        accounts = [
            AccountStatus("a", total_expected=Decimal("3000"), total_paid=Decimal("1000")),
            AccountStatus("b", total_expected=Decimal("1000"), total_paid=Decimal("4000")),
        ]
        payments = PaymentLedger([
            _pay("1", "a", financed=True),
            _pay("2", "b", "700", month=1, financed=True),
            _pay("3", "b", month=2, financed=True, reimbursed=True),
        ])
        overview = ClubCashFlowAggregator.compute_overview(
            accounts, payments, MARCH, fees, MonthlySetting(3, 2025, is_group_payment=True)
        )
        assert overview.total_debt == Decimal("2000")
        assert overview.total_financed == Decimal("1700")
        assert overview.group_payment_savings == Decimal("1000")

    def test_no_group_payment(self, fees):
        overview = ClubCashFlowAggregator.compute_overview([], PaymentLedger(), MARCH, fees)
        assert overview.group_payment_savings == Decimal("0")
        assert overview.total_debt == Decimal("0")
