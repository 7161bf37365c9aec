"""
tests/test_account_reconciler.py
─────────────────────────────────────────────────────────────────────
Player account reconciliation: expected dues vs payments, month by month.
"""
from __future__ import annotations

from decimal import Decimal
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from club_treasury.services.account_reconciler import (
    STATUS_DEBT,
    STATUS_FINANCED,
    STATUS_PAID,
    AccountReconciler,
    MonthlyAccountLine,
)
from club_treasury.services.billing import BillingMonth
from club_treasury.services.fee_schedule import FeeScheduleResolver
from club_treasury.services.monthly_status import PlayerMonthlyStatusResolver
from club_treasury.services.payment_ledger import PaymentLedger
from club_treasury.services.records import FeeEntry, MonthlyStatusOverride, Payment, Player

MARCH = BillingMonth(2025, 3)


def _fees(*entries):
    return FeeScheduleResolver(FeeEntry(c, m, 2025, Decimal(a)) for c, m, a in entries)


def _pay(pid, month, amount, player="p", financed=False, reimbursed=False):
    return Payment(id=pid, player_id=player, month=month, year=2025, amount_total=Decimal(amount),
                   is_financed_by_team=financed, reimbursed_to_team=reimbursed)


def _account(player, fees, payments=(), statuses=(), start=MARCH, as_of=MARCH, **kwargs):
    return AccountReconciler.compute_account(
        player, fees, PlayerMonthlyStatusResolver(statuses), PaymentLedger(payments),
        start, as_of, **kwargs
    )


# ════════════════════════════════════════════════════════════════════
#  Scenarios
# ════════════════════════════════════════════════════════════════════

class TestComputeAccount:

    def test_single_paid_month(self):
        player = Player(id="p", status="activo")
        acc = _account(player, _fees(("activo", 3, "5000")), [_pay("x", 3, "5000")])
        assert acc.monthly_status == [
            MonthlyAccountLine(month=3, year=2025, expected=Decimal("5000"), paid=Decimal("5000"), status=STATUS_PAID)
        ]
        assert acc.total_expected == Decimal("5000")
        assert acc.total_paid == Decimal("5000")
        assert acc.total_debt == Decimal("0")
        assert acc.financed_debt == Decimal("0")

    def test_partial_payment_is_debt(self):
        acc = _account(Player(id="p"), _fees(("activo", 3, "5000")), [_pay("x", 3, "3000")])
        assert acc.monthly_status[0].status == STATUS_DEBT
        assert acc.monthly_status[0].shortfall == Decimal("2000")
        assert acc.total_debt == Decimal("2000")
        assert acc.debt_months == 1

    def test_payments_in_same_month_add_up(self):
        payments = [_pay("x", 3, "2500"), _pay("y", 3, "2500")]
        acc = _account(Player(id="p"), _fees(("activo", 3, "5000")), payments)
        assert acc.monthly_status[0].status == STATUS_PAID

    def test_debt_never_negative(self):
        fees = _fees(("activo", 3, "1000"), ("activo", 4, "1000"))
        payments = [_pay("x", 3, "5000"), _pay("y", 4, "5000")]
        acc = _account(Player(id="p"), fees, payments, as_of=BillingMonth(2025, 4))
        assert acc.total_paid > acc.total_expected
        assert acc.total_debt == Decimal("0")

    def test_overpayment_does_not_cover_other_month_status(self):
        fees = _fees(("activo", 3, "1000"), ("activo", 4, "1000"))
        acc = _account(Player(id="p"), fees, [_pay("x", 3, "2000")], as_of=BillingMonth(2025, 4))
        assert [line.status for line in acc.monthly_status] == [STATUS_PAID, STATUS_DEBT]
        assert acc.total_debt == Decimal("0")

    def test_financed_then_reimbursed(self):
        fees = _fees(("activo", 3, "5000"))
        acc = _account(Player(id="p"), fees, [_pay("x", 3, "5000", financed=True)])
        assert acc.monthly_status[0].status == STATUS_FINANCED
        assert acc.financed_debt == Decimal("5000")
        assert acc.total_paid == Decimal("5000")

        ledger = PaymentLedger([_pay("x", 3, "5000", financed=True)])
        ledger.mark_reimbursed("x")
        acc = AccountReconciler.compute_account(
            Player(id="p"), fees, PlayerMonthlyStatusResolver(), ledger, MARCH, MARCH
        )
        assert acc.financed_debt == Decimal("0")
        assert acc.total_paid == Decimal("5000")
        assert acc.monthly_status[0].status == STATUS_FINANCED

    def test_zero_fee_month_excluded(self):
        fees = _fees(("activo", 3, "5000"))
        acc = _account(Player(id="p"), fees, [_pay("x", 3, "5000")], as_of=BillingMonth(2025, 4))
        assert [(line.year, line.month) for line in acc.monthly_status] == [(2025, 3)]
        assert acc.total_expected == Decimal("5000")

    def test_payment_in_zero_fee_month_is_reported_not_counted(self):
        acc = _account(Player(id="p"), _fees(), [_pay("x", 3, "700")])
        assert acc.monthly_status == []
        assert acc.total_paid == Decimal("0")
        assert [(w.year, w.month) for w in acc.orphan_payment_months] == [(2025, 3)]

    def test_financed_in_zero_fee_month_still_owed_to_team(self):
        acc = _account(Player(id="p"), _fees(), [_pay("x", 3, "700", financed=True)])
        assert acc.monthly_status == []
        assert acc.financed_debt == Decimal("700")

    def test_monthly_override_changes_category(self):
        fees = _fees(("activo", 3, "5000"), ("pasivo", 3, "1000"))
        acc = _account(Player(id="p", status="activo"), fees,
                       statuses=[MonthlyStatusOverride("p", 3, 2025, "pasivo")])
        assert acc.total_expected == Decimal("1000")

    def test_director_surcharge_only_for_dt(self):
        fees = _fees(("activo", 3, "5000"), ("dt", 3, "2000"))
        dt = _account(Player(id="p", role="dt"), fees)
        player = _account(Player(id="p", role="player"), fees)
        assert dt.total_expected == Decimal("7000")
        assert player.total_expected == Decimal("5000")

    def test_other_players_payments_ignored(self):
        acc = _account(Player(id="p"), _fees(("activo", 3, "5000")), [_pay("x", 3, "5000", player="q")])
        assert acc.total_paid == Decimal("0")

    def test_cents_preserved_across_season(self):
        fees = FeeScheduleResolver(FeeEntry("activo", m, 2025, Decimal("0.10")) for m in range(1, 13))
        payments = [_pay(f"x{m}", m, "0.10") for m in range(1, 13)]
        acc = _account(Player(id="p"), fees, payments,
                       start=BillingMonth(2025, 1), as_of=BillingMonth(2025, 12))
        assert acc.total_expected == Decimal("1.20")
        assert acc.total_paid == Decimal("1.20")

    def test_most_recent_first(self):
        fees = _fees(("activo", 3, "1"), ("activo", 4, "1"))
        acc = _account(Player(id="p"), fees, as_of=BillingMonth(2025, 4))
        assert [line.month for line in acc.most_recent_first()] == [4, 3]

    def test_as_of_before_season_start_is_empty(self):
        acc = _account(Player(id="p"), _fees(("activo", 3, "1")), as_of=BillingMonth(2025, 2))
        assert acc.monthly_status == []
        assert acc.total_debt == Decimal("0")


class TestIterationCap:

    def test_truncated_flag_and_stop(self):
        fees = FeeScheduleResolver()
        for year in (2025, 2026):
            for m in range(1, 13):
                fees.upsert("activo", m, year, 10)
        acc = AccountReconciler.compute_account(
            Player(id="p"), fees, PlayerMonthlyStatusResolver(), PaymentLedger(),
            BillingMonth(2025, 1), BillingMonth(2026, 12), max_months=6,
        )
        assert acc.truncated is True
        assert len(acc.monthly_status) == 6
        assert acc.monthly_status[-1].month == 6

    def test_within_cap_not_truncated(self):
        acc = _account(Player(id="p"), _fees(("activo", 3, "1")))
        assert acc.truncated is False


def test_compute_all_one_account_per_player():
    players = [Player(id="a"), Player(id="b")]
    accounts = AccountReconciler.compute_all(
        players, _fees(("activo", 3, "100")), PlayerMonthlyStatusResolver(),
        PaymentLedger([_pay("x", 3, "100", player="a")]), MARCH, MARCH,
    )
    assert [(a.player_id, a.total_debt) for a in accounts] == [("a", Decimal("0")), ("b", Decimal("100"))]
