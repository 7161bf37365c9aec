"""
services/account_reconciler.py
─────────────────────────────────────────────────────────────────────
Cuenta corriente de un jugador
Walks every month from the season start to a given month and reconciles
expected dues against recorded payments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List

from .billing import BillingMonth, iter_months, months_between
from .errors import InconsistentState
from .fee_schedule import FeeScheduleResolver
from .monthly_status import PlayerMonthlyStatusResolver
from .payment_ledger import PaymentLedger
from .records import DT, ZERO, Player

logger = logging.getLogger(__name__)

# Tope de meses que recorre una cuenta (10 años)
MAX_MONTHS = 120

STATUS_PAID     = "paid"
STATUS_DEBT     = "debt"
STATUS_FINANCED = "financed"


# ────────────────────────────────────────────────────────────────────
#  Data Transfer Objects
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MonthlyAccountLine:
    """Estado de un mes con cuota configurada."""
    month: int
    year: int
    expected: Decimal
    paid: Decimal
    status: str          # paid / debt / financed

    @property
    def shortfall(self) -> Decimal:
        return max(self.expected - self.paid, ZERO)


@dataclass
class AccountStatus:
    player_id: str
    total_expected: Decimal = ZERO
    total_paid: Decimal = ZERO
    financed_debt: Decimal = ZERO     # solo adelantos no devueltos
    monthly_status: List[MonthlyAccountLine] = field(default_factory=list)   # cronológico
    orphan_payment_months: List[InconsistentState] = field(default_factory=list)
    truncated: bool = False

    @property
    def total_debt(self) -> Decimal:
        # sin saldo a favor: el sobrepago no se arrastra
        return max(self.total_expected - self.total_paid, ZERO)

    @property
    def debt_months(self) -> int:
        return sum(1 for line in self.monthly_status if line.status == STATUS_DEBT)

    def most_recent_first(self) -> List[MonthlyAccountLine]:
        return list(reversed(self.monthly_status))


# ────────────────────────────────────────────────────────────────────
#  Reconciler
# ────────────────────────────────────────────────────────────────────

class AccountReconciler:
    """Cálculo puro, sin efectos secundarios."""

    @classmethod
    def compute_account(
        cls,
        player: Player,
        fees: FeeScheduleResolver,
        statuses: PlayerMonthlyStatusResolver,
        payments: PaymentLedger,
        season_start: BillingMonth,
        as_of: BillingMonth,
        max_months: int = MAX_MONTHS,
    ) -> AccountStatus:
        """
        Para cada mes de season_start a as_of inclusive:
            expected = cuota(categoría del mes) + recargo DT (solo directores)
            paid     = suma de pagos imputados al mes (incluye financiados)
        Los meses con expected == 0 no se informan ni suman.
        """
        account = AccountStatus(player_id=str(player.id))

        if months_between(season_start, as_of) > max_months:
            account.truncated = True
            logger.warning(
                "Cuenta de %s: el rango %s → %s supera %d meses; se corta la iteración.",
                player.id, season_start, as_of, max_months,
            )

        for bm in iter_months(season_start, as_of, limit=max_months):
            category = statuses.resolve(player, bm.month, bm.year)
            expected = fees.resolve(category, bm.month, bm.year)
            if player.is_director:
                expected += fees.resolve(DT, bm.month, bm.year)

            paid = ZERO
            is_financed = False
            for p in payments.filter(player_id=player.id, month=bm.month, year=bm.year):
                paid += p.amount_total
                if p.is_financed_by_team:
                    is_financed = True
                    if not p.reimbursed_to_team:
                        account.financed_debt += p.amount_total

            if expected == 0:
                if paid > 0:
                    notice = InconsistentState(bm.year, bm.month, "pagos sin cuota configurada")
                    account.orphan_payment_months.append(notice)
                    logger.debug("Cuenta de %s: %s", player.id, notice)
                continue

            if is_financed:
                status = STATUS_FINANCED
            elif paid >= expected:
                status = STATUS_PAID
            else:
                status = STATUS_DEBT

            account.total_expected += expected
            account.total_paid += paid
            account.monthly_status.append(
                MonthlyAccountLine(month=bm.month, year=bm.year, expected=expected, paid=paid, status=status)
            )

        return account

    @classmethod
    def compute_all(
        cls,
        players: Iterable[Player],
        fees: FeeScheduleResolver,
        statuses: PlayerMonthlyStatusResolver,
        payments: PaymentLedger,
        season_start: BillingMonth,
        as_of: BillingMonth,
        max_months: int = MAX_MONTHS,
    ) -> List[AccountStatus]:
        return [
            cls.compute_account(p, fees, statuses, payments, season_start, as_of, max_months)
            for p in players
        ]
