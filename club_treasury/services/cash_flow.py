"""
services/cash_flow.py
─────────────────────────────────────────────────────────────────────
Flujo de caja mensual del equipo y cierre con el club
Monthly club cash flow: gross collections, team-financed advances, the
suggested fee owed to the club/league and the resulting team savings.
A finalized closing overrides the live estimate for its month.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from .account_reconciler import AccountStatus
from .billing import BillingMonth
from .fee_schedule import FeeScheduleResolver
from .payment_ledger import PaymentLedger
from .records import ACTIVO, ZERO, ClubClosing, MonthlySetting, to_amount

logger = logging.getLogger(__name__)

# Desde 16 jugadores que pagan, el club descuenta una cuota "activo" entera
CLUB_DISCOUNT_THRESHOLD = 16


# ────────────────────────────────────────────────────────────────────
#  Data Transfer Objects
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MonthlyClubStats:
    month: int
    year: int
    total_collected: Decimal           # bruto: efectivo + financiado
    total_financed_this_month: Decimal
    paid_count: int
    suggested_club_fee: Decimal        # siempre calculado, aun con cierre
    amount_paid_to_club: Decimal
    has_closed: bool
    savings: Decimal
    notes: str = ""


@dataclass(frozen=True)
class TreasuryOverview:
    """Totales del club para el encabezado de tesorería."""
    total_debt: Decimal
    total_financed: Decimal
    group_payment_savings: Decimal


class ClosingBook:
    """Cierres mensuales, a lo sumo uno por (mes, año)."""

    def __init__(self, closings: Iterable[ClubClosing] = ()):
        self._closings: Dict[Tuple[int, int], ClubClosing] = {}
        for c in closings:
            self.upsert(c)

    def get(self, month: BillingMonth) -> Optional[ClubClosing]:
        return self._closings.get(month.key)

    def upsert(self, closing: ClubClosing) -> ClubClosing:
        self._closings[(closing.year, closing.month)] = closing
        return closing

    def all(self) -> List[ClubClosing]:
        return [self._closings[k] for k in sorted(self._closings)]

    def __len__(self) -> int:
        return len(self._closings)


def suggested_club_fee(paid_count: int, activo_fee: Decimal) -> Decimal:
    """
    Lo que el club/liga cobra al equipo según cuántos jugadores pagaron.
    Con CLUB_DISCOUNT_THRESHOLD o más se descuenta exactamente una cuota.
    """
    if paid_count <= 0:
        return ZERO
    gross = paid_count * activo_fee
    if paid_count < CLUB_DISCOUNT_THRESHOLD:
        return gross
    return gross - activo_fee


# ────────────────────────────────────────────────────────────────────
#  Aggregator
# ────────────────────────────────────────────────────────────────────

class ClubCashFlowAggregator:

    @classmethod
    def compute_month(
        cls,
        month: BillingMonth,
        payments: PaymentLedger,
        fees: FeeScheduleResolver,
        closings: ClosingBook,
    ) -> MonthlyClubStats:
        month_payments = payments.filter(month=month.month, year=month.year)

        total_collected = sum((p.amount_total for p in month_payments), ZERO)
        # financiado del mes, esté o no devuelto después
        total_financed = sum(
            (p.amount_total for p in month_payments if p.is_financed_by_team), ZERO
        )
        paid_count = len({p.player_id for p in month_payments if p.amount_total > 0})

        activo_fee = fees.resolve(ACTIVO, month.month, month.year)
        suggested = suggested_club_fee(paid_count, activo_fee)

        closing = closings.get(month)
        if closing is not None:
            amount_paid_to_club = closing.amount_paid
            savings = closing.collected_total - total_financed - closing.amount_paid
            notes = closing.notes
        else:
            amount_paid_to_club = suggested
            savings = total_collected - total_financed - suggested
            notes = ""

        return MonthlyClubStats(
            month=month.month,
            year=month.year,
            total_collected=total_collected,
            total_financed_this_month=total_financed,
            paid_count=paid_count,
            suggested_club_fee=suggested,
            amount_paid_to_club=amount_paid_to_club,
            has_closed=closing is not None,
            savings=savings,
            notes=notes,
        )

    @classmethod
    def finalize_closing(
        cls,
        month: BillingMonth,
        amount_paid,
        notes: str,
        payments: PaymentLedger,
        fees: FeeScheduleResolver,
        closings: ClosingBook,
    ) -> ClubClosing:
        """
        Guarda el cierre del mes con una foto de lo recaudado en este momento.
        Pagos posteriores no modifican el cierre guardado.
        """
        amount_paid = to_amount(amount_paid, "amount_paid", required=True)
        live = cls.compute_month(month, payments, fees, ClosingBook())
        closing = ClubClosing(
            month=month.month,
            year=month.year,
            amount_paid=amount_paid,
            collected_total=live.total_collected,
            savings=live.total_collected - live.total_financed_this_month - amount_paid,
            notes=notes or "",
        )
        closings.upsert(closing)
        logger.info(
            "Cierre %s: pagado al club %s, recaudado %s, ahorro %s",
            month, closing.amount_paid, closing.collected_total, closing.savings,
        )
        return closing

    @classmethod
    def compute_overview(
        cls,
        accounts: Iterable[AccountStatus],
        payments: PaymentLedger,
        month: BillingMonth,
        fees: FeeScheduleResolver,
        setting: Optional[MonthlySetting] = None,
    ) -> TreasuryOverview:
        """
        Deuda total de los jugadores, adelantos pendientes de todo el historial
        y el ahorro por pago grupal del mes (una cuota "activo").
        """
        total_debt = sum((a.total_debt for a in accounts), ZERO)
        group_savings = ZERO
        if setting is not None and setting.is_group_payment:
            group_savings = fees.resolve(ACTIVO, month.month, month.year)
        return TreasuryOverview(
            total_debt=total_debt,
            total_financed=payments.total_outstanding_financed(),
            group_payment_savings=group_savings,
        )
