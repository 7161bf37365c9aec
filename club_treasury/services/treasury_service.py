"""
services/treasury_service.py
─────────────────────────────────────────────────────────────────────
Capa de servicio de tesorería (frontera con la base de datos)
Fetches rows from the store, parses them into typed records, runs the
pure calculators and writes mutations back atomically. Views, tasks and
management commands talk to this class only.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ..models import (
    Attendance,
    ClubClosing as ClubClosingRow,
    FeeSchedule,
    MonthlySetting as MonthlySettingRow,
    Payment as PaymentRow,
    PlayerMonthlyStatus,
    Profile,
)
from .account_reconciler import MAX_MONTHS, AccountReconciler, AccountStatus
from .billing import BillingMonth
from .cash_flow import ClosingBook, ClubCashFlowAggregator, MonthlyClubStats, TreasuryOverview
from .errors import ValidationError
from .fee_schedule import FeeScheduleResolver
from .monthly_status import PlayerMonthlyStatusResolver
from .payment_ledger import PaymentLedger
from .ranking import RankingAggregator, RankingEntry, ScoringEvent
from .records import (
    AttendanceRow,
    ClubClosing,
    MonthlySetting,
    Payment,
    Player,
    parse_attendance,
    parse_closing,
    parse_fee,
    parse_monthly_setting,
    parse_payment,
    parse_player,
    parse_status_override,
)
from .scoring_rules import ATTENDANCE_TABLE, ScoringPolicy, build_events

logger = logging.getLogger(__name__)

PROFILE_FIELDS    = ("id", "full_name", "nickname", "jersey_number", "role", "status", "avatar_url")
FEE_FIELDS        = ("category", "month", "year", "amount")
STATUS_FIELDS     = ("player_id", "month", "year", "status")
PAYMENT_FIELDS    = ("id", "player_id", "month", "year", "amount_total", "payment_date",
                     "is_financed_by_team", "reimbursed_to_team")
CLOSING_FIELDS    = ("month", "year", "amount_paid", "collected_total", "savings", "notes")
SETTING_FIELDS    = ("month", "year", "is_group_payment")
ATTENDANCE_FIELDS = ("id", "match_id", "player_id", "confirmation_status", "attendance_type",
                     "forgot_jerseys", "washed_jerseys", "points_impact", "is_pardoned")


# ────────────────────────────────────────────────────────────────────
#  Configuración
# ────────────────────────────────────────────────────────────────────

def treasury_settings() -> Dict[str, Any]:
    return getattr(settings, "CLUB_TREASURY", {})


def season_start() -> BillingMonth:
    year, month = treasury_settings().get("SEASON_START", (2025, 1))
    return BillingMonth(int(year), int(month))


def max_months() -> int:
    return int(treasury_settings().get("MAX_MONTHS", MAX_MONTHS))


def scoring_policy() -> ScoringPolicy:
    return ScoringPolicy.from_settings(treasury_settings().get("SCORING"))


def current_month() -> BillingMonth:
    return BillingMonth.current(timezone.localdate())


def _check_uuid(value: Any, field_name: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} inválido: {value!r}")


# ────────────────────────────────────────────────────────────────────
#  Data Transfer Objects
# ────────────────────────────────────────────────────────────────────

@dataclass
class TreasurySnapshot:
    """Todas las filas leídas en un mismo momento, ya validadas."""
    players: List[Player]
    fees: FeeScheduleResolver
    statuses: PlayerMonthlyStatusResolver
    payments: PaymentLedger
    closings: ClosingBook
    settings: Dict[Tuple[int, int], MonthlySetting] = field(default_factory=dict)
    attendance: List[AttendanceRow] = field(default_factory=list)

    def player(self, player_id: str) -> Player:
        for p in self.players:
            if p.id == str(player_id):
                return p
        raise ValidationError(f"Jugador inexistente: {player_id}")


# ────────────────────────────────────────────────────────────────────
#  Treasury Service
# ────────────────────────────────────────────────────────────────────

class TreasuryService:
    """
    Toda la tesorería y el ranking pasan por acá.
    Después de cada escritura se vuelve a leer: nada se parchea en memoria.
    """

    # ── 1. Lectura ──────────────────────────────────────────────────

    @classmethod
    def load_snapshot(cls, with_attendance: bool = False) -> TreasurySnapshot:
        with transaction.atomic():
            players  = [parse_player(r) for r in Profile.objects.values(*PROFILE_FIELDS)]
            fees     = [parse_fee(r) for r in FeeSchedule.objects.values(*FEE_FIELDS)]
            statuses = [parse_status_override(r) for r in PlayerMonthlyStatus.objects.values(*STATUS_FIELDS)]
            payments = [parse_payment(r) for r in PaymentRow.objects.values(*PAYMENT_FIELDS)]
            closings = [parse_closing(r) for r in ClubClosingRow.objects.values(*CLOSING_FIELDS)]
            month_settings = [parse_monthly_setting(r) for r in MonthlySettingRow.objects.values(*SETTING_FIELDS)]
            attendance = []
            if with_attendance:
                attendance = [
                    parse_attendance(r)
                    for r in Attendance.objects.values(*ATTENDANCE_FIELDS, event_date=F("match__match_date"))
                ]

        return TreasurySnapshot(
            players=players,
            fees=FeeScheduleResolver(fees),
            statuses=PlayerMonthlyStatusResolver(statuses),
            payments=PaymentLedger(payments),
            closings=ClosingBook(closings),
            settings={(s.year, s.month): s for s in month_settings},
            attendance=attendance,
        )

    @classmethod
    def accounts(cls, snapshot: TreasurySnapshot, as_of: Optional[BillingMonth] = None) -> List[AccountStatus]:
        return AccountReconciler.compute_all(
            snapshot.players, snapshot.fees, snapshot.statuses, snapshot.payments,
            season_start(), as_of or current_month(), max_months(),
        )

    @classmethod
    def player_account(cls, player_id: str, as_of: Optional[BillingMonth] = None) -> AccountStatus:
        snapshot = cls.load_snapshot()
        player = snapshot.player(player_id)
        return AccountReconciler.compute_account(
            player, snapshot.fees, snapshot.statuses, snapshot.payments,
            season_start(), as_of or current_month(), max_months(),
        )

    @classmethod
    def month_stats(cls, month: BillingMonth) -> MonthlyClubStats:
        snapshot = cls.load_snapshot()
        return ClubCashFlowAggregator.compute_month(month, snapshot.payments, snapshot.fees, snapshot.closings)

    @classmethod
    def overview(cls, month: BillingMonth) -> TreasuryOverview:
        snapshot = cls.load_snapshot()
        return ClubCashFlowAggregator.compute_overview(
            cls.accounts(snapshot),
            snapshot.payments,
            month,
            snapshot.fees,
            snapshot.settings.get(month.key),
        )

    # ── 2. Pagos ────────────────────────────────────────────────────

    @classmethod
    def record_payment(cls, data: Mapping[str, Any]) -> Payment:
        """
        Crea o actualiza un pago. Se valida todo antes de escribir: si algo
        falla, la base queda como estaba.
        """
        row = dict(data)
        if row.get("id"):
            row["id"] = _check_uuid(row["id"], "id")
        if row.get("player_id"):
            row["player_id"] = _check_uuid(row["player_id"], "player_id")

        with transaction.atomic():
            existing = None
            if row.get("id"):
                existing = PaymentRow.objects.select_for_update().filter(pk=row["id"]).values(*PAYMENT_FIELDS).first()
            ledger = PaymentLedger([parse_payment(existing)] if existing else [])
            payment = ledger.record_payment(row)

            if not Profile.objects.filter(pk=payment.player_id).exists():
                raise ValidationError(f"Jugador inexistente: {payment.player_id}")

            PaymentRow.objects.update_or_create(
                id=payment.id,
                defaults={
                    "player_id":           payment.player_id,
                    "month":               payment.month,
                    "year":                payment.year,
                    "amount_total":        payment.amount_total,
                    "payment_date":        payment.payment_date,
                    "is_financed_by_team": payment.is_financed_by_team,
                    "reimbursed_to_team":  payment.reimbursed_to_team,
                },
            )
        return payment

    @classmethod
    def mark_reimbursed(cls, payment_id: str) -> Payment:
        """Idempotente: marcar dos veces no es error."""
        pid = _check_uuid(payment_id, "payment_id")
        with transaction.atomic():
            row = PaymentRow.objects.select_for_update().filter(pk=pid).values(*PAYMENT_FIELDS).first()
            if row is None:
                raise ValidationError(f"Pago inexistente: {payment_id}")
            ledger = PaymentLedger([parse_payment(row)])
            payment = ledger.mark_reimbursed(pid)
            PaymentRow.objects.filter(pk=pid, reimbursed_to_team=False).update(reimbursed_to_team=True)
        return payment

    # ── 3. Cierre mensual ───────────────────────────────────────────

    @classmethod
    def finalize_closing(cls, month: BillingMonth, amount_paid, notes: str = "") -> ClubClosing:
        """
        Guarda (o reemplaza) el cierre del mes con la recaudación actual.
        Pagos posteriores no tocan la fila guardada.
        """
        with transaction.atomic():
            payments = PaymentLedger(
                parse_payment(r)
                for r in PaymentRow.objects.filter(month=month.month, year=month.year).values(*PAYMENT_FIELDS)
            )
            fees = FeeScheduleResolver(
                parse_fee(r)
                for r in FeeSchedule.objects.filter(month=month.month, year=month.year).values(*FEE_FIELDS)
            )
            closing = ClubCashFlowAggregator.finalize_closing(
                month, amount_paid, notes, payments, fees, ClosingBook()
            )
            ClubClosingRow.objects.update_or_create(
                month=closing.month,
                year=closing.year,
                defaults={
                    "amount_paid":     closing.amount_paid,
                    "collected_total": closing.collected_total,
                    "savings":         closing.savings,
                    "notes":           closing.notes,
                },
            )
        return closing

    # ── 4. Configuración de cuotas y categorías ────────────────────

    @classmethod
    def save_fee_config(
        cls,
        month: BillingMonth,
        amounts: Mapping[str, Any],
        is_group_payment: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Cuotas de las categorías recibidas para un mes + flag de pago grupal."""
        validator = FeeScheduleResolver()
        entries = [validator.upsert(cat, month.month, month.year, amt) for cat, amt in amounts.items()]

        with transaction.atomic():
            for entry in entries:
                FeeSchedule.objects.update_or_create(
                    category=entry.category, month=entry.month, year=entry.year,
                    defaults={"amount": entry.amount},
                )
            if is_group_payment is not None:
                MonthlySettingRow.objects.update_or_create(
                    month=month.month, year=month.year,
                    defaults={"is_group_payment": bool(is_group_payment)},
                )
        logger.info("Cuotas de %s actualizadas: %s", month,
                    ", ".join(f"{e.category}={e.amount}" for e in entries))
        return {e.category: e.amount for e in entries}

    @classmethod
    def set_monthly_status(cls, player_id: str, month: BillingMonth, category: str):
        pid = _check_uuid(player_id, "player_id")
        record = PlayerMonthlyStatusResolver().set_override(pid, month.month, month.year, category)
        with transaction.atomic():
            if not Profile.objects.filter(pk=pid).exists():
                raise ValidationError(f"Jugador inexistente: {player_id}")
            PlayerMonthlyStatus.objects.update_or_create(
                player_id=pid, month=record.month, year=record.year,
                defaults={"status": record.status},
            )
        logger.info("Categoría de %s en %s → %s", pid, month, record.status)
        return record

    # ── 5. Ranking ──────────────────────────────────────────────────

    @classmethod
    def ranking_aggregator(cls, snapshot: Optional[TreasurySnapshot] = None) -> RankingAggregator:
        snapshot = snapshot or cls.load_snapshot(with_attendance=True)
        events = build_events(snapshot.attendance, cls.accounts(snapshot), scoring_policy())
        return RankingAggregator(events, snapshot.players)

    @classmethod
    def ranking(cls) -> List[RankingEntry]:
        return cls.ranking_aggregator().leaderboard()

    @classmethod
    def scoring_details(cls, player_id: str) -> List[ScoringEvent]:
        return cls.ranking_aggregator().events_for(player_id)

    @classmethod
    def pardon(cls, event_id: str, reason: str = "Indultado por el DT") -> RankingEntry:
        """
        Marca la fila de origen del evento como indultada y devuelve el
        total recalculado a partir de una lectura nueva.
        """
        aggregator = cls.ranking_aggregator()
        entry = aggregator.pardon(event_id)
        source = next(e for e in aggregator.events_for(entry.player_id) if e.id == event_id)

        if source.source_table == ATTENDANCE_TABLE:
            with transaction.atomic():
                Attendance.objects.filter(pk=source.source_id).update(
                    is_pardoned=True, pardon_reason=reason[:255],
                )
        else:
            raise ValidationError(f"Origen no indultable: {source.source_table}")

        return cls.ranking_aggregator().entry_for(entry.player_id)
