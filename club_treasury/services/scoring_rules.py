"""
services/scoring_rules.py
─────────────────────────────────────────────────────────────────────
Reglas de puntaje del ranking de compromiso
Turns attendance rows and reconciled account months into ScoringEvents.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from .account_reconciler import STATUS_DEBT, STATUS_PAID, AccountStatus
from .billing import BillingMonth
from .errors import ValidationError
from .ranking import (
    CATEGORY_ATTENDANCE,
    CATEGORY_FINANCE,
    CATEGORY_LOGISTICS,
    ScoringEvent,
)
from .records import AttendanceRow

ATTENDANCE_TABLE = "attendance"


@dataclass(frozen=True)
class ScoringPolicy:
    present: int = 2
    late_1st_half: int = -1
    late_2nd_half: int = -2
    absent: int = -5
    forgot_jerseys: int = -3
    washed_jerseys: int = 3
    month_paid: int = 1
    month_debt: int = -2

    @classmethod
    def from_settings(cls, overrides: Optional[Mapping[str, Any]]) -> "ScoringPolicy":
        """Aplica las claves de settings.CLUB_TREASURY["SCORING"]."""
        if not overrides:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValidationError(f"Reglas de puntaje desconocidas: {sorted(unknown)}")
        return cls(**{k: int(v) for k, v in overrides.items()})

    def attendance_points(self, attendance_type: str) -> int:
        return getattr(self, attendance_type)


ATTENDANCE_LABELS = {
    "present":       "Presente",
    "late_1st_half": "Llegó tarde (1er tiempo)",
    "late_2nd_half": "Llegó tarde (2do tiempo)",
    "absent":        "Faltazo",
}


def attendance_events(rows: Iterable[AttendanceRow], policy: ScoringPolicy = ScoringPolicy()) -> List[ScoringEvent]:
    """
    Solo puntúan los jugadores que confirmaron asistencia al partido.
    Un points_impact cargado a mano reemplaza el puntaje de asistencia.
    """
    events: List[ScoringEvent] = []
    for row in rows:
        if row.confirmation_status != "confirmed":
            continue

        common = dict(
            player_id=row.player_id,
            event_date=row.event_date,
            source_table=ATTENDANCE_TABLE,
            source_id=row.id,
        )

        points = None
        description = ""
        if row.points_impact is not None:
            points = row.points_impact
            description = "Ajuste manual"
        elif row.attendance_type:
            points = policy.attendance_points(row.attendance_type)
            description = ATTENDANCE_LABELS[row.attendance_type]
        if points:
            events.append(ScoringEvent(
                id=f"{ATTENDANCE_TABLE}:{row.id}:asistencia",
                category=CATEGORY_ATTENDANCE,
                points=points,
                description=description,
                is_pardoned=row.is_pardoned and points < 0,
                **common,
            ))

        if row.forgot_jerseys and policy.forgot_jerseys:
            events.append(ScoringEvent(
                id=f"{ATTENDANCE_TABLE}:{row.id}:camisetas_olvidadas",
                category=CATEGORY_LOGISTICS,
                points=policy.forgot_jerseys,
                description="Se olvidó las camisetas",
                is_pardoned=row.is_pardoned and policy.forgot_jerseys < 0,
                **common,
            ))
        if row.washed_jerseys and policy.washed_jerseys:
            events.append(ScoringEvent(
                id=f"{ATTENDANCE_TABLE}:{row.id}:camisetas_lavadas",
                category=CATEGORY_LOGISTICS,
                points=policy.washed_jerseys,
                description="Lavó las camisetas",
                is_pardoned=row.is_pardoned and policy.washed_jerseys < 0,
                **common,
            ))
    return events


def finance_events(account: AccountStatus, policy: ScoringPolicy = ScoringPolicy()) -> List[ScoringEvent]:
    """
    Un evento por mes conciliado: pagado suma, deuda resta.
    Los meses financiados no puntúan. Sin fila de origen: no se indultan.
    """
    events: List[ScoringEvent] = []
    for line in account.monthly_status:
        if line.status == STATUS_PAID:
            points, description = policy.month_paid, "Cuota al día"
        elif line.status == STATUS_DEBT:
            points, description = policy.month_debt, "Cuota impaga"
        else:
            continue
        if not points:
            continue
        bm = BillingMonth(line.year, line.month)
        events.append(ScoringEvent(
            id=f"cuota:{account.player_id}:{bm.year}-{bm.month:02d}",
            player_id=account.player_id,
            category=CATEGORY_FINANCE,
            points=points,
            description=f"{description} ({bm.label})",
            event_date=date(bm.year, bm.month, 1),
        ))
    return events


def build_events(
    attendance: Iterable[AttendanceRow],
    accounts: Iterable[AccountStatus],
    policy: ScoringPolicy = ScoringPolicy(),
) -> List[ScoringEvent]:
    events = attendance_events(attendance, policy)
    for account in accounts:
        events.extend(finance_events(account, policy))
    return events
