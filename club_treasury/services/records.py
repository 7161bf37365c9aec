"""
services/records.py
─────────────────────────────────────────────────────────────────────
Registros tipados del almacén de datos
Typed records for the rows the data store hands us, plus the parsers that
turn raw row mappings into them. Rows are validated here, at the boundary,
so the services downstream can trust their inputs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from .billing import MAX_YEAR, MIN_YEAR
from .errors import ValidationError

ZERO = Decimal("0")


# ────────────────────────────────────────────────────────────────────
#  Categorías y roles
# ────────────────────────────────────────────────────────────────────

ACTIVO     = "activo"
SEMIACTIVO = "semiactivo"
PASIVO     = "pasivo"
DT         = "dt"

# Categorías de cuota de un jugador (la de "dt" es el recargo del director técnico)
PLAYER_CATEGORIES = (ACTIVO, SEMIACTIVO, PASIVO)
FEE_CATEGORIES    = PLAYER_CATEGORIES + (DT,)

ROLE_PLAYER = "player"
ROLE_DT     = "dt"
ROLE_ADMIN  = "admin"
ROLES       = (ROLE_PLAYER, ROLE_DT, ROLE_ADMIN)

# attendance_type / confirmation_status tal como los guarda la app de asistencia
ATTENDANCE_TYPES     = ("present", "late_1st_half", "late_2nd_half", "absent")
CONFIRMATION_STATES  = ("pending", "confirmed", "declined")


# ────────────────────────────────────────────────────────────────────
#  Records
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Player:
    id: str
    full_name: str = ""
    nickname: str = ""
    jersey_number: Optional[int] = None
    role: str = ROLE_PLAYER
    status: Optional[str] = ACTIVO     # categoría de cuota por defecto
    avatar_url: Optional[str] = None

    @property
    def is_director(self) -> bool:
        return self.role == ROLE_DT


@dataclass(frozen=True)
class FeeEntry:
    category: str
    month: int
    year: int
    amount: Decimal


@dataclass(frozen=True)
class MonthlyStatusOverride:
    player_id: str
    month: int
    year: int
    status: str


@dataclass(frozen=True)
class Payment:
    id: str
    player_id: str
    month: int
    year: int
    amount_total: Decimal
    payment_date: Optional[date] = None
    is_financed_by_team: bool = False
    reimbursed_to_team: bool = False

    @property
    def is_outstanding_financed(self) -> bool:
        """Adelanto del equipo que el jugador todavía no devolvió."""
        return self.is_financed_by_team and not self.reimbursed_to_team


@dataclass(frozen=True)
class ClubClosing:
    month: int
    year: int
    amount_paid: Decimal
    collected_total: Decimal
    savings: Decimal
    notes: str = ""


@dataclass(frozen=True)
class MonthlySetting:
    month: int
    year: int
    is_group_payment: bool = False


@dataclass(frozen=True)
class AttendanceRow:
    id: str
    match_id: str
    player_id: str
    event_date: Optional[date] = None
    confirmation_status: str = "pending"
    attendance_type: Optional[str] = None
    forgot_jerseys: bool = False
    washed_jerseys: bool = False
    points_impact: Optional[int] = None
    is_pardoned: bool = False


# ────────────────────────────────────────────────────────────────────
#  Validadores
# ────────────────────────────────────────────────────────────────────

def to_amount(value: Any, field_name: str = "amount", required: bool = False) -> Decimal:
    """
    Convierte un valor monetario a Decimal sin pasar por float.
    None cuenta como 0 salvo con required=True. Negativos, NaN e infinitos son error.
    """
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field_name} es obligatorio.")
        return ZERO
    if isinstance(value, bool):
        raise ValidationError(f"{field_name}: valor monetario inválido {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{field_name}: valor monetario inválido {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name}: valor monetario inválido {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field_name}: valor monetario inválido {value!r}")
    if amount < 0:
        raise ValidationError(f"{field_name} no puede ser negativo: {amount}")
    return amount


def check_month(month: Any) -> int:
    try:
        m = int(month)
    except (TypeError, ValueError):
        raise ValidationError(f"Mes inválido: {month!r}")
    if not 1 <= m <= 12:
        raise ValidationError(f"El mes debe estar entre 1 y 12, recibido: {m}")
    return m


def check_year(year: Any) -> int:
    try:
        y = int(year)
    except (TypeError, ValueError):
        raise ValidationError(f"Año inválido: {year!r}")
    if not MIN_YEAR <= y <= MAX_YEAR:
        raise ValidationError(f"El año debe tener cuatro cifras, recibido: {y}")
    return y


def check_fee_category(category: Any) -> str:
    if category not in FEE_CATEGORIES:
        raise ValidationError(f"Categoría desconocida: {category!r}")
    return category


def check_player_category(category: Any) -> str:
    if category not in PLAYER_CATEGORIES:
        raise ValidationError(f"Categoría de jugador desconocida: {category!r}")
    return category


def _bool(value: Any) -> bool:
    # las columnas booleanas del almacén admiten null
    return bool(value) if value is not None else False


def _date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f"Fecha inválida: {value!r}")


def _str_id(value: Any, field_name: str) -> str:
    if value is None or str(value).strip() == "":
        raise ValidationError(f"{field_name} es obligatorio.")
    return str(value)


# ────────────────────────────────────────────────────────────────────
#  Parsers: fila cruda → record
# ────────────────────────────────────────────────────────────────────

def parse_player(row: Mapping[str, Any]) -> Player:
    role = row.get("role") or ROLE_PLAYER
    if role not in ROLES:
        raise ValidationError(f"Rol desconocido: {role!r}")
    status = row.get("status") or None
    if status is not None:
        check_player_category(status)
    jersey = row.get("jersey_number")
    return Player(
        id=_str_id(row.get("id"), "id"),
        full_name=row.get("full_name") or "",
        nickname=row.get("nickname") or "",
        jersey_number=int(jersey) if jersey is not None else None,
        role=role,
        status=status,
        avatar_url=row.get("avatar_url") or None,
    )


def parse_fee(row: Mapping[str, Any]) -> FeeEntry:
    return FeeEntry(
        category=check_fee_category(row.get("category")),
        month=check_month(row.get("month")),
        year=check_year(row.get("year")),
        amount=to_amount(row.get("amount")),
    )


def parse_status_override(row: Mapping[str, Any]) -> MonthlyStatusOverride:
    return MonthlyStatusOverride(
        player_id=_str_id(row.get("player_id"), "player_id"),
        month=check_month(row.get("month")),
        year=check_year(row.get("year")),
        status=check_player_category(row.get("status")),
    )


def parse_payment(row: Mapping[str, Any]) -> Payment:
    return Payment(
        id=_str_id(row.get("id"), "id"),
        player_id=_str_id(row.get("player_id"), "player_id"),
        month=check_month(row.get("month")),
        year=check_year(row.get("year")),
        amount_total=to_amount(row.get("amount_total"), "amount_total", required=True),
        payment_date=_date(row.get("payment_date")),
        is_financed_by_team=_bool(row.get("is_financed_by_team")),
        reimbursed_to_team=_bool(row.get("reimbursed_to_team")),
    )


def parse_closing(row: Mapping[str, Any]) -> ClubClosing:
    # savings puede ser negativo: es un residuo, no un monto cobrado
    savings = row.get("savings")
    try:
        savings = Decimal(str(savings)) if savings is not None else ZERO
    except InvalidOperation:
        raise ValidationError(f"savings inválido: {row.get('savings')!r}")
    return ClubClosing(
        month=check_month(row.get("month")),
        year=check_year(row.get("year")),
        amount_paid=to_amount(row.get("amount_paid"), "amount_paid"),
        collected_total=to_amount(row.get("collected_total"), "collected_total"),
        savings=savings,
        notes=row.get("notes") or "",
    )


def parse_monthly_setting(row: Mapping[str, Any]) -> MonthlySetting:
    return MonthlySetting(
        month=check_month(row.get("month")),
        year=check_year(row.get("year")),
        is_group_payment=_bool(row.get("is_group_payment")),
    )


def parse_attendance(row: Mapping[str, Any]) -> AttendanceRow:
    attendance_type = row.get("attendance_type") or None
    if attendance_type is not None and attendance_type not in ATTENDANCE_TYPES:
        raise ValidationError(f"attendance_type desconocido: {attendance_type!r}")
    confirmation = row.get("confirmation_status") or "pending"
    if confirmation not in CONFIRMATION_STATES:
        raise ValidationError(f"confirmation_status desconocido: {confirmation!r}")
    impact = row.get("points_impact")
    return AttendanceRow(
        id=_str_id(row.get("id"), "id"),
        match_id=_str_id(row.get("match_id"), "match_id"),
        player_id=_str_id(row.get("player_id"), "player_id"),
        event_date=_date(row.get("event_date")),
        confirmation_status=confirmation,
        attendance_type=attendance_type,
        forgot_jerseys=_bool(row.get("forgot_jerseys")),
        washed_jerseys=_bool(row.get("washed_jerseys")),
        points_impact=int(impact) if impact is not None else None,
        is_pardoned=_bool(row.get("is_pardoned")),
    )
