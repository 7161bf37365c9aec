"""
services/billing.py
─────────────────────────────────────────────────────────────────────
Utilidades de mes de facturación
Calendar-month helpers shared by the treasury and ranking services.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterator, Optional, Tuple

from .errors import ValidationError

# Años de cuatro cifras
MIN_YEAR = 1000
MAX_YEAR = 9999

MONTH_NAMES = [
    "enero", "febrero", "marzo",
    "abril", "mayo", "junio",
    "julio", "agosto", "septiembre",
    "octubre", "noviembre", "diciembre",
]


@dataclass(frozen=True, order=True)
class BillingMonth:
    """Un mes calendario (año, mes) al que se imputan cuotas y pagos."""

    year: int
    month: int  # 1–12

    # ── Validation ──────────────────────────────────────────────────
    def __post_init__(self):
        if not isinstance(self.month, int) or not (1 <= self.month <= 12):
            raise ValidationError(f"El mes debe estar entre 1 y 12, recibido: {self.month!r}")
        if not isinstance(self.year, int) or not (MIN_YEAR <= self.year <= MAX_YEAR):
            raise ValidationError(f"Año inválido: {self.year!r}")

    # ── Navigation ──────────────────────────────────────────────────
    @property
    def next_month(self) -> "BillingMonth":
        if self.month == 12:
            return BillingMonth(self.year + 1, 1)
        return BillingMonth(self.year, self.month + 1)

    @property
    def prev_month(self) -> "BillingMonth":
        if self.month == 1:
            return BillingMonth(self.year - 1, 12)
        return BillingMonth(self.year, self.month - 1)

    @property
    def key(self) -> Tuple[int, int]:
        return (self.year, self.month)

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    # ── Conversion ──────────────────────────────────────────────────
    @classmethod
    def current(cls, today: Optional[date] = None) -> "BillingMonth":
        today = today or date.today()
        return cls(today.year, today.month)

    @classmethod
    def from_date(cls, d: date) -> "BillingMonth":
        return cls(d.year, d.month)

    def __str__(self) -> str:
        return f"{self.year}/{self.month:02d}"


def iter_months(start: BillingMonth, end: BillingMonth, limit: int) -> Iterator[BillingMonth]:
    """
    Recorre los meses desde start hasta end inclusive, en orden cronológico.
    Se detiene después de `limit` meses aunque no haya llegado a end.
    """
    current = start
    count = 0
    while current <= end and count < limit:
        yield current
        count += 1
        current = current.next_month


def months_between(start: BillingMonth, end: BillingMonth) -> int:
    """Cantidad de meses de start a end inclusive (0 si end < start)."""
    span = (end.year - start.year) * 12 + (end.month - start.month) + 1
    return max(span, 0)


def parse_month_from_request(year: Optional[str], month: Optional[str]) -> BillingMonth:
    """
    Convierte los parámetros year/month del request en BillingMonth.
    Sin ninguno de los dos devuelve el mes actual; si vienen y no forman
    un mes válido, ValidationError.
    """
    if year in (None, "") and month in (None, ""):
        return BillingMonth.current()
    try:
        return BillingMonth(int(year), int(month))
    except (TypeError, ValueError):
        raise ValidationError(f"Mes inválido: year={year!r}, month={month!r}")
