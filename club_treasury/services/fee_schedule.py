"""
services/fee_schedule.py
─────────────────────────────────────────────────────────────────────
Cuotas mensuales por categoría
Resolves the monthly due configured for a billing category.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Tuple

from .billing import BillingMonth
from .records import (
    FEE_CATEGORIES,
    ZERO,
    FeeEntry,
    check_fee_category,
    check_month,
    check_year,
    to_amount,
)

FeeKey = Tuple[str, int, int]   # (category, month, year)


class FeeScheduleResolver:
    """
    Cuotas configuradas, una por (categoría, mes, año).
    Un mes sin cuota para una categoría no es error: se cobra 0.
    """

    def __init__(self, entries: Iterable[FeeEntry] = ()):
        self._fees: Dict[FeeKey, Decimal] = {}
        for entry in entries:
            self.upsert(entry.category, entry.month, entry.year, entry.amount)

    def resolve(self, category: str, month: int, year: int) -> Decimal:
        key = (check_fee_category(category), check_month(month), check_year(year))
        return self._fees.get(key, ZERO)

    def upsert(self, category: str, month: int, year: int, amount) -> FeeEntry:
        """Crea o sobrescribe la cuota de (categoría, mes, año)."""
        entry = FeeEntry(
            category=check_fee_category(category),
            month=check_month(month),
            year=check_year(year),
            amount=to_amount(amount),
        )
        self._fees[(entry.category, entry.month, entry.year)] = entry.amount
        return entry

    def fees_for_month(self, month: BillingMonth) -> Dict[str, Decimal]:
        """Las cuatro categorías para un mes (0 si no hay configuración)."""
        return {cat: self.resolve(cat, month.month, month.year) for cat in FEE_CATEGORIES}

    def entries(self):
        return [
            FeeEntry(category=c, month=m, year=y, amount=amount)
            for (c, m, y), amount in sorted(self._fees.items(), key=lambda kv: (kv[0][2], kv[0][1], kv[0][0]))
        ]

    def __len__(self) -> int:
        return len(self._fees)
