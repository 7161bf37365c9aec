"""
services/payment_ledger.py
─────────────────────────────────────────────────────────────────────
Libro de pagos
In-memory collection of Payment records with the filtered queries and the
two mutations the treasury needs (record / mark reimbursed).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .errors import ValidationError
from .records import ZERO, Payment, parse_payment

logger = logging.getLogger(__name__)


class PaymentLedger:
    """Pagos indexados por id. Varios pagos del mismo jugador y mes se suman."""

    def __init__(self, payments: Iterable[Payment] = ()):
        self._payments: Dict[str, Payment] = {}
        for p in payments:
            if p.amount_total < 0:
                raise ValidationError(f"amount_total no puede ser negativo: {p.amount_total}")
            self._payments[p.id] = p

    # ── Consultas ───────────────────────────────────────────────────

    def filter(
        self,
        player_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        is_financed_by_team: Optional[bool] = None,
        reimbursed_to_team: Optional[bool] = None,
    ) -> List[Payment]:
        """Cualquier combinación de filtros; None = sin filtrar por ese campo."""
        result = []
        for p in self._payments.values():
            if player_id is not None and p.player_id != str(player_id):
                continue
            if month is not None and p.month != month:
                continue
            if year is not None and p.year != year:
                continue
            if is_financed_by_team is not None and p.is_financed_by_team != is_financed_by_team:
                continue
            if reimbursed_to_team is not None and p.reimbursed_to_team != reimbursed_to_team:
                continue
            result.append(p)
        return result

    def get(self, payment_id: str) -> Payment:
        try:
            return self._payments[str(payment_id)]
        except KeyError:
            raise ValidationError(f"Pago inexistente: {payment_id}")

    def outstanding_financed(self) -> List[Payment]:
        """Adelantos del equipo que todavía no fueron devueltos."""
        return [p for p in self._payments.values() if p.is_outstanding_financed]

    def total_outstanding_financed(self) -> Decimal:
        return sum((p.amount_total for p in self.outstanding_financed()), ZERO)

    def all(self) -> List[Payment]:
        return list(self._payments.values())

    def __len__(self) -> int:
        return len(self._payments)

    # ── Escrituras ──────────────────────────────────────────────────

    def record_payment(self, data: Mapping[str, Any]) -> Payment:
        """
        Crea o actualiza (por id) un pago y lo devuelve.
        Si la validación falla, el libro queda como estaba.
        """
        row = dict(data)
        existing = self._payments.get(str(row["id"])) if row.get("id") else None
        if existing is not None:
            # actualización parcial: lo que no viene se conserva
            merged = {
                "id": existing.id,
                "player_id": existing.player_id,
                "month": existing.month,
                "year": existing.year,
                "amount_total": existing.amount_total,
                "payment_date": existing.payment_date,
                "is_financed_by_team": existing.is_financed_by_team,
                "reimbursed_to_team": existing.reimbursed_to_team,
            }
            merged.update(row)
            row = merged
        elif not row.get("id"):
            row["id"] = str(uuid.uuid4())

        payment = parse_payment(row)
        self._payments[payment.id] = payment
        logger.info(
            "Pago %s %s: jugador %s, %02d/%d, monto %s%s",
            payment.id,
            "actualizado" if existing else "registrado",
            payment.player_id, payment.month, payment.year, payment.amount_total,
            " (financiado por el equipo)" if payment.is_financed_by_team else "",
        )
        return payment

    def mark_reimbursed(self, payment_id: str) -> Payment:
        """Marca un adelanto como devuelto. Idempotente."""
        payment = self.get(payment_id)
        if payment.reimbursed_to_team:
            return payment
        payment = replace(payment, reimbursed_to_team=True)
        self._payments[payment.id] = payment
        logger.info("Pago %s marcado como devuelto al equipo.", payment.id)
        return payment
