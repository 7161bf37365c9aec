"""
services/errors.py
─────────────────────────────────────────────────────────────────────
Errores del núcleo de tesorería
Core error taxonomy. The core never swallows these; the boundary decides
how to present them.
"""

from __future__ import annotations

from dataclasses import dataclass


class ValidationError(ValueError):
    """Monto negativo, mes fuera de rango, categoría desconocida, id inexistente."""


@dataclass(frozen=True)
class InconsistentState:
    """
    Aviso no fatal: datos que no encajan entre sí pero no impiden el cálculo.
    Ejemplo: pagos imputados a un mes sin cuota configurada.
    """
    year: int
    month: int
    reason: str

    def __str__(self) -> str:
        return f"{self.year}/{self.month:02d}: {self.reason}"
