"""
services/monthly_status.py
─────────────────────────────────────────────────────────────────────
Categoría de cuota de un jugador por mes
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from .records import (
    ACTIVO,
    MonthlyStatusOverride,
    Player,
    check_month,
    check_player_category,
    check_year,
)


class PlayerMonthlyStatusResolver:
    """
    Orden de resolución: excepción del mes → status del perfil → "activo".
    Permite que un jugador cambie de categoría un mes (p. ej. lesionado)
    sin tocar el resto de su historial.
    """

    def __init__(self, overrides: Iterable[MonthlyStatusOverride] = ()):
        self._overrides: Dict[Tuple[str, int, int], str] = {}
        for o in overrides:
            self.set_override(o.player_id, o.month, o.year, o.status)

    def resolve(self, player: Player, month: int, year: int) -> str:
        key = (str(player.id), check_month(month), check_year(year))
        override = self._overrides.get(key)
        if override:
            return override
        return player.status or ACTIVO

    def set_override(self, player_id: str, month: int, year: int, status: str) -> MonthlyStatusOverride:
        record = MonthlyStatusOverride(
            player_id=str(player_id),
            month=check_month(month),
            year=check_year(year),
            status=check_player_category(status),
        )
        self._overrides[(record.player_id, record.month, record.year)] = record.status
        return record

    def __len__(self) -> int:
        return len(self._overrides)
