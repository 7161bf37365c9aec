"""
services/ranking.py
─────────────────────────────────────────────────────────────────────
Ranking de compromiso y "muro de la vergüenza"
Commitment ranking: merges signed scoring events per player into totals.
Totals are always recomputed from the events; a pardon flips a flag on the
event's source row and the next read reflects it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional

from .errors import ValidationError
from .records import Player

logger = logging.getLogger(__name__)

# Umbral fijo del aviso al club
SHAME_THRESHOLD = -10

CATEGORY_ATTENDANCE = "asistencia"
CATEGORY_FINANCE    = "finanzas"
CATEGORY_LOGISTICS  = "logistica"
SCORING_CATEGORIES  = (CATEGORY_ATTENDANCE, CATEGORY_FINANCE, CATEGORY_LOGISTICS)


# ────────────────────────────────────────────────────────────────────
#  Data Transfer Objects
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoringEvent:
    """
    Aporte con signo al ranking de un jugador.
    source_table/source_id apuntan a la fila que lo generó; sin fila de
    origen (p. ej. un mes impago) el evento no se puede indultar.
    """
    id: str
    player_id: str
    category: str
    points: int
    description: str = ""
    event_date: Optional[date] = None
    source_table: Optional[str] = None
    source_id: Optional[str] = None
    is_pardoned: bool = False

    @property
    def is_negative(self) -> bool:
        return self.points < 0

    @property
    def is_pardonable(self) -> bool:
        return self.is_negative and self.source_id is not None


@dataclass
class RankingEntry:
    player_id: str
    total_points: int = 0
    positive_points: int = 0
    negative_points: int = 0          # número negativo
    breakdown: Dict[str, Dict[str, int]] = field(
        default_factory=lambda: {c: {"pos": 0, "neg": 0} for c in SCORING_CATEGORIES}
    )
    full_name: str = ""
    avatar_url: Optional[str] = None
    role: Optional[str] = None

    @property
    def triggers_shame_alert(self) -> bool:
        return self.total_points <= SHAME_THRESHOLD


def aggregate(player_id: str, events: Iterable[ScoringEvent]) -> RankingEntry:
    """Suma los eventos no indultados del jugador."""
    entry = RankingEntry(player_id=str(player_id))
    for ev in events:
        if ev.player_id != entry.player_id or ev.is_pardoned:
            continue
        entry.total_points += ev.points
        bucket = entry.breakdown.setdefault(ev.category, {"pos": 0, "neg": 0})
        if ev.points > 0:
            entry.positive_points += ev.points
            bucket["pos"] += ev.points
        elif ev.points < 0:
            entry.negative_points += ev.points
            bucket["neg"] += ev.points
    return entry


# ────────────────────────────────────────────────────────────────────
#  Aggregator
# ────────────────────────────────────────────────────────────────────

class RankingAggregator:
    """Tabla general a partir de los eventos de todos los jugadores."""

    def __init__(
        self,
        events: Iterable[ScoringEvent] = (),
        players: Iterable[Player] = (),
    ):
        self._events: Dict[str, ScoringEvent] = {}
        for ev in events:
            if ev.id in self._events:
                raise ValidationError(f"Evento duplicado: {ev.id}")
            self._events[ev.id] = ev
        self._players: Dict[str, Player] = {str(p.id): p for p in players}

    # ── Lectura ─────────────────────────────────────────────────────

    def events_for(self, player_id: str) -> List[ScoringEvent]:
        """Historial completo (incluye indultados), más reciente primero."""
        evs = [e for e in self._events.values() if e.player_id == str(player_id)]
        return sorted(evs, key=lambda e: (e.event_date or date.min, e.id), reverse=True)

    def entry_for(self, player_id: str) -> RankingEntry:
        entry = aggregate(player_id, self._events.values())
        player = self._players.get(str(player_id))
        if player is not None:
            entry.full_name = player.full_name
            entry.avatar_url = player.avatar_url
            entry.role = player.role
        return entry

    def leaderboard(self) -> List[RankingEntry]:
        """Todos los jugadores, de mayor a menor total."""
        ids = set(self._players) | {e.player_id for e in self._events.values()}
        entries = [self.entry_for(pid) for pid in ids]
        return sorted(entries, key=lambda e: (-e.total_points, e.full_name, e.player_id))

    def podium(self) -> List[RankingEntry]:
        return [e for e in self.leaderboard() if e.total_points >= 0][:3]

    def wall_of_shame(self) -> List[RankingEntry]:
        """El fondo de la tabla: totales negativos, el peor primero."""
        return sorted(
            (e for e in self.leaderboard() if e.total_points < 0),
            key=lambda e: (e.total_points, e.full_name, e.player_id),
        )

    @property
    def shame_alert(self) -> bool:
        """Aviso para todo el club: alguien llegó a -10 o menos."""
        return any(e.triggers_shame_alert for e in self.leaderboard())

    # ── Indulto ─────────────────────────────────────────────────────

    def pardon(self, event_id: str) -> RankingEntry:
        """
        Indulta un evento negativo marcando su fila de origen: todos los
        eventos negativos de esa fila dejan de contar. Idempotente.
        Devuelve el total recalculado del jugador.
        """
        try:
            event = self._events[event_id]
        except KeyError:
            raise ValidationError(f"Evento inexistente: {event_id}")
        if not event.is_pardonable:
            raise ValidationError(f"El evento {event_id} no se puede indultar.")

        for ev_id, ev in list(self._events.items()):
            same_source = (ev.source_table, ev.source_id) == (event.source_table, event.source_id)
            if same_source and ev.is_negative and not ev.is_pardoned:
                self._events[ev_id] = replace(ev, is_pardoned=True)

        logger.info("Indulto: evento %s (%s %s) del jugador %s",
                    event_id, event.source_table, event.source_id, event.player_id)
        return self.entry_for(event.player_id)

    def pardoned_sources(self) -> Mapping[str, List[str]]:
        """Filas de origen con indulto, agrupadas por tabla."""
        result: Dict[str, List[str]] = {}
        for ev in self._events.values():
            if ev.is_pardoned and ev.source_table and ev.source_id:
                ids = result.setdefault(ev.source_table, [])
                if ev.source_id not in ids:
                    ids.append(ev.source_id)
        return result
