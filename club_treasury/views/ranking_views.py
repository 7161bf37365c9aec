"""
views/ranking_views.py
─────────────────────────────────────────────────────────────────────
API JSON del ranking de compromiso
"""

from __future__ import annotations

import json
import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import JsonResponse
from django.views import View

from ..mixins import PardonMixin
from ..services.errors import ValidationError
from ..services.treasury_service import TreasuryService
from .payloads import entry_payload, event_payload

logger = logging.getLogger(__name__)


class RankingView(LoginRequiredMixin, View):
    """
    GET /ranking/
    Tabla completa, podio, muro de la vergüenza y el aviso para el club.
    """
    http_method_names = ["get"]

    def get(self, request):
        aggregator = TreasuryService.ranking_aggregator()
        return JsonResponse({
            "leaderboard":   [entry_payload(e) for e in aggregator.leaderboard()],
            "podium":        [e.player_id for e in aggregator.podium()],
            "wall_of_shame": [e.player_id for e in aggregator.wall_of_shame()],
            "shame_alert":   aggregator.shame_alert,
        })


class PlayerScoringView(LoginRequiredMixin, View):
    """GET /ranking/players/<uuid>/: total e historial de eventos."""
    http_method_names = ["get"]

    def get(self, request, player_id):
        aggregator = TreasuryService.ranking_aggregator()
        pid = str(player_id)
        return JsonResponse({
            "entry":  entry_payload(aggregator.entry_for(pid)),
            "events": [event_payload(e) for e in aggregator.events_for(pid)],
        })


class PardonView(PardonMixin, View):
    """
    POST /ranking/pardon/
    body: {"event_id": "...", "reason": "..."}
    """
    http_method_names = ["post"]

    def post(self, request):
        try:
            data     = json.loads(request.body)
            event_id = data["event_id"]
        except (KeyError, TypeError, json.JSONDecodeError):
            return JsonResponse({"error": "Falta event_id."}, status=400)

        try:
            entry = TreasuryService.pardon(event_id, data.get("reason") or "Indultado por el DT")
        except ValidationError as e:
            return JsonResponse({"error": str(e)}, status=400)
        except Exception:
            logger.exception("Error al indultar el evento %s", event_id)
            return JsonResponse({"error": "Error interno."}, status=500)

        logger.info("Evento %s indultado por %s", event_id, request.user)
        return JsonResponse({"success": True, "entry": entry_payload(entry)})
