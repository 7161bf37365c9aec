"""
club_treasury/tasks.py
─────────────────────────────────────────────────────────────────────
Tareas Celery de tesorería y ranking

club_config/celery.py:
    from celery.schedules import crontab
    app.conf.beat_schedule = {
        'monthly-treasury-summary': {'task': 'club_treasury.tasks.monthly_treasury_summary_task',
                                     'schedule': crontab(hour=8, minute=0, day_of_month=1)},
        'wall-of-shame-check':      {'task': 'club_treasury.tasks.wall_of_shame_check_task',
                                     'schedule': crontab(hour=10, minute=0, day_of_week=1)},
    }
"""

from __future__ import annotations
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 1. Resumen del mes anterior, primero de cada mes
# ─────────────────────────────────────────────────────────────────────
@shared_task(bind=True, max_retries=3, default_retry_delay=300)
def monthly_treasury_summary_task(self):
    """Recaudación del mes anterior y deuda total del plantel."""
    from .services.treasury_service import TreasuryService, current_month
    try:
        prev     = current_month().prev_month
        stats    = TreasuryService.month_stats(prev)
        overview = TreasuryService.overview(prev)
        logger.info(
            "[Resumen %s] recaudado:$%s pagaron:%d club:$%s cerrado:%s ahorro:$%s",
            prev, stats.total_collected, stats.paid_count, stats.amount_paid_to_club,
            "sí" if stats.has_closed else "no", stats.savings,
        )
        logger.info(
            "[Resumen %s] deuda total:$%s financiado pendiente:$%s",
            prev, overview.total_debt, overview.total_financed,
        )
        return {
            "month":           str(prev),
            "total_collected": str(stats.total_collected),
            "paid_count":      stats.paid_count,
            "has_closed":      stats.has_closed,
            "total_debt":      str(overview.total_debt),
            "total_financed":  str(overview.total_financed),
        }
    except Exception as exc:
        logger.exception("Error en el resumen mensual de tesorería: %s", exc)
        raise self.retry(exc=exc)


# ─────────────────────────────────────────────────────────────────────
# 2. Muro de la vergüenza, todos los lunes
# ─────────────────────────────────────────────────────────────────────
@shared_task(bind=True, max_retries=2)
def wall_of_shame_check_task(self):
    """Avisa si algún jugador llegó al umbral negativo del ranking."""
    from .services.ranking import SHAME_THRESHOLD
    from .services.treasury_service import TreasuryService
    try:
        aggregator = TreasuryService.ranking_aggregator()
        shamed = [e for e in aggregator.leaderboard() if e.triggers_shame_alert]
        for entry in shamed:
            logger.warning(
                "[Muro de la vergüenza] %s: %d puntos (umbral %d)",
                entry.full_name or entry.player_id, entry.total_points, SHAME_THRESHOLD,
            )
        if not shamed:
            logger.info("[Muro de la vergüenza] nadie por debajo de %d", SHAME_THRESHOLD)
        return {"alert": bool(shamed), "players": [e.player_id for e in shamed]}
    except Exception as exc:
        raise self.retry(exc=exc)
