"""
signals.py
─────────────────────────────────────────────────────────────────────
Señales de pagos
Payment audit signals: log new payments, reimbursements to the team
fund, and payments that land in an already closed month.

Registered in apps.py:
    class ClubTreasuryConfig(AppConfig):
        def ready(self):
            import club_treasury.signals  # noqa: F401
"""
from __future__ import annotations

import logging

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from .models import ClubClosing, Payment

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────
#  Signal 1: guardar el estado anterior del reintegro
# ────────────────────────────────────────────────────────────────────

@receiver(pre_save, sender=Payment)
def _cache_old_reimbursed(sender, instance, **kwargs):
    instance._old_reimbursed = (
        Payment.objects.filter(pk=instance.pk)
        .values_list("reimbursed_to_team", flat=True)
        .first()
    )


# ────────────────────────────────────────────────────────────────────
#  Signal 2: pago nuevo / reintegro / mes ya cerrado
# ────────────────────────────────────────────────────────────────────

@receiver(post_save, sender=Payment)
def on_payment_saved(sender, instance: Payment, created: bool, **kwargs):
    """
    - pago nuevo → INFO
    - reintegro al fondo del equipo → INFO
    - el mes ya tiene cierre → WARNING (la foto del cierre no cambia)
    """
    period = f"{instance.year}/{instance.month:02d}"

    if created:
        logger.info(
            "Pago registrado: %s — %s $%s%s",
            instance.player_id, period, instance.amount_total,
            " (financiado por el equipo)" if instance.is_financed_by_team else "",
        )
    elif instance.reimbursed_to_team and getattr(instance, "_old_reimbursed", None) is False:
        logger.info("Reintegro al equipo: pago %s (%s)", instance.pk, period)

    if ClubClosing.objects.filter(month=instance.month, year=instance.year).exists():
        logger.warning(
            "El mes %s ya está cerrado; el pago %s no modifica la recaudación guardada en el cierre.",
            period, instance.pk,
        )
