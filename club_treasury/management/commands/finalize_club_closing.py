"""
club_treasury/management/commands/finalize_club_closing.py
────────────────────────────────────────────────────────────────────
Cierre mensual con el club: guarda lo pagado, la recaudación del
momento y el ahorro. Volver a correrlo reemplaza el cierre del mes.

Uso:
  python manage.py finalize_club_closing --amount 15000
  python manage.py finalize_club_closing --year 2025 --month 3 --amount 15000 --notes "Pago grupal"
  python manage.py finalize_club_closing --amount 15000 --dry-run
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from club_treasury.services.billing import BillingMonth
from club_treasury.services.errors import ValidationError
from club_treasury.services.records import to_amount
from club_treasury.services.treasury_service import TreasuryService, current_month

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Registra el pago mensual al club/liga y congela la recaudación del mes"

    def add_arguments(self, parser):
        parser.add_argument("--year",    type=int, help="Año (por defecto: mes actual)")
        parser.add_argument("--month",   type=int, help="Mes 1-12 (por defecto: mes actual)")
        parser.add_argument("--amount",  required=True, help="Monto pagado al club")
        parser.add_argument("--notes",   default="", help="Notas del cierre")
        parser.add_argument("--dry-run", action="store_true", help="Solo mostrar, sin guardar")

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        try:
            if options["year"] and options["month"]:
                month = BillingMonth(options["year"], options["month"])
            else:
                month = current_month()
            amount = to_amount(options["amount"], "amount_paid")
            stats  = TreasuryService.month_stats(month)
        except ValidationError as e:
            raise CommandError(str(e))

        self.stdout.write(
            self.style.WARNING(
                f"\n{'[DRY-RUN] ' if dry_run else ''}"
                f"Cierre {month.label}\n{'─' * 50}"
            )
        )
        self.stdout.write(f"  Recaudado:        ${stats.total_collected}")
        self.stdout.write(f"  Financiado:       ${stats.total_financed_this_month}")
        self.stdout.write(f"  Cuota sugerida:   ${stats.suggested_club_fee}")
        self.stdout.write(f"  A pagar al club:  ${amount}")
        if stats.has_closed:
            self.stdout.write(self.style.NOTICE("  El mes ya tenía cierre: se reemplaza."))

        if dry_run:
            self.stdout.write(self.style.WARNING("  [DRY-RUN] No se guardó nada."))
            return

        try:
            closing = TreasuryService.finalize_closing(month, amount, options["notes"])
        except ValidationError as e:
            raise CommandError(str(e))

        logger.info("Cierre %s guardado desde consola", month)
        self.stdout.write(
            self.style.SUCCESS(
                f"✅ Cierre guardado: recaudado ${closing.collected_total}, "
                f"pagado ${closing.amount_paid}, ahorro ${closing.savings}"
            )
        )
