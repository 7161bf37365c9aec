"""
club_treasury/management/commands/export_treasury.py
────────────────────────────────────────────────────────────────────
Exporta cuentas, cifras del mes y ranking a un archivo .xlsx

Uso:
  python manage.py export_treasury --output tesoreria.xlsx
  python manage.py export_treasury --year 2025 --month 3 --output marzo.xlsx
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from club_treasury.services.billing import BillingMonth
from club_treasury.services.errors import ValidationError
from club_treasury.services.export_service import build_workbook
from club_treasury.services.treasury_service import TreasuryService, current_month


class Command(BaseCommand):
    help = "Genera un Excel con el estado de la tesorería"

    def add_arguments(self, parser):
        parser.add_argument("--year",   type=int)
        parser.add_argument("--month",  type=int)
        parser.add_argument("--output", default="tesoreria.xlsx", help="Ruta del archivo")
        parser.add_argument("--no-ranking", action="store_true", help="Omitir la hoja de ranking")

    def handle(self, *args, **options):
        try:
            if options["year"] and options["month"]:
                month = BillingMonth(options["year"], options["month"])
            else:
                month = current_month()
            snapshot = TreasuryService.load_snapshot(with_attendance=not options["no_ranking"])
            ranking  = None
            if not options["no_ranking"]:
                ranking = TreasuryService.ranking_aggregator(snapshot).leaderboard()
            content = build_workbook(
                TreasuryService.accounts(snapshot),
                TreasuryService.month_stats(month),
                players=snapshot.players,
                ranking=ranking,
            )
        except ValidationError as e:
            raise CommandError(str(e))

        path = Path(options["output"])
        path.write_bytes(content)
        self.stdout.write(self.style.SUCCESS(f"✅ Exportado a {path} ({len(content)} bytes)"))
