"""
club_treasury/management/commands/treasury_report.py
────────────────────────────────────────────────────────────────────
Reporte de tesorería por consola: cifras del mes y estado de cuenta
de cada jugador.

Uso:
  python manage.py treasury_report                        # mes actual
  python manage.py treasury_report --year 2025 --month 3
  python manage.py treasury_report --player <uuid>        # un solo jugador
"""

from django.core.management.base import BaseCommand, CommandError

from club_treasury.services.billing import BillingMonth
from club_treasury.services.errors import ValidationError
from club_treasury.services.treasury_service import TreasuryService, current_month


class Command(BaseCommand):
    help = "Muestra la recaudación del mes y el estado de cuenta de los jugadores"

    def add_arguments(self, parser):
        parser.add_argument("--year",   type=int, help="Año (por defecto: mes actual)")
        parser.add_argument("--month",  type=int, help="Mes 1-12 (por defecto: mes actual)")
        parser.add_argument("--player", help="UUID de un jugador")

    def handle(self, *args, **options):
        try:
            if options["year"] and options["month"]:
                month = BillingMonth(options["year"], options["month"])
            else:
                month = current_month()

            snapshot = TreasuryService.load_snapshot()
            stats    = TreasuryService.month_stats(month)
            if options["player"]:
                accounts = [TreasuryService.player_account(options["player"], as_of=month)]
            else:
                accounts = TreasuryService.accounts(snapshot, as_of=month)
        except ValidationError as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.WARNING(f"\nTesorería {month.label}\n{'─' * 50}"))
        self.stdout.write(f"  Recaudado (bruto):        ${stats.total_collected}")
        self.stdout.write(f"  Financiado por el equipo: ${stats.total_financed_this_month}")
        self.stdout.write(f"  Pagaron:                  {stats.paid_count}")
        self.stdout.write(f"  Cuota sugerida al club:   ${stats.suggested_club_fee}")
        self.stdout.write(f"  Pagado al club:           ${stats.amount_paid_to_club}")
        if stats.has_closed:
            self.stdout.write(self.style.SUCCESS(f"  Cerrado — ahorro ${stats.savings}"))
        else:
            self.stdout.write(self.style.NOTICE(f"  Sin cierre — ahorro estimado ${stats.savings}"))

        names = {p.id: p.full_name or p.nickname or p.id for p in snapshot.players}
        self.stdout.write("\n" + "─" * 50)
        for acc in accounts:
            line = (
                f"  {names.get(acc.player_id, acc.player_id):<30}"
                f" deuda ${acc.total_debt}  financiado ${acc.financed_debt}"
            )
            if acc.total_debt > 0:
                self.stdout.write(self.style.ERROR(line + f"  ({acc.debt_months} mes/es)"))
            elif acc.financed_debt > 0:
                self.stdout.write(self.style.WARNING(line))
            else:
                self.stdout.write(self.style.SUCCESS(line))
            for warning in acc.orphan_payment_months:
                self.stdout.write(self.style.NOTICE(f"      ⚠ {warning}"))
            if acc.truncated:
                self.stdout.write(self.style.NOTICE("      ⚠ historial recortado"))
