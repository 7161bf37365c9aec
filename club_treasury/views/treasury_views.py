"""
views/treasury_views.py
─────────────────────────────────────────────────────────────────────
API JSON de tesorería (solo administradores)
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict

from django.http import HttpResponse, JsonResponse
from django.views import View

from ..mixins import TreasuryAdminMixin
from ..services.billing import BillingMonth, parse_month_from_request
from ..services.errors import ValidationError
from ..services.export_service import build_workbook
from ..services.treasury_service import TreasuryService
from .payloads import account_payload

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _month_from_body(data: dict) -> BillingMonth:
    try:
        return BillingMonth(int(data["year"]), int(data["month"]))
    except KeyError as e:
        raise ValidationError(f"Falta el campo {e.args[0]}")
    except (TypeError, ValueError):
        raise ValidationError("Mes o año inválido.")


class JsonPostView(TreasuryAdminMixin, View):
    """
    POST con cuerpo JSON. Las subclases implementan handle(data, **kwargs).
    ValidationError → 400; cualquier otro error → 500 con log.
    """
    http_method_names = ["post"]

    def post(self, request, **kwargs):
        try:
            data = json.loads(request.body or b"{}")
        except json.JSONDecodeError:
            return JsonResponse({"error": "El cuerpo no es JSON válido."}, status=400)
        if not isinstance(data, dict):
            return JsonResponse({"error": "Se esperaba un objeto JSON."}, status=400)

        try:
            result = self.handle(data, **kwargs)
        except ValidationError as e:
            return JsonResponse({"error": str(e)}, status=400)
        except Exception:
            logger.exception("Error en %s", self.__class__.__name__)
            return JsonResponse({"error": "Error interno."}, status=500)

        return JsonResponse({"success": True, **result})

    def handle(self, data: dict, **kwargs) -> dict:
        raise NotImplementedError


# ────────────────────────────────────────────────────────────────────
#  1. Lectura
# ────────────────────────────────────────────────────────────────────

class MonthStatsView(TreasuryAdminMixin, View):
    """GET /treasury/month/?year=2025&month=3"""
    http_method_names = ["get"]

    def get(self, request):
        try:
            month = parse_month_from_request(request.GET.get("year"), request.GET.get("month"))
            stats = TreasuryService.month_stats(month)
        except ValidationError as e:
            return JsonResponse({"error": str(e)}, status=400)
        return JsonResponse({"month": month.label, **asdict(stats)})


class OverviewView(TreasuryAdminMixin, View):
    """GET /treasury/overview/?year=2025&month=3"""
    http_method_names = ["get"]

    def get(self, request):
        try:
            month = parse_month_from_request(request.GET.get("year"), request.GET.get("month"))
            overview = TreasuryService.overview(month)
        except ValidationError as e:
            return JsonResponse({"error": str(e)}, status=400)
        return JsonResponse({"month": month.label, **asdict(overview)})


class PlayerAccountView(TreasuryAdminMixin, View):
    """GET /treasury/players/<uuid>/account/"""
    http_method_names = ["get"]

    def get(self, request, player_id):
        try:
            account = TreasuryService.player_account(str(player_id))
        except ValidationError as e:
            return JsonResponse({"error": str(e)}, status=404)
        return JsonResponse(account_payload(account))


class TreasuryExportView(TreasuryAdminMixin, View):
    """GET /treasury/export/?year=2025&month=3 → .xlsx"""
    http_method_names = ["get"]

    def get(self, request):
        try:
            month = parse_month_from_request(request.GET.get("year"), request.GET.get("month"))
        except ValidationError as e:
            return JsonResponse({"error": str(e)}, status=400)

        snapshot = TreasuryService.load_snapshot(with_attendance=True)
        content  = build_workbook(
            TreasuryService.accounts(snapshot),
            TreasuryService.month_stats(month),
            players=snapshot.players,
            ranking=TreasuryService.ranking_aggregator(snapshot).leaderboard(),
        )
        response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        response["Content-Disposition"] = f'attachment; filename="tesoreria_{month.year}_{month.month:02d}.xlsx"'
        return response


# ────────────────────────────────────────────────────────────────────
#  2. Escritura
# ────────────────────────────────────────────────────────────────────

class RecordPaymentView(JsonPostView):
    """
    POST /treasury/payments/
    body: {"player_id", "month", "year", "amount_total", "payment_date",
           "is_financed_by_team", "id"?}
    """

    def handle(self, data, **kwargs):
        payment = TreasuryService.record_payment(data)
        return {"payment": asdict(payment)}


class MarkReimbursedView(JsonPostView):
    """POST /treasury/payments/<uuid>/reimburse/"""

    def handle(self, data, payment_id=None, **kwargs):
        payment = TreasuryService.mark_reimbursed(str(payment_id))
        return {"payment": asdict(payment)}


class FinalizeClosingView(JsonPostView):
    """POST /treasury/closing/  body: {"year", "month", "amount_paid", "notes"}"""

    def handle(self, data, **kwargs):
        closing = TreasuryService.finalize_closing(
            _month_from_body(data), data.get("amount_paid"), data.get("notes") or "",
        )
        return {"closing": asdict(closing)}


class SaveFeeConfigView(JsonPostView):
    """
    POST /treasury/fees/
    body: {"year", "month", "fees": {"activo": 1000, ...}, "is_group_payment"?}
    """

    def handle(self, data, **kwargs):
        fees = data.get("fees") or {}
        if not isinstance(fees, dict):
            raise ValidationError("fees debe ser un objeto {categoría: monto}.")
        saved = TreasuryService.save_fee_config(
            _month_from_body(data), fees, data.get("is_group_payment"),
        )
        return {"fees": saved}


class SetMonthlyStatusView(JsonPostView):
    """POST /treasury/players/<uuid>/status/  body: {"year", "month", "status"}"""

    def handle(self, data, player_id=None, **kwargs):
        record = TreasuryService.set_monthly_status(
            str(player_id), _month_from_body(data), data.get("status"),
        )
        return {"status": asdict(record)}
