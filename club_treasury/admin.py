"""
admin.py
─────────────────────────────────────────────────────────────────────
Panel de administración: plantel, cuotas, pagos, cierres y asistencia.
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import (
    Attendance, ClubClosing, FeeSchedule, Match, MonthlySetting,
    Payment, PlayerMonthlyStatus, Profile,
)

# ── Site branding ────────────────────────────────────────────────────
admin.site.site_header  = _("Tesorería del club")
admin.site.site_title   = _("Panel de administración")
admin.site.index_title  = _("Inicio")


# ════════════════════════════════════════════════════════════════════
#  Plantel
# ════════════════════════════════════════════════════════════════════

class PlayerMonthlyStatusInline(admin.TabularInline):
    model  = PlayerMonthlyStatus
    extra  = 0
    fields = ("year", "month", "status")


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display  = ("full_name", "nickname", "jersey_number", "role", "status_badge")
    list_filter   = ("role", "status")
    search_fields = ("full_name", "nickname")
    inlines       = [PlayerMonthlyStatusInline]

    def status_badge(self, obj):
        colors = {"activo": "#28a745", "semiactivo": "#ffc107", "pasivo": "#6c757d"}
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;border-radius:4px">{}</span>',
            colors.get(obj.status, "#999"), obj.get_status_display()
        )
    status_badge.short_description = _("Categoría")


# ════════════════════════════════════════════════════════════════════
#  Cuotas y configuración mensual
# ════════════════════════════════════════════════════════════════════

@admin.register(FeeSchedule)
class FeeScheduleAdmin(admin.ModelAdmin):
    list_display = ("category", "year", "month", "amount")
    list_filter  = ("category", "year")


@admin.register(MonthlySetting)
class MonthlySettingAdmin(admin.ModelAdmin):
    list_display = ("year", "month", "is_group_payment")
    list_filter  = ("is_group_payment",)


# ════════════════════════════════════════════════════════════════════
#  Pagos y cierres
# ════════════════════════════════════════════════════════════════════

@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display  = ("player", "year", "month", "amount_total", "payment_date", "financed_badge")
    list_filter   = ("year", "month", "is_financed_by_team", "reimbursed_to_team")
    search_fields = ("player__full_name", "player__nickname")
    actions       = ["mark_reimbursed_selected"]

    def financed_badge(self, obj):
        if not obj.is_financed_by_team:
            return "—"
        if obj.reimbursed_to_team:
            return format_html('<span style="color:#27ae60">✔ devuelto</span>')
        return format_html('<span style="color:#e67e22">⏳ adeuda al equipo</span>')
    financed_badge.short_description = _("Financiado")

    def mark_reimbursed_selected(self, request, queryset):
        count = 0
        for payment in queryset.filter(is_financed_by_team=True, reimbursed_to_team=False):
            payment.reimbursed_to_team = True
            payment.save(update_fields=["reimbursed_to_team"])
            count += 1
        self.message_user(request, f"{count} pago(s) marcados como devueltos al equipo.")
    mark_reimbursed_selected.short_description = _("✔ Marcar como devuelto al equipo")


@admin.register(ClubClosing)
class ClubClosingAdmin(admin.ModelAdmin):
    list_display    = ("year", "month", "amount_paid", "collected_total", "savings")
    readonly_fields = ("collected_total", "savings", "created_at")


# ════════════════════════════════════════════════════════════════════
#  Partidos y asistencia
# ════════════════════════════════════════════════════════════════════

class AttendanceInline(admin.TabularInline):
    model  = Attendance
    extra  = 0
    fields = ("player", "confirmation_status", "attendance_type",
              "forgot_jerseys", "washed_jerseys", "points_impact", "is_pardoned")


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ("opponent", "match_date", "status", "result_our_score", "result_opponent_score")
    list_filter  = ("status",)
    inlines      = [AttendanceInline]


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display  = ("player", "match", "confirmation_status", "attendance_type", "is_pardoned")
    list_filter   = ("confirmation_status", "attendance_type", "is_pardoned")
    search_fields = ("player__full_name", "match__opponent")
