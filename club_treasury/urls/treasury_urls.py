"""
club_treasury/urls/treasury_urls.py
namespace = "treasury"
"""
from django.urls import path

from ..views.treasury_views import (
    FinalizeClosingView,
    MarkReimbursedView,
    MonthStatsView,
    OverviewView,
    PlayerAccountView,
    RecordPaymentView,
    SaveFeeConfigView,
    SetMonthlyStatusView,
    TreasuryExportView,
)

app_name = "treasury"

urlpatterns = [
    # ─── lectura ──────────────────────────────────────────────────
    path("month/",                         MonthStatsView.as_view(),     name="month"),
    path("overview/",                      OverviewView.as_view(),       name="overview"),
    path("players/<uuid:player_id>/account/", PlayerAccountView.as_view(), name="player-account"),
    path("export/",                        TreasuryExportView.as_view(), name="export"),

    # ─── escritura ────────────────────────────────────────────────
    path("payments/",                             RecordPaymentView.as_view(),    name="payment-record"),
    path("payments/<uuid:payment_id>/reimburse/", MarkReimbursedView.as_view(),   name="payment-reimburse"),
    path("closing/",                              FinalizeClosingView.as_view(),  name="closing"),
    path("fees/",                                 SaveFeeConfigView.as_view(),    name="fees"),
    path("players/<uuid:player_id>/status/",      SetMonthlyStatusView.as_view(), name="player-status"),
]
