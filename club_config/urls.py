"""
club_config/urls.py
─────────────────────────────────────────────────────────────────────
Master URL Router
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health_check(request):
    """Docker health-check endpoint."""
    return JsonResponse({"status": "ok"})


urlpatterns = [
    # ── Admin ─────────────────────────────────────────────────────────
    path("admin/", admin.site.urls),

    # ── Health Check ──────────────────────────────────────────────────
    path("health/", health_check, name="health"),

    # ── Tesorería ─────────────────────────────────────────────────────
    path("treasury/", include("club_treasury.urls.treasury_urls", namespace="treasury")),

    # ── Ranking de compromiso ─────────────────────────────────────────
    path("ranking/", include("club_treasury.urls.ranking_urls", namespace="ranking")),
]
