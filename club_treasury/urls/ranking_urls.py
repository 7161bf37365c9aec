"""
club_treasury/urls/ranking_urls.py
namespace = "ranking"
"""
from django.urls import path

from ..views.ranking_views import PardonView, PlayerScoringView, RankingView

app_name = "ranking"

urlpatterns = [
    path("",                          RankingView.as_view(),       name="leaderboard"),
    path("players/<uuid:player_id>/", PlayerScoringView.as_view(), name="player"),
    path("pardon/",                   PardonView.as_view(),        name="pardon"),
]
