"""URL configuration for the players app."""
from django.urls import path

from . import views

app_name = 'players'

urlpatterns = [
    path('leaderboard/', views.LeaderboardView.as_view(), name='leaderboard'),
    path('leaderboard/top/', views.MiniTablesView.as_view(), name='mini_tables'),
    path('players/<str:discord_id>/', views.PlayerDetailView.as_view(), name='player_detail'),
]
