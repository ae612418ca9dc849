"""URL configuration for the matches app."""
from django.urls import path

from . import views

app_name = 'matches'

urlpatterns = [
    path('match/', views.MatchIngestView.as_view(), name='match_ingest'),
    path('matches/<int:pk>/', views.MatchDetailView.as_view(), name='match_detail'),
    path('ingest/status/', views.IngestStatusView.as_view(), name='ingest_status'),
]
