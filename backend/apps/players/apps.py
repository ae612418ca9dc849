"""Players app configuration."""
from django.apps import AppConfig


class PlayersConfig(AppConfig):
    """Configuration for the players app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.players'
    verbose_name = 'Players'
