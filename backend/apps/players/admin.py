"""Admin configuration for the players app."""
from django.contrib import admin

from .models import Player


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):
    """Admin for Player model with game statistics."""

    list_display = [
        'discord_id', 'display_name', 'elo_ranked', 'games_ranked',
        'games_casual', 'violations_count', 'banned_until'
    ]
    list_filter = ['banned_until', 'created_at']
    search_fields = ['discord_id', 'display_name']
    ordering = ['-elo_ranked']

    fieldsets = (
        ('Player', {
            'fields': ('discord_id', 'display_name')
        }),
        ('Ranked', {
            'fields': ('elo_ranked', 'games_ranked')
        }),
        ('Game Statistics', {
            'fields': (
                'games_casual',
                'wins_imposter_ranked', 'wins_imposter_casual',
                'wins_crew_ranked', 'wins_crew_casual',
            )
        }),
        ('Duo', {
            'fields': ('duo_coins', 'duo_games')
        }),
        ('Moderation', {
            'fields': ('violations_count', 'banned_until', 'last_violation_at')
        }),
        ('Metadata', {
            'fields': ('version', 'last_match_at', 'created_at', 'updated_at')
        }),
    )

    # Written by match settlement only
    readonly_fields = [
        'elo_ranked', 'games_ranked', 'games_casual',
        'wins_imposter_ranked', 'wins_imposter_casual',
        'wins_crew_ranked', 'wins_crew_casual',
        'violations_count', 'last_violation_at',
        'version', 'last_match_at', 'created_at', 'updated_at'
    ]
