"""Admin configuration for the matches app."""
from django.contrib import admin

from .models import Category, Match, MatchResult, MatchRound, PlayerViolation


class MatchRoundInline(admin.TabularInline):
    model = MatchRound
    extra = 0
    readonly_fields = [
        'round_no', 'category', 'word', 'imposter', 'winner',
        'win_method', 'aborted', 'aborted_reason'
    ]
    can_delete = False


class MatchResultInline(admin.TabularInline):
    model = MatchResult
    extra = 0
    readonly_fields = [
        'player', 'total_points', 'placement', 'elo_before',
        'elo_after', 'elo_delta', 'placement_phase'
    ]
    can_delete = False


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    """Admin for Match model. Matches are written by settlement only."""

    list_display = [
        'id', 'guild_id', 'mode', 'started_at', 'aborted_reason', 'any_placement'
    ]
    list_filter = ['mode', 'any_placement', 'started_at']
    search_fields = ['guild_id', 'id', 'idempotency_key']
    readonly_fields = [
        'guild_id', 'mode', 'started_at', 'ended_at', 'aborted_reason',
        'any_placement', 'idempotency_key', 'created_at'
    ]
    ordering = ['-started_at']
    inlines = [MatchRoundInline, MatchResultInline]


@admin.register(PlayerViolation)
class PlayerViolationAdmin(admin.ModelAdmin):
    """Admin for PlayerViolation model. Append-only."""

    list_display = ['player', 'guild_id', 'violation_type', 'match', 'suspended_until', 'created_at']
    list_filter = ['violation_type', 'created_at']
    search_fields = ['player__discord_id', 'player__display_name', 'guild_id']
    readonly_fields = [
        'guild_id', 'player', 'violation_type', 'source', 'match',
        'suspended_until', 'created_at'
    ]
    ordering = ['-created_at']

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin for Category model."""

    list_display = ['name', 'slug']
    search_fields = ['name', 'slug']
    ordering = ['name']
