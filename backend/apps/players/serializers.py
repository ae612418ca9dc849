"""Serializers for the players app."""
from django.conf import settings
from rest_framework import serializers

from apps.matches.models import MatchResult
from .models import Player
from .services.ranks import rank_for


class PlayerSerializer(serializers.ModelSerializer):
    """Minimal player info for tables."""

    name = serializers.CharField(read_only=True)
    games_total = serializers.IntegerField(read_only=True)
    wins_imposter_total = serializers.IntegerField(read_only=True)
    wins_crew_total = serializers.IntegerField(read_only=True)

    class Meta:
        model = Player
        fields = [
            'discord_id', 'name', 'games_total',
            'wins_imposter_total', 'wins_crew_total'
        ]


class LeaderboardEntrySerializer(serializers.ModelSerializer):
    """
    Ranked leaderboard row.

    Expects ``recent_placements`` ({discord_id: [placements]}) in context.
    """

    name = serializers.CharField(read_only=True)
    rank = serializers.SerializerMethodField()
    last_placements = serializers.SerializerMethodField()

    class Meta:
        model = Player
        fields = [
            'discord_id', 'name', 'elo_ranked', 'rank',
            'games_ranked', 'games_casual', 'last_placements'
        ]

    def get_rank(self, obj):
        return rank_for(obj.elo_ranked, obj.games_ranked).as_dict()

    def get_last_placements(self, obj):
        return self.context.get('recent_placements', {}).get(obj.discord_id, [])


class RecentResultSerializer(serializers.ModelSerializer):
    """A player's result in one match, for the profile history."""

    match_id = serializers.IntegerField(read_only=True)
    mode = serializers.CharField(source='match.mode', read_only=True)
    started_at = serializers.DateTimeField(source='match.started_at', read_only=True)
    aborted_reason = serializers.CharField(source='match.aborted_reason', read_only=True)

    class Meta:
        model = MatchResult
        fields = [
            'match_id', 'mode', 'started_at', 'aborted_reason',
            'total_points', 'placement', 'elo_delta', 'placement_phase'
        ]


class PlayerProfileSerializer(serializers.ModelSerializer):
    """Full player profile with rank, suspension state and recent matches."""

    name = serializers.CharField(read_only=True)
    rank = serializers.SerializerMethodField()
    elo_ranked = serializers.SerializerMethodField()
    games_total = serializers.IntegerField(read_only=True)
    is_in_placement = serializers.BooleanField(read_only=True)
    is_ranked_qualified = serializers.BooleanField(read_only=True)
    is_suspended = serializers.BooleanField(read_only=True)
    recent_results = serializers.SerializerMethodField()

    class Meta:
        model = Player
        fields = [
            'discord_id', 'name', 'elo_ranked', 'rank',
            'games_ranked', 'games_casual', 'games_total',
            'wins_imposter_ranked', 'wins_imposter_casual',
            'wins_crew_ranked', 'wins_crew_casual',
            'duo_coins', 'duo_games',
            'is_in_placement', 'is_ranked_qualified',
            'violations_count', 'banned_until', 'is_suspended',
            'last_match_at', 'recent_results'
        ]

    def get_rank(self, obj):
        return rank_for(obj.elo_ranked, obj.games_ranked).as_dict()

    def get_elo_ranked(self, obj):
        """Rating stays hidden until placement matches are done."""
        if obj.is_in_placement:
            return None
        return obj.elo_ranked

    def get_recent_results(self, obj):
        limit = settings.LEADERBOARD['PROFILE_RECENT_MATCHES']
        results = obj.results.select_related('match').order_by(
            '-match__started_at', '-match_id'
        )[:limit]
        return RecentResultSerializer(results, many=True).data
