"""Serializers for the matches app."""
from rest_framework import serializers

from .models import Match, MatchResult, MatchRound, PlayerViolation
from .services.reports import (
    MatchReport,
    ParticipantEntry,
    RoundOutcome,
    ViolationReport,
    map_win_method,
    normalize_winner,
)
from .services.violations import ViolationOutcome


class ReportedPlayerSerializer(serializers.Serializer):
    """One participant as the bot reports it."""

    discord_id = serializers.CharField(max_length=32)
    display_name = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    elo_before = serializers.IntegerField(required=False, allow_null=True)
    total_points = serializers.IntegerField(required=False, allow_null=True, min_value=0)


class ReportedRoundSerializer(serializers.Serializer):
    """One round as the bot reports it."""

    round_no = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    category = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    category_slug = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    category_name = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    word = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    imposter_discord_id = serializers.CharField(max_length=32)
    winner = serializers.CharField()
    win_method = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    aborted = serializers.BooleanField(required=False, default=False)
    aborted_reason = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )

    def validate_winner(self, value):
        """Accept the bot's winner spellings."""
        winner = normalize_winner(value)
        if winner is None:
            raise serializers.ValidationError(f"Unknown winner '{value}'.")
        return winner


class ReportedViolationSerializer(serializers.Serializer):
    """A violation that aborted the match."""

    type = serializers.ChoiceField(choices=PlayerViolation.ViolationType.choices)
    discord_id = serializers.CharField(max_length=32)
    round_no = serializers.IntegerField(required=False, allow_null=True)


class MatchReportSerializer(serializers.Serializer):
    """
    Incoming match report.

    Only checks shape; game rules (player count, mode, qualification)
    are enforced by settlement so that they produce rule-specific error
    codes.
    """

    guild_id = serializers.CharField(max_length=32)
    mode = serializers.CharField(max_length=20)
    started_at = serializers.DateTimeField(required=False, allow_null=True)
    ended_at = serializers.DateTimeField(required=False, allow_null=True)
    players = ReportedPlayerSerializer(many=True)
    rounds = ReportedRoundSerializer(many=True, required=False, allow_null=True)
    abort_reason = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    violation = ReportedViolationSerializer(required=False, allow_null=True)
    idempotency_key = serializers.CharField(
        max_length=128, required=False, allow_null=True, allow_blank=True
    )

    def to_report(self, idempotency_key: str | None = None) -> MatchReport:
        """Build the settlement input from validated data; a header key wins over the body."""
        data = self.validated_data

        participants = tuple(
            ParticipantEntry(
                discord_id=str(p['discord_id']),
                display_name=p.get('display_name') or None,
                elo_before=p.get('elo_before'),
                total_points=p.get('total_points'),
            )
            for p in data['players']
        )

        rounds = tuple(
            RoundOutcome(
                round_no=r.get('round_no') or index + 1,
                imposter_id=str(r['imposter_discord_id']),
                winner=r['winner'],
                win_method=map_win_method(r.get('win_method')),
                aborted=bool(r.get('aborted')),
                aborted_reason=r.get('aborted_reason') or None,
                category_slug=r.get('category_slug') or None,
                category_name=r.get('category_name') or r.get('category') or None,
                word=r.get('word') or None,
            )
            for index, r in enumerate(data.get('rounds') or [])
        )

        violation = None
        if data.get('violation'):
            v = data['violation']
            violation = ViolationReport(
                violation_type=v['type'],
                discord_id=str(v['discord_id']),
                round_no=v.get('round_no'),
            )

        return MatchReport(
            guild_id=str(data['guild_id']),
            mode=data['mode'],
            participants=participants,
            rounds=rounds,
            started_at=data.get('started_at'),
            ended_at=data.get('ended_at'),
            abort_reason=data.get('abort_reason') or None,
            violation=violation,
            idempotency_key=idempotency_key or data.get('idempotency_key') or None,
        )


class MatchRoundSerializer(serializers.ModelSerializer):
    """Serializer for stored rounds."""

    category = serializers.SerializerMethodField()
    imposter_discord_id = serializers.CharField(source='imposter_id', read_only=True)

    class Meta:
        model = MatchRound
        fields = [
            'id', 'round_no', 'category', 'word', 'imposter_discord_id',
            'winner', 'win_method', 'points_imposter', 'points_crew',
            'aborted', 'aborted_reason'
        ]

    def get_category(self, obj):
        return obj.category.name if obj.category_id else None


class MatchResultSerializer(serializers.ModelSerializer):
    """Serializer for per-player match results."""

    discord_id = serializers.CharField(source='player_id', read_only=True)
    player_name = serializers.CharField(source='player.name', read_only=True)

    class Meta:
        model = MatchResult
        fields = [
            'discord_id', 'player_name', 'total_points', 'placement',
            'elo_before', 'elo_after', 'elo_delta', 'placement_phase'
        ]


class MatchDetailSerializer(serializers.ModelSerializer):
    """Serializer for a stored match with its rounds and results."""

    rounds = MatchRoundSerializer(many=True, read_only=True)
    results = MatchResultSerializer(many=True, read_only=True)
    aborted = serializers.BooleanField(source='is_aborted', read_only=True)
    violation = serializers.SerializerMethodField()

    class Meta:
        model = Match
        fields = [
            'id', 'guild_id', 'mode', 'started_at', 'ended_at',
            'aborted', 'aborted_reason', 'any_placement',
            'rounds', 'results', 'violation'
        ]

    def get_violation(self, obj):
        if not obj.is_violation_abort:
            return None
        violation = obj.violations.first()
        if violation is None:
            return None
        return ViolationOutcome.from_violation(violation).as_dict()
