"""Models for the matches app."""
import re

from django.db import models
from django.utils import timezone

from apps.players.models import Player


class Category(models.Model):
    """Word category a round was played in."""

    slug = models.SlugField(max_length=100, unique=True)
    name = models.CharField(max_length=100)

    class Meta:
        db_table = 'categories'
        ordering = ['name']
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name

    @staticmethod
    def slugify(raw: str) -> str:
        """Lowercase, spaces to dashes, drop everything but [a-z0-9-]."""
        slug = re.sub(r'\s+', '-', raw.strip().lower())
        return re.sub(r'[^a-z0-9\-]', '', slug)

    @classmethod
    def get_or_create_for(cls, slug_or_name: str | None, name: str | None = None):
        """Return the category for a bot-supplied slug or name, creating it if new."""
        raw = (slug_or_name or name or '').strip()
        if not raw:
            return None

        slug = cls.slugify(raw)
        if not slug:
            return None

        display = (name or slug_or_name or slug).strip() or slug
        category, _ = cls.objects.get_or_create(slug=slug, defaults={'name': display})
        return category


class Match(models.Model):
    """
    One reported 4-player match.

    Created exactly once per idempotency key; everything else about the
    match (rounds, results, violations) hangs off this row.
    """

    class Mode(models.TextChoices):
        RANKED = 'ranked', 'Ranked'
        CASUAL = 'casual', 'Casual'

    guild_id = models.CharField(max_length=32, db_index=True)
    mode = models.CharField(max_length=10, choices=Mode.choices)

    started_at = models.DateTimeField(default=timezone.now)
    ended_at = models.DateTimeField(default=timezone.now)

    aborted_reason = models.CharField(max_length=100, blank=True, null=True)
    any_placement = models.BooleanField(default=False)

    idempotency_key = models.CharField(max_length=128, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'matches'
        ordering = ['-started_at']
        verbose_name_plural = 'Matches'
        indexes = [
            models.Index(fields=['mode', '-started_at'], name='matches_mode_started_idx'),
        ]

    def __str__(self):
        return f"Match {self.pk} ({self.mode}) in {self.guild_id}"

    @property
    def is_aborted(self) -> bool:
        return bool(self.aborted_reason)

    @property
    def is_violation_abort(self) -> bool:
        return bool(self.aborted_reason) and self.aborted_reason.startswith('violation:')


class MatchRound(models.Model):
    """A single deduction round within a match."""

    class Winner(models.TextChoices):
        IMPOSTER = 'imposter', 'Imposter'
        CREW = 'crew', 'Crew'

    class WinMethod(models.TextChoices):
        GUESSED_WORD = 'guessed_word', 'Guessed Word'
        VOTED_OUT_INNOCENT = 'voted_out_innocent', 'Voted Out Innocent'
        VOTED_OUT_IMPOSTER = 'voted_out_imposter', 'Voted Out Imposter'
        WRONG_GUESS = 'wrong_guess', 'Wrong Guess'
        TIMEOUT = 'timeout', 'Timeout'
        OTHER = 'other', 'Other'

    match = models.ForeignKey(
        Match,
        on_delete=models.CASCADE,
        related_name='rounds'
    )
    round_no = models.PositiveIntegerField()

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        related_name='rounds',
        null=True,
        blank=True
    )
    word = models.CharField(max_length=100, blank=True, null=True)

    imposter = models.ForeignKey(
        Player,
        on_delete=models.CASCADE,
        related_name='imposter_rounds'
    )
    winner = models.CharField(max_length=10, choices=Winner.choices)
    win_method = models.CharField(
        max_length=20,
        choices=WinMethod.choices,
        default=WinMethod.OTHER
    )

    points_imposter = models.PositiveIntegerField(default=2)
    points_crew = models.PositiveIntegerField(default=1)

    aborted = models.BooleanField(default=False)
    aborted_reason = models.CharField(max_length=100, blank=True, null=True)

    class Meta:
        db_table = 'match_rounds'
        ordering = ['match', 'round_no']
        indexes = [
            models.Index(fields=['match', 'round_no'], name='match_rounds_match_no_idx'),
        ]

    def __str__(self):
        return f"Round {self.round_no} of match {self.match_id}: {self.winner}"


class RoundPlayerPoints(models.Model):
    """Points one participant earned in one round."""

    round = models.ForeignKey(
        MatchRound,
        on_delete=models.CASCADE,
        related_name='player_points'
    )
    player = models.ForeignKey(
        Player,
        on_delete=models.CASCADE,
        related_name='round_points'
    )
    points = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'round_player_points'
        unique_together = ['round', 'player']


class MatchResult(models.Model):
    """
    Settlement outcome for one participant in one match.

    ``placement`` is the authoritative, possibly fractional, finishing
    position computed at settlement time. It is null for matches aborted
    by a violation.
    """

    match = models.ForeignKey(
        Match,
        on_delete=models.CASCADE,
        related_name='results'
    )
    player = models.ForeignKey(
        Player,
        on_delete=models.CASCADE,
        related_name='results'
    )
    total_points = models.PositiveIntegerField(default=0)
    placement = models.FloatField(null=True, blank=True)

    elo_before = models.IntegerField(null=True, blank=True)
    elo_after = models.IntegerField(null=True, blank=True)
    elo_delta = models.IntegerField(default=0)
    placement_phase = models.BooleanField(default=False)

    class Meta:
        db_table = 'match_results'
        ordering = ['match', 'placement']
        unique_together = ['match', 'player']
        indexes = [
            models.Index(fields=['player', 'match'], name='match_results_player_idx'),
        ]

    def __str__(self):
        return f"{self.player_id} in match {self.match_id}: {self.placement}"


class PlayerViolation(models.Model):
    """
    A rule violation reported by the bot. Append-only.

    Counts per (guild, player) drive the suspension escalation.
    """

    class ViolationType(models.TextChoices):
        AFK = 'afk', 'AFK'
        INAPPROPRIATE = 'unangemessen', 'Inappropriate'
        LEFT_VOICE = 'left_voice', 'Left Voice'

    guild_id = models.CharField(max_length=32)
    player = models.ForeignKey(
        Player,
        on_delete=models.CASCADE,
        related_name='violations'
    )
    violation_type = models.CharField(max_length=20, choices=ViolationType.choices)
    source = models.CharField(max_length=20, default='discord')
    suspended_until = models.DateTimeField(null=True, blank=True)
    match = models.ForeignKey(
        Match,
        on_delete=models.SET_NULL,
        related_name='violations',
        null=True,
        blank=True
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'player_violations'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['guild_id', 'player'], name='violations_guild_player_idx'),
        ]

    def __str__(self):
        return f"{self.violation_type} by {self.player_id} in {self.guild_id}"
