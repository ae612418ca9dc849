"""Models for the players app."""
from django.conf import settings
from django.db import models
from django.utils import timezone


class Player(models.Model):
    """
    A Discord member who has taken part in at least one reported match.

    Rating and game counters are denormalised onto the row for fast
    dashboard reads. They are only written by match settlement, which
    locks the row first.
    """

    discord_id = models.CharField(max_length=32, primary_key=True)
    display_name = models.CharField(max_length=100, blank=True, null=True)

    # Ranked rating
    elo_ranked = models.IntegerField(default=1000)

    # Game counters
    games_ranked = models.PositiveIntegerField(default=0)
    games_casual = models.PositiveIntegerField(default=0)

    # Round wins by role
    wins_imposter_ranked = models.PositiveIntegerField(default=0)
    wins_imposter_casual = models.PositiveIntegerField(default=0)
    wins_crew_ranked = models.PositiveIntegerField(default=0)
    wins_crew_casual = models.PositiveIntegerField(default=0)

    # Duo mode economy. Written by the bot's duo mode, never by match settlement
    duo_coins = models.IntegerField(default=0)
    duo_games = models.PositiveIntegerField(default=0)

    # Moderation (cached from PlayerViolation)
    violations_count = models.PositiveIntegerField(default=0)
    banned_until = models.DateTimeField(null=True, blank=True)
    last_violation_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    last_match_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Optimistic locking
    version = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'players'
        ordering = ['-elo_ranked']
        indexes = [
            models.Index(fields=['games_ranked', 'elo_ranked'], name='players_games_elo_idx'),
        ]

    def __str__(self):
        return self.display_name or self.discord_id

    def save(self, *args, **kwargs):
        """Increment version on every save for optimistic locking."""
        self.version += 1
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | {'version', 'updated_at'}
        super().save(*args, **kwargs)

    @property
    def name(self) -> str:
        return self.display_name or self.discord_id

    @property
    def games_total(self) -> int:
        return self.games_ranked + self.games_casual

    @property
    def wins_imposter_total(self) -> int:
        return self.wins_imposter_ranked + self.wins_imposter_casual

    @property
    def wins_crew_total(self) -> int:
        return self.wins_crew_ranked + self.wins_crew_casual

    @property
    def is_in_placement(self) -> bool:
        """True while the player is still within their first ranked matches."""
        return self.games_ranked < settings.SETTLEMENT['PLACEMENT_GAMES']

    @property
    def is_ranked_qualified(self) -> bool:
        """Casual matches required before joining ranked."""
        return self.games_casual >= settings.SETTLEMENT['CASUAL_REQUIRED_FOR_RANKED']

    @property
    def is_suspended(self) -> bool:
        return self.banned_until is not None and self.banned_until > timezone.now()
