"""
Violation escalation.

Every reported violation is stored as an event; the player's count of
events within a guild decides how long their suspension lasts.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional, Sequence

from django.utils import timezone

from apps.players.models import Player
from ..models import Match, PlayerViolation

logger = logging.getLogger(__name__)

# Suspension length by violation count; counts past the end use the last entry
SUSPENSION_STEPS = (
    timedelta(minutes=30),
    timedelta(hours=1),
    timedelta(hours=2),
    timedelta(hours=4),
    timedelta(hours=8),
    timedelta(hours=16),
    timedelta(hours=24),
)

RANKED_VIOLATION_PENALTY = 30


def suspension_for_count(count: int) -> timedelta:
    """
    Suspension duration for a player's n-th violation.

    1 -> 30m, 2 -> 1h, 3 -> 2h, 4 -> 4h, 5 -> 8h, 6 -> 16h, 7+ -> 24h.
    """
    index = min(max(count, 1), len(SUSPENSION_STEPS)) - 1
    return SUSPENSION_STEPS[index]


def abort_deltas(
    participant_ids: Sequence[str],
    offender_id: str,
    ranked: bool,
    penalty: int = RANKED_VIOLATION_PENALTY,
) -> Dict[str, int]:
    """Rating deltas for a match aborted by a violation: only a ranked offender loses points."""
    return {
        pid: (-penalty if ranked and pid == offender_id else 0)
        for pid in participant_ids
    }


@dataclass
class ViolationOutcome:
    """What a recorded violation did to the offender."""
    player_id: str
    violation_type: str
    count: int
    duration: timedelta
    suspended_until: datetime

    def as_dict(self) -> dict:
        return {
            'discord_id': self.player_id,
            'violation_type': self.violation_type,
            'violations_count': self.count,
            'penalty_minutes': int(self.duration.total_seconds() // 60),
            'penalty_until': self.suspended_until.isoformat(),
        }

    @classmethod
    def from_violation(cls, violation: PlayerViolation) -> 'ViolationOutcome':
        """Rebuild the outcome of an already recorded violation."""
        count = PlayerViolation.objects.filter(
            guild_id=violation.guild_id,
            player_id=violation.player_id,
            pk__lte=violation.pk,
        ).count()
        duration = suspension_for_count(count)
        return cls(
            player_id=violation.player_id,
            violation_type=violation.violation_type,
            count=count,
            duration=duration,
            suspended_until=violation.suspended_until or violation.created_at + duration,
        )


class ViolationTracker:
    """
    Record violations and escalate suspensions.

    The player's cached ``violations_count`` is always recomputed from
    the PlayerViolation rows, never incremented in place. Callers are
    expected to hold a row lock on the player.
    """

    def __init__(self, now: Optional[datetime] = None):
        self.now = now

    def record(
        self,
        scope: str,
        player: Player,
        violation_type: str,
        match: Optional[Match] = None,
    ) -> ViolationOutcome:
        """
        Append a violation and update the player's suspension.

        Args:
            scope: Guild the violation happened in.
            player: Offending player (locked by the caller).
            violation_type: One of PlayerViolation.ViolationType.
            match: Match during which it happened.

        Returns:
            ViolationOutcome with the scoped count and suspension end.
        """
        now = self.now or timezone.now()

        count = PlayerViolation.objects.filter(guild_id=scope, player=player).count() + 1
        duration = suspension_for_count(count)
        suspended_until = now + duration

        # Suspensions never shorten
        if player.banned_until and player.banned_until > suspended_until:
            suspended_until = player.banned_until

        PlayerViolation.objects.create(
            guild_id=scope,
            player=player,
            violation_type=violation_type,
            match=match,
            suspended_until=suspended_until,
            created_at=now,
        )

        player.violations_count = PlayerViolation.objects.filter(player=player).count()
        player.banned_until = suspended_until
        player.last_violation_at = now
        player.save(update_fields=['violations_count', 'banned_until', 'last_violation_at'])

        logger.warning(
            f"Violation {violation_type} by {player.discord_id} in guild {scope}: "
            f"count={count}, suspended until {suspended_until.isoformat()}"
        )

        return ViolationOutcome(
            player_id=player.discord_id,
            violation_type=violation_type,
            count=count,
            duration=duration,
            suspended_until=suspended_until,
        )
