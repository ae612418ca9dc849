"""
Rank tiers shown next to a player's ranked rating.

Tiers are fixed 100-point bands from Eisen I (300, the rating floor) up
to Master (2100+). Players still in their placement matches are shown
as Unranked and their rating is hidden.
"""
from dataclasses import dataclass
from typing import Optional

from django.conf import settings


@dataclass(frozen=True)
class RankTier:
    """A named rating band."""
    label: str
    min_elo: int
    badge: str
    is_master: bool = False


@dataclass(frozen=True)
class RankInfo:
    """Tier for a specific player, with the points shown inside the badge."""
    label: str
    badge: str
    value: Optional[int]
    is_ranked: bool

    def as_dict(self) -> dict:
        return {
            'label': self.label,
            'badge': self.badge,
            'value': self.value,
            'is_ranked': self.is_ranked,
        }


RANK_TIERS = (
    RankTier('Eisen I', 300, 'eisen-1'),
    RankTier('Eisen II', 400, 'eisen-2'),
    RankTier('Eisen III', 500, 'eisen-3'),
    RankTier('Bronze I', 600, 'bronze-1'),
    RankTier('Bronze II', 700, 'bronze-2'),
    RankTier('Bronze III', 800, 'bronze-3'),
    RankTier('Silber I', 900, 'silber-1'),
    RankTier('Silber II', 1000, 'silber-2'),
    RankTier('Silber III', 1100, 'silber-3'),
    RankTier('Gold I', 1200, 'gold-1'),
    RankTier('Gold II', 1300, 'gold-2'),
    RankTier('Gold III', 1400, 'gold-3'),
    RankTier('Platin I', 1500, 'platin-1'),
    RankTier('Platin II', 1600, 'platin-2'),
    RankTier('Platin III', 1700, 'platin-3'),
    RankTier('Diamant I', 1800, 'diamant-1'),
    RankTier('Diamant II', 1900, 'diamant-2'),
    RankTier('Diamant III', 2000, 'diamant-3'),
    RankTier('Master', 2100, 'master', is_master=True),
)

UNRANKED = RankInfo(label='Unranked', badge='unranked', value=None, is_ranked=False)


def tier_for_elo(elo: int) -> RankTier:
    """Highest tier whose threshold the rating reaches (Eisen I below the floor)."""
    best = RANK_TIERS[0]
    for tier in RANK_TIERS:
        if elo >= tier.min_elo:
            best = tier
    return best


def rank_for(elo: int, games_ranked: int) -> RankInfo:
    """
    Resolve the rank badge for a player.

    Args:
        elo: Current ranked rating.
        games_ranked: Ranked matches played so far.

    Returns:
        RankInfo; Unranked while the player has fewer ranked games than
        the placement window.
    """
    if games_ranked < settings.SETTLEMENT['RANKED_QUALIFIED_GAMES']:
        return UNRANKED

    tier = tier_for_elo(elo)
    if tier.is_master:
        value = max(0, elo - tier.min_elo)
    else:
        value = elo % 100
    return RankInfo(label=tier.label, badge=tier.badge, value=value, is_ranked=True)
