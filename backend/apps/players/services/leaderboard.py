"""
Leaderboard queries.

Placements shown on the dashboard are the ones stored at settlement
time; they are never re-derived from point totals here.
"""
from collections import defaultdict
from typing import Dict, Iterable, List

from django.conf import settings
from django.db.models import F

from apps.matches.models import Match, MatchResult
from ..models import Player


def ranked_players(limit: int | None = None):
    """Ranked-qualified players, best rating first."""
    limit = limit or settings.LEADERBOARD['RANKED_LIMIT']
    return Player.objects.filter(
        games_ranked__gte=settings.SETTLEMENT['RANKED_QUALIFIED_GAMES']
    ).order_by('-elo_ranked', 'discord_id')[:limit]


def recent_placements(
    player_ids: Iterable[str],
    mode: str = Match.Mode.RANKED,
    per_player: int | None = None,
) -> Dict[str, List[float]]:
    """
    Most recent stored placements per player, newest first.

    Matches aborted by a violation have no placement and are skipped.
    """
    per_player = per_player or settings.LEADERBOARD['RECENT_PLACEMENTS']
    ids = list(player_ids)
    if not ids:
        return {}

    rows = MatchResult.objects.filter(
        player_id__in=ids,
        match__mode=mode,
        placement__isnull=False,
    ).order_by('-match__started_at', '-match_id').values_list('player_id', 'placement')

    placements = defaultdict(list)
    for player_id, placement in rows.iterator():
        if len(placements[player_id]) < per_player:
            placements[player_id].append(placement)
    return dict(placements)


def mini_tables(limit: int | None = None) -> Dict[str, list]:
    """Top players by games played, imposter wins and crew wins across both modes."""
    limit = limit or settings.LEADERBOARD['MINI_TABLE_LIMIT']
    players = Player.objects.annotate(
        games_sum=F('games_ranked') + F('games_casual'),
        imposter_wins_sum=F('wins_imposter_ranked') + F('wins_imposter_casual'),
        crew_wins_sum=F('wins_crew_ranked') + F('wins_crew_casual'),
    )
    return {
        'most_games': list(players.order_by('-games_sum', 'discord_id')[:limit]),
        'most_imposter_wins': list(players.order_by('-imposter_wins_sum', 'discord_id')[:limit]),
        'most_crew_wins': list(players.order_by('-crew_wins_sum', 'discord_id')[:limit]),
    }
