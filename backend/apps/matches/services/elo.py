"""
Placement-based Elo for 4-player Imposter matches.

Ranked matches are rated on finishing position rather than expected
score: every place has a fixed base delta, which is then scaled by how
far the player sits from the rest of the lobby and amplified during the
player's placement matches.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from .placements import tie_groups


@dataclass
class EloDeltaResult:
    """Result of a rating update for one participant."""
    player_id: str
    old_rating: int
    new_rating: int
    delta: int
    placement_phase: bool


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


class EloDeltaEngine:
    """
    Calculate integer rating deltas for a ranked match.

    Pipeline, per participant:
    1. Base delta by place (+30/+10/-10/-30); tied players share the mean
       of the base deltas of the places they cover.
    2. Lobby dampening: with diff = own rating - mean rating of the other
       three, |diff| picks a fraction (0, 0.2, 0.4, 0.6). A player above
       the lobby wins less and loses more; below the lobby, the reverse.
    3. Placement multiplier: x3 for players with fewer than
       ``placement_games`` ranked matches.
    4. Rounding. If anyone is in placement, each delta is rounded on its
       own and the sum may drift. Otherwise deltas are re-centred on zero,
       rounded, and the rounding residual is handed out one point at a
       time so the match sums to exactly zero.

    Ratings never drop below ``floor_rating``; only the stored rating is
    clamped, never the delta.

    Attributes:
        base_deltas: Delta for 1st..Nth place.
        placement_games: Ranked games before a player leaves placement.
        placement_multiplier: Scale applied to placement players.
        floor_rating: Minimum stored rating.

    Example:
        engine = EloDeltaEngine()
        deltas = engine.compute_deltas(
            [('a', 5), ('b', 3), ('c', 3), ('d', 2)],
            {'a': 1000, 'b': 1000, 'c': 1000, 'd': 1000},
            {'a': False, 'b': False, 'c': False, 'd': False},
        )
        # {'a': 30, 'b': 0, 'c': 0, 'd': -30}
    """

    BASE_DELTAS = (30, 10, -10, -30)

    # (minimum |diff|, fraction), checked from the top down
    DAMPENING_STEPS = (
        (300, 0.6),
        (200, 0.4),
        (100, 0.2),
    )

    def __init__(
        self,
        base_deltas: Sequence[int] = BASE_DELTAS,
        placement_games: int = 6,
        placement_multiplier: float = 3,
        floor_rating: int = 300,
    ):
        self.base_deltas = tuple(base_deltas)
        self.placement_games = placement_games
        self.placement_multiplier = placement_multiplier
        self.floor_rating = floor_rating

    @classmethod
    def from_settings(cls) -> 'EloDeltaEngine':
        """Build an engine from ``settings.SETTLEMENT``."""
        from django.conf import settings

        rules = settings.SETTLEMENT
        return cls(
            placement_games=rules['PLACEMENT_GAMES'],
            placement_multiplier=rules['PLACEMENT_MULTIPLIER'],
            floor_rating=rules['ELO_FLOOR'],
        )

    def is_placement(self, ranked_games_played: int) -> bool:
        return ranked_games_played < self.placement_games

    def dampening_fraction(self, abs_diff: float) -> float:
        """Fraction a delta is scaled by for a given rating gap."""
        for threshold, fraction in self.DAMPENING_STEPS:
            if abs_diff >= threshold:
                return fraction
        return 0.0

    def base_deltas_by_ties(self, sorted_by_points: Sequence[Tuple[str, float]]) -> Dict[str, float]:
        """
        Base delta for each participant, averaged across tied groups.

        Args:
            sorted_by_points: (id, points) pairs sorted best first.
        """
        result = {}
        for start, end in tie_groups(sorted_by_points):
            covered = [
                self.base_deltas[k] if k < len(self.base_deltas) else 0
                for k in range(start, end + 1)
            ]
            avg = sum(covered) / len(covered)
            for k in range(start, end + 1):
                result[sorted_by_points[k][0]] = avg
        return result

    def apply_lobby_dampening(self, base_delta: float, rating: float, avg_others: float) -> float:
        """Scale a base delta by the player's distance from the lobby average."""
        if base_delta == 0:
            return 0.0

        diff = rating - avg_others
        fraction = self.dampening_fraction(abs(diff))
        if fraction == 0:
            return base_delta

        if diff > 0:
            # Favourite: smaller gains, bigger losses
            if base_delta > 0:
                return base_delta * (1 - fraction)
            return base_delta * (1 + fraction)
        if diff < 0:
            if base_delta > 0:
                return base_delta * (1 + fraction)
            return base_delta * (1 - fraction)
        return base_delta

    def scaled_deltas(
        self,
        sorted_by_points: Sequence[Tuple[str, float]],
        pre_match_ratings: Mapping[str, float],
        placement_flags: Mapping[str, bool],
    ) -> Dict[str, float]:
        """Float deltas after dampening and the placement multiplier, before rounding."""
        base = self.base_deltas_by_ties(sorted_by_points)
        ids = [pid for pid, _ in sorted_by_points]

        scaled = {}
        for pid in ids:
            others = [pre_match_ratings[other] for other in ids if other != pid]
            avg_others = sum(others) / len(others) if others else pre_match_ratings[pid]

            delta = self.apply_lobby_dampening(base[pid], pre_match_ratings[pid], avg_others)
            if placement_flags.get(pid, False):
                delta = delta * self.placement_multiplier
            scaled[pid] = delta
        return scaled

    def normalize_zero_sum(self, deltas: Mapping[str, float]) -> Dict[str, int]:
        """
        Re-centre float deltas on zero and round them so they sum to exactly 0.

        The residual left by rounding goes one point at a time to the
        participants whose fractional remainder points furthest in the
        needed direction, cycling through them if necessary.
        """
        ids = list(deltas.keys())
        if not ids:
            return {}

        mean = sum(deltas.values()) / len(ids)
        centred = {pid: deltas[pid] - mean for pid in ids}

        rounded = {}
        remainders = []
        for pid in ids:
            value = round_half_up(centred[pid])
            rounded[pid] = value
            remainders.append((pid, centred[pid] - value))

        residual = -sum(rounded.values())
        if residual != 0:
            if residual > 0:
                remainders.sort(key=lambda item: item[1], reverse=True)
            else:
                remainders.sort(key=lambda item: item[1])

            step = 1 if residual > 0 else -1
            i = 0
            while residual != 0:
                pid = remainders[i % len(remainders)][0]
                rounded[pid] += step
                residual -= step
                i += 1

        return rounded

    def compute_deltas(
        self,
        sorted_by_points: Sequence[Tuple[str, float]],
        pre_match_ratings: Mapping[str, float],
        placement_flags: Mapping[str, bool],
    ) -> Dict[str, int]:
        """
        Calculate the final integer delta for every participant.

        Args:
            sorted_by_points: (id, points) pairs sorted by descending points.
            pre_match_ratings: Rating of each participant before the match.
            placement_flags: Whether each participant is in placement.

        Returns:
            {participant id: delta}. Sums to 0 unless someone is in placement.
        """
        scaled = self.scaled_deltas(sorted_by_points, pre_match_ratings, placement_flags)

        if any(placement_flags.get(pid, False) for pid in scaled):
            return {pid: round_half_up(value) for pid, value in scaled.items()}
        return self.normalize_zero_sum(scaled)

    def apply_delta(self, rating: int, delta: int) -> int:
        """New stored rating, clamped at the floor."""
        return max(self.floor_rating, rating + delta)

    def settle(
        self,
        sorted_by_points: Sequence[Tuple[str, float]],
        pre_match_ratings: Mapping[str, float],
        stored_ratings: Mapping[str, int],
        games_played: Mapping[str, int],
    ) -> List[EloDeltaResult]:
        """
        Compute deltas and the resulting stored ratings.

        Args:
            sorted_by_points: (id, points) pairs sorted by descending points.
            pre_match_ratings: Ratings used for lobby dampening.
            stored_ratings: Current stored ratings the deltas apply to.
            games_played: Ranked games played before this match.

        Returns:
            One EloDeltaResult per participant, in standings order.
        """
        flags = {pid: self.is_placement(games_played.get(pid, 0)) for pid, _ in sorted_by_points}
        deltas = self.compute_deltas(sorted_by_points, pre_match_ratings, flags)

        results = []
        for pid, _ in sorted_by_points:
            old = stored_ratings[pid]
            results.append(EloDeltaResult(
                player_id=pid,
                old_rating=old,
                new_rating=self.apply_delta(old, deltas[pid]),
                delta=deltas[pid],
                placement_phase=flags[pid],
            ))
        return results
