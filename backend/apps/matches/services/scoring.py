"""
Round scoring.

An imposter win is worth 2 points to the imposter; a crew win is worth
1 point to each crew member. Aborted rounds score nothing for anyone.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .reports import WINNER_IMPOSTER, MatchReport, RoundOutcome

POINTS_IMPOSTER_WIN = 2
POINTS_CREW_WIN = 1


@dataclass
class ScoredMatch:
    """
    Per-participant totals for a match, whichever way they were reported.

    ``round_points`` holds one {participant: points} dict per reported
    round (empty dict for aborted rounds); it is empty for reports that
    only carried totals.
    """
    points: Dict[str, int]
    round_points: List[Dict[str, int]] = field(default_factory=list)

    def standings(self) -> List[tuple]:
        """(id, points) pairs in participant order."""
        return list(self.points.items())


def round_points(round_outcome: RoundOutcome, participant_ids: Sequence[str]) -> Dict[str, int]:
    """
    Points each participant earns from a single round.

    Raises:
        ValueError: If the imposter is not one of the participants.
    """
    if round_outcome.aborted:
        return {}

    imposter = round_outcome.imposter_id
    if imposter not in participant_ids:
        raise ValueError(f"round imposter not in match:{imposter}")

    if round_outcome.winner == WINNER_IMPOSTER:
        return {pid: (POINTS_IMPOSTER_WIN if pid == imposter else 0) for pid in participant_ids}
    return {pid: (0 if pid == imposter else POINTS_CREW_WIN) for pid in participant_ids}


def score_rounds(rounds: Sequence[RoundOutcome], participant_ids: Sequence[str]) -> Dict[str, int]:
    """Accumulate round points into match totals; every participant starts at 0."""
    totals = {pid: 0 for pid in participant_ids}
    for round_outcome in rounds:
        for pid, points in round_points(round_outcome, participant_ids).items():
            totals[pid] += points
    return totals


def totals_from_report(report: MatchReport) -> ScoredMatch:
    """
    Normalise either report shape into a ScoredMatch.

    Round-based reports are scored; totals-based reports use the supplied
    ``total_points`` (missing totals count as 0).
    """
    ids = report.participant_ids

    if report.is_round_based:
        per_round = [round_points(r, ids) for r in report.rounds]
        totals = {pid: 0 for pid in ids}
        for points in per_round:
            for pid, value in points.items():
                totals[pid] += value
        return ScoredMatch(points=totals, round_points=per_round)

    return ScoredMatch(
        points={p.discord_id: int(p.total_points or 0) for p in report.participants}
    )


def role_wins(rounds: Sequence[RoundOutcome], participant_ids: Sequence[str]) -> Dict[str, Dict[str, int]]:
    """
    Count round wins by role for each participant.

    Returns:
        {participant: {'imposter': n, 'crew': m}}; aborted rounds are skipped.
    """
    wins = {pid: {'imposter': 0, 'crew': 0} for pid in participant_ids}
    for round_outcome in rounds:
        if round_outcome.aborted:
            continue
        imposter = round_outcome.imposter_id
        if round_outcome.winner == WINNER_IMPOSTER:
            if imposter in wins:
                wins[imposter]['imposter'] += 1
        else:
            for pid in participant_ids:
                if pid != imposter:
                    wins[pid]['crew'] += 1
    return wins
