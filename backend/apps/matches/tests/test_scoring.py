"""
Tests for round scoring.

Tests round_points, score_rounds, totals_from_report and role_wins.
"""
import pytest

from apps.matches.services.reports import MatchReport, ParticipantEntry, RoundOutcome
from apps.matches.services.scoring import (
    role_wins,
    round_points,
    score_rounds,
    totals_from_report,
)

IDS = ['a', 'b', 'c', 'd']


def make_round(no, imposter, winner, aborted=False):
    return RoundOutcome(round_no=no, imposter_id=imposter, winner=winner, aborted=aborted)


class TestRoundPoints:
    """Tests for single-round scoring."""

    def test_imposter_win(self):
        """Test the imposter takes 2 points and the crew nothing."""
        assert round_points(make_round(1, 'a', 'imposter'), IDS) == {'a': 2, 'b': 0, 'c': 0, 'd': 0}

    def test_crew_win(self):
        """Test every crew member takes 1 point."""
        assert round_points(make_round(1, 'a', 'crew'), IDS) == {'a': 0, 'b': 1, 'c': 1, 'd': 1}

    def test_aborted_round_scores_nothing(self):
        """Test an aborted round contributes no points."""
        assert round_points(make_round(1, 'a', 'imposter', aborted=True), IDS) == {}

    def test_unknown_imposter(self):
        """Test a round whose imposter is not in the match is rejected."""
        with pytest.raises(ValueError, match='round imposter not in match:z'):
            round_points(make_round(1, 'z', 'crew'), IDS)


class TestScoreRounds:
    """Tests for match totals."""

    def test_totals_across_rounds(self):
        """Test points accumulate and aborted rounds are skipped."""
        rounds = [
            make_round(1, 'a', 'imposter'),
            make_round(2, 'b', 'crew'),
            make_round(3, 'c', 'imposter', aborted=True),
        ]
        assert score_rounds(rounds, IDS) == {'a': 3, 'b': 0, 'c': 1, 'd': 1}

    def test_no_rounds(self):
        """Test everyone starts at zero."""
        assert score_rounds([], IDS) == {'a': 0, 'b': 0, 'c': 0, 'd': 0}


class TestTotalsFromReport:
    """Tests for normalising both report shapes."""

    def test_round_based_report(self):
        """Test round-based reports are scored round by round."""
        report = MatchReport(
            guild_id='g',
            mode='casual',
            participants=tuple(ParticipantEntry(pid) for pid in IDS),
            rounds=(make_round(1, 'd', 'imposter'), make_round(2, 'a', 'crew')),
        )
        scored = totals_from_report(report)
        assert scored.points == {'a': 0, 'b': 1, 'c': 1, 'd': 3}
        assert len(scored.round_points) == 2

    def test_totals_based_report(self):
        """Test supplied totals are used as-is, missing ones count as 0."""
        report = MatchReport(
            guild_id='g',
            mode='casual',
            participants=(
                ParticipantEntry('a', total_points=4),
                ParticipantEntry('b', total_points=2),
                ParticipantEntry('c', total_points=None),
                ParticipantEntry('d', total_points=1),
            ),
        )
        scored = totals_from_report(report)
        assert scored.points == {'a': 4, 'b': 2, 'c': 0, 'd': 1}
        assert scored.round_points == []


class TestRoleWins:
    """Tests for role win counting."""

    def test_counts_by_role(self):
        """Test imposter and crew wins are credited to the right players."""
        rounds = [
            make_round(1, 'a', 'imposter'),
            make_round(2, 'a', 'crew'),
            make_round(3, 'b', 'imposter', aborted=True),
        ]
        wins = role_wins(rounds, IDS)
        assert wins['a'] == {'imposter': 1, 'crew': 0}
        assert wins['b'] == {'imposter': 0, 'crew': 1}
        assert wins['d'] == {'imposter': 0, 'crew': 1}
