"""
Match settlement.

Takes one MatchReport from the bot and turns it into persisted rows:
- Validation and the ranked-qualification gate
- Round scoring and tie-aware placements
- Elo deltas (ranked only)
- Violation aborts and suspension escalation

Everything happens inside one transaction with the participants' player
rows locked, so a failure leaves nothing behind and two settlements
sharing a player run one after the other.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.players.models import Player
from ..exceptions import SettlementRejected
from ..models import Category, Match, MatchResult, MatchRound, RoundPlayerPoints
from .elo import EloDeltaEngine
from .notifications import broadcast_match_settled
from .placements import resolve_placements
from .reports import MODE_RANKED, MatchReport, normalize_mode
from .scoring import ScoredMatch, role_wins, totals_from_report
from .violations import ViolationOutcome, ViolationTracker, abort_deltas

logger = logging.getLogger(__name__)

EXPECTED_PLAYERS = 4


@dataclass
class ParticipantResult:
    """Settled outcome for one participant."""
    discord_id: str
    total_points: int
    placement: Optional[float]
    elo_delta: int
    elo_before: Optional[int] = None
    elo_after: Optional[int] = None
    placement_phase: bool = False


@dataclass
class SettlementOutcome:
    """Everything the caller learns about a settled match."""
    match_id: int
    mode: str
    aborted_reason: Optional[str]
    any_placement: bool
    rounds_saved: bool
    results: List[ParticipantResult] = field(default_factory=list)
    violation: Optional[dict] = None
    duplicate: bool = False

    @property
    def aborted(self) -> bool:
        return bool(self.aborted_reason)

    @classmethod
    def from_match(cls, match: Match, duplicate: bool = False) -> 'SettlementOutcome':
        """Rebuild the outcome of an already settled match from its rows."""
        results = [
            ParticipantResult(
                discord_id=r.player_id,
                total_points=r.total_points,
                placement=r.placement,
                elo_delta=r.elo_delta,
                elo_before=r.elo_before,
                elo_after=r.elo_after,
                placement_phase=r.placement_phase,
            )
            for r in match.results.order_by('pk')
        ]
        violation = match.violations.first() if match.is_violation_abort else None
        return cls(
            match_id=match.pk,
            mode=match.mode,
            aborted_reason=match.aborted_reason,
            any_placement=match.any_placement,
            rounds_saved=match.rounds.exists(),
            results=results,
            violation=ViolationOutcome.from_violation(violation).as_dict() if violation else None,
            duplicate=duplicate,
        )

    def as_response(self) -> dict:
        rules = settings.SETTLEMENT
        return {
            'ok': True,
            'match_id': self.match_id,
            'mode': self.mode,
            'aborted': self.aborted,
            'aborted_reason': self.aborted_reason,
            'any_placement': self.any_placement,
            'placement_multiplier': rules['PLACEMENT_MULTIPLIER'],
            'elo_floor': rules['ELO_FLOOR'],
            'rounds_saved': self.rounds_saved,
            'results': [asdict(r) for r in self.results],
            'violation': self.violation,
            'duplicate': self.duplicate,
        }


class MatchSettlement:
    """
    Settle reported matches.

    Example:
        outcome = MatchSettlement().settle(report)
        outcome.as_response()
    """

    def __init__(
        self,
        elo_engine: Optional[EloDeltaEngine] = None,
        violation_tracker: Optional[ViolationTracker] = None,
    ):
        self.rules = settings.SETTLEMENT
        self.elo = elo_engine or EloDeltaEngine.from_settings()
        self.violations = violation_tracker or ViolationTracker()

    def settle(self, report: MatchReport) -> SettlementOutcome:
        """
        Settle a match report exactly once.

        Raises:
            SettlementRejected: If the report is invalid or a ranked
                participant is not qualified. Nothing is persisted.
        """
        try:
            mode = self.validate(report)
        except SettlementRejected as e:
            logger.warning(f"Rejected match report from guild {report.guild_id}: {e.code}")
            raise

        key = report.dedupe_key()
        existing = Match.objects.filter(idempotency_key=key).first()
        if existing is not None:
            logger.info(f"Duplicate match report {key}; returning match {existing.pk}")
            return SettlementOutcome.from_match(existing, duplicate=True)

        try:
            with transaction.atomic():
                outcome = self._settle_locked(report, mode, key)
                payload = outcome.as_response()
                transaction.on_commit(lambda: broadcast_match_settled(payload))
        except SettlementRejected as e:
            logger.warning(f"Rejected match report from guild {report.guild_id}: {e.code}")
            raise
        except IntegrityError:
            # Lost a race against a concurrent replay of the same report
            existing = Match.objects.filter(idempotency_key=key).first()
            if existing is None:
                raise
            logger.info(f"Concurrent duplicate of match report {key}; returning match {existing.pk}")
            return SettlementOutcome.from_match(existing, duplicate=True)

        logger.info(
            f"Settled {mode} match {outcome.match_id} in guild {report.guild_id}"
            f"{' (aborted: ' + outcome.aborted_reason + ')' if outcome.aborted else ''}"
        )
        return outcome

    def validate(self, report: MatchReport) -> str:
        """Check the report shape; returns the normalised mode."""
        ids = report.participant_ids

        if len(ids) != EXPECTED_PLAYERS:
            raise SettlementRejected('expected 4 players', got=len(ids))
        if len(set(ids)) != len(ids):
            raise SettlementRejected('duplicate players')

        mode = normalize_mode(report.mode)
        if mode is None:
            raise SettlementRejected(f"unknown mode:{report.mode}")

        if report.violation is not None and report.violation.discord_id not in ids:
            raise SettlementRejected(f"violation player not in match:{report.violation.discord_id}")

        for round_outcome in report.rounds:
            if round_outcome.imposter_id not in ids:
                raise SettlementRejected(f"round imposter not in match:{round_outcome.imposter_id}")

        return mode

    def check_ranked_gate(self, report: MatchReport, players: Dict[str, Player]) -> None:
        """Every ranked participant needs enough casual matches behind them."""
        required = self.rules['CASUAL_REQUIRED_FOR_RANKED']
        for pid in report.participant_ids:
            current = players[pid].games_casual
            if current < required:
                raise SettlementRejected(
                    f"player_not_qualified_for_ranked:{pid}",
                    required_casual=required,
                    current_casual=current,
                )

    def _lock_players(self, report: MatchReport) -> Dict[str, Player]:
        """Create missing player rows, then lock all four in primary-key order."""
        default_rating = self.rules['DEFAULT_RATING']
        for entry in report.participants:
            Player.objects.get_or_create(
                discord_id=entry.discord_id,
                defaults={'display_name': entry.display_name, 'elo_ranked': default_rating},
            )

        locked = Player.objects.select_for_update().filter(
            discord_id__in=report.participant_ids
        ).order_by('discord_id')
        return {p.discord_id: p for p in locked}

    def _settle_locked(self, report: MatchReport, mode: str, key: str) -> SettlementOutcome:
        players = self._lock_players(report)

        if mode == MODE_RANKED:
            self.check_ranked_gate(report, players)

        if report.violation is not None:
            aborted_reason = f"violation:{report.violation.violation_type}"
        else:
            aborted_reason = report.abort_reason or None

        now = timezone.now()
        match = Match.objects.create(
            guild_id=report.guild_id,
            mode=mode,
            started_at=report.started_at or now,
            ended_at=report.ended_at or now,
            aborted_reason=aborted_reason,
            idempotency_key=key,
        )

        rounds = self._store_rounds(match, report)

        if report.violation is not None:
            outcome = self._settle_violation(match, report, players)
        else:
            outcome = self._settle_normal(match, report, players, rounds)

        for entry in report.participants:
            player = players[entry.discord_id]
            if entry.display_name:
                player.display_name = entry.display_name
            player.last_match_at = match.ended_at
            player.save()

        return outcome

    def _store_rounds(self, match: Match, report: MatchReport) -> List[MatchRound]:
        stored = []
        for round_outcome in report.rounds:
            category = Category.get_or_create_for(
                round_outcome.category_slug, round_outcome.category_name
            )
            stored.append(MatchRound.objects.create(
                match=match,
                round_no=round_outcome.round_no,
                category=category,
                word=round_outcome.word,
                imposter_id=round_outcome.imposter_id,
                winner=round_outcome.winner,
                win_method=round_outcome.win_method,
                aborted=round_outcome.aborted,
                aborted_reason=round_outcome.aborted_reason,
            ))
        return stored

    def _settle_normal(
        self,
        match: Match,
        report: MatchReport,
        players: Dict[str, Player],
        rounds: List[MatchRound],
    ) -> SettlementOutcome:
        scored = totals_from_report(report)
        self._store_round_points(rounds, scored)

        placements = resolve_placements(scored.standings())
        standings = [(p.participant_id, p.score) for p in placements]
        ranked = match.mode == MODE_RANKED

        if ranked:
            pre_match = {
                entry.discord_id: (
                    entry.elo_before if entry.elo_before is not None
                    else players[entry.discord_id].elo_ranked
                )
                for entry in report.participants
            }
            elo_results = {
                r.player_id: r
                for r in self.elo.settle(
                    standings,
                    pre_match_ratings=pre_match,
                    stored_ratings={pid: p.elo_ranked for pid, p in players.items()},
                    games_played={pid: p.games_ranked for pid, p in players.items()},
                )
            }

        wins = role_wins(report.rounds, report.participant_ids)
        results = []
        for placement in placements:
            pid = placement.participant_id
            player = players[pid]

            if ranked:
                elo = elo_results[pid]
                result = ParticipantResult(
                    discord_id=pid,
                    total_points=int(placement.score),
                    placement=placement.placement,
                    elo_delta=elo.delta,
                    elo_before=elo.old_rating,
                    elo_after=elo.new_rating,
                    placement_phase=elo.placement_phase,
                )
                player.elo_ranked = elo.new_rating
                player.games_ranked += 1
                player.wins_imposter_ranked += wins[pid]['imposter']
                player.wins_crew_ranked += wins[pid]['crew']
            else:
                result = ParticipantResult(
                    discord_id=pid,
                    total_points=int(placement.score),
                    placement=placement.placement,
                    elo_delta=0,
                )
                player.games_casual += 1
                player.wins_imposter_casual += wins[pid]['imposter']
                player.wins_crew_casual += wins[pid]['crew']
            results.append(result)

        self._store_results(match, results)

        match.any_placement = any(r.placement_phase for r in results)
        match.save(update_fields=['any_placement'])

        return SettlementOutcome(
            match_id=match.pk,
            mode=match.mode,
            aborted_reason=match.aborted_reason,
            any_placement=match.any_placement,
            rounds_saved=bool(rounds),
            results=results,
        )

    def _settle_violation(
        self,
        match: Match,
        report: MatchReport,
        players: Dict[str, Player],
    ) -> SettlementOutcome:
        """Abort path: record the violation, penalise a ranked offender, count nothing else."""
        violation = report.violation
        offender = players[violation.discord_id]
        recorded = self.violations.record(
            report.guild_id, offender, violation.violation_type, match
        )

        ranked = match.mode == MODE_RANKED
        deltas = abort_deltas(
            report.participant_ids,
            offender.discord_id,
            ranked=ranked,
            penalty=self.rules['VIOLATION_PENALTY'],
        )

        results = []
        for pid in report.participant_ids:
            player = players[pid]
            if ranked:
                before = player.elo_ranked
                after = self.elo.apply_delta(before, deltas[pid])
                player.elo_ranked = after
                results.append(ParticipantResult(
                    discord_id=pid,
                    total_points=0,
                    placement=None,
                    elo_delta=deltas[pid],
                    elo_before=before,
                    elo_after=after,
                ))
            else:
                results.append(ParticipantResult(
                    discord_id=pid,
                    total_points=0,
                    placement=None,
                    elo_delta=0,
                ))

        self._store_results(match, results)

        return SettlementOutcome(
            match_id=match.pk,
            mode=match.mode,
            aborted_reason=match.aborted_reason,
            any_placement=False,
            rounds_saved=report.is_round_based,
            results=results,
            violation=recorded.as_dict(),
        )

    def _store_round_points(self, rounds: List[MatchRound], scored: ScoredMatch) -> None:
        rows = [
            RoundPlayerPoints(round=stored_round, player_id=pid, points=points)
            for stored_round, per_round in zip(rounds, scored.round_points)
            for pid, points in per_round.items()
        ]
        if rows:
            RoundPlayerPoints.objects.bulk_create(rows)

    def _store_results(self, match: Match, results: List[ParticipantResult]) -> None:
        MatchResult.objects.bulk_create([
            MatchResult(
                match=match,
                player_id=r.discord_id,
                total_points=r.total_points,
                placement=r.placement,
                elo_before=r.elo_before,
                elo_after=r.elo_after,
                elo_delta=r.elo_delta,
                placement_phase=r.placement_phase,
            )
            for r in results
        ])
