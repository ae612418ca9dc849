"""
Match report value objects.

The bot has reported matches in two shapes over time: round by round,
or with precomputed per-player totals. Both arrive as a MatchReport;
``MatchReport.is_round_based`` tells them apart and the round scorer
normalises either into a ScoredMatch.
"""
import hashlib
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional, Tuple

MODE_RANKED = 'ranked'
MODE_CASUAL = 'casual'

# Legacy spellings the bot still sends
MODE_ALIASES = {
    'ranked': MODE_RANKED,
    'casual': MODE_CASUAL,
    'zwanglos': MODE_CASUAL,
}

WINNER_IMPOSTER = 'imposter'
WINNER_CREW = 'crew'

WINNER_ALIASES = {
    'imposter': WINNER_IMPOSTER,
    'crew': WINNER_CREW,
    'unschuldig': WINNER_CREW,
    'innocent': WINNER_CREW,
}

WIN_METHOD_ALIASES = {
    'guessed_word': 'guessed_word',
    'imposter_correct_guess': 'guessed_word',
    'wrong_guess': 'wrong_guess',
    'imposter_wrong_guess': 'wrong_guess',
    'all_imposters_guessed_wrong': 'wrong_guess',
    'voted_out_innocent': 'voted_out_innocent',
    'voted_out_wrong': 'voted_out_innocent',
    'voted_out_imposter': 'voted_out_imposter',
    'voted_out_imposter_no_guess': 'voted_out_imposter',
    'timeout': 'timeout',
}


def normalize_mode(raw: str | None) -> Optional[str]:
    """Map a reported mode onto ranked/casual, or None when unknown."""
    return MODE_ALIASES.get(str(raw or '').strip().lower())


def normalize_winner(raw: str | None) -> Optional[str]:
    return WINNER_ALIASES.get(str(raw or '').strip().lower())


def map_win_method(raw: str | None) -> str:
    """Collapse the bot's win-method spellings onto the stored choices."""
    return WIN_METHOD_ALIASES.get(str(raw or '').strip().lower(), 'other')


@dataclass(frozen=True)
class ParticipantEntry:
    """One of the four players named in a report."""
    discord_id: str
    display_name: Optional[str] = None
    elo_before: Optional[int] = None
    total_points: Optional[int] = None


@dataclass(frozen=True)
class RoundOutcome:
    """One reported round. ``winner`` is already normalised."""
    round_no: int
    imposter_id: str
    winner: str
    win_method: str = 'other'
    aborted: bool = False
    aborted_reason: Optional[str] = None
    category_slug: Optional[str] = None
    category_name: Optional[str] = None
    word: Optional[str] = None


@dataclass(frozen=True)
class ViolationReport:
    """A rule violation that aborts the match."""
    violation_type: str
    discord_id: str
    round_no: Optional[int] = None


@dataclass(frozen=True)
class MatchReport:
    """A completed (or aborted) match as reported by the bot."""
    guild_id: str
    mode: str
    participants: Tuple[ParticipantEntry, ...]
    rounds: Tuple[RoundOutcome, ...] = field(default_factory=tuple)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    abort_reason: Optional[str] = None
    violation: Optional[ViolationReport] = None
    idempotency_key: Optional[str] = None

    @property
    def participant_ids(self) -> list:
        return [p.discord_id for p in self.participants]

    @property
    def is_round_based(self) -> bool:
        return len(self.rounds) > 0

    def fingerprint(self) -> str:
        """Deterministic hash of the report content, used when no key is supplied."""
        payload = asdict(self)
        payload.pop('idempotency_key', None)
        canonical = json.dumps(payload, sort_keys=True, default=str, separators=(',', ':'))
        return hashlib.sha256(canonical.encode('utf-8')).hexdigest()

    def dedupe_key(self) -> str:
        return self.idempotency_key or f"sha256:{self.fingerprint()}"
