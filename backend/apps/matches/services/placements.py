"""
Tie-aware placement computation.

Participants are ranked by descending score. A run of equal scores
shares the mean of the rank positions it covers, so two players tied
for 2nd/3rd both finish 2.5.
"""
from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator, List, Sequence, Tuple


@dataclass(frozen=True)
class Placement:
    """Final position of a participant in a match."""
    participant_id: Hashable
    score: float
    placement: float


def sort_by_score(entries: Iterable[Tuple[Hashable, float]]) -> List[Tuple[Hashable, float]]:
    """Sort (id, score) pairs by descending score, keeping input order among ties."""
    return sorted(entries, key=lambda entry: entry[1], reverse=True)


def tie_groups(sorted_entries: Sequence[Tuple[Hashable, float]]) -> Iterator[Tuple[int, int]]:
    """
    Yield inclusive (start, end) index ranges of equal scores.

    Args:
        sorted_entries: (id, score) pairs already sorted by descending score.
    """
    i = 0
    while i < len(sorted_entries):
        score = sorted_entries[i][1]
        j = i
        while j + 1 < len(sorted_entries) and sorted_entries[j + 1][1] == score:
            j += 1
        yield i, j
        i = j + 1


def resolve_placements(entries: Iterable[Tuple[Hashable, float]]) -> List[Placement]:
    """
    Assign placements, averaging rank positions across ties.

    Args:
        entries: (participant id, score) pairs in any order.

    Returns:
        Placements ordered best first.

    Example:
        >>> [p.placement for p in resolve_placements([('a', 5), ('b', 3), ('c', 3), ('d', 2)])]
        [1.0, 2.5, 2.5, 4.0]
    """
    ordered = sort_by_score(entries)
    placements = []

    for start, end in tie_groups(ordered):
        # Ranks are 1-based: the run covers ranks start+1 .. end+1
        mean_rank = (start + end) / 2 + 1
        for k in range(start, end + 1):
            participant_id, score = ordered[k]
            placements.append(Placement(participant_id, score, mean_rank))

    return placements
