"""Vote statistics per poll."""
import math
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from globalpoll.db.models import Vote


@dataclass(frozen=True)
class PollStatistics:
    total_votes: int
    yes_votes: int
    no_votes: int
    yes_percentage: int
    no_percentage: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _percentage(part: int, total: int) -> int:
    # Half rounds up (50.5 -> 51), matching what the UI shows
    return int(math.floor(part / total * 100 + 0.5))


def stats_from_counts(yes_votes: int, no_votes: int) -> PollStatistics:
    """
    Build statistics from raw yes/no counts.

    Percentages are rounded independently and may not sum to 100.
    """
    total = yes_votes + no_votes
    if total == 0:
        return PollStatistics(0, 0, 0, 0, 0)
    return PollStatistics(
        total_votes=total,
        yes_votes=yes_votes,
        no_votes=no_votes,
        yes_percentage=_percentage(yes_votes, total),
        no_percentage=_percentage(no_votes, total),
    )


EMPTY_STATISTICS = stats_from_counts(0, 0)


def compute_stats_bulk(db: Session, poll_ids: Optional[Iterable[int]] = None) -> Dict[int, PollStatistics]:
    """
    Get statistics for many polls with one grouped query.

    Args:
        db: Database session
        poll_ids: Polls to include. None means every poll that has votes.

    Returns:
        Dict mapping poll_id -> PollStatistics. Requested polls without
        votes map to zero statistics.
    """
    query = db.query(
        Vote.poll_id,
        Vote.answer,
        func.count(Vote.id)
    ).group_by(Vote.poll_id, Vote.answer)

    requested = None
    if poll_ids is not None:
        requested = list(poll_ids)
        if not requested:
            return {}
        query = query.filter(Vote.poll_id.in_(requested))

    counts: Dict[int, Dict[bool, int]] = {}
    for poll_id, answer, count in query.all():
        counts.setdefault(poll_id, {True: 0, False: 0})[bool(answer)] = count

    result = {
        poll_id: stats_from_counts(by_answer[True], by_answer[False])
        for poll_id, by_answer in counts.items()
    }
    for poll_id in requested or ():
        result.setdefault(poll_id, EMPTY_STATISTICS)
    return result


def compute_stats(db: Session, poll_id: int) -> PollStatistics:
    """Get statistics for a single poll."""
    return compute_stats_bulk(db, [poll_id])[poll_id]
