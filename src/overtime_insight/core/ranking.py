"""Per-author 996 index ranking."""

from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..logging_config import get_logger
from ..samples.aggregation import aggregate_samples, collect_contributors
from ..samples.models import CommitTimeSample
from .models import AuthorRankingResult, AuthorStats
from .parser import index_for, parse_sample_set

logger = get_logger(__name__)

MIN_AUTHOR_COMMITS = 5


def _in_range(sample: CommitTimeSample, since: Optional[str], until: Optional[str]) -> bool:
    if since and sample.date < since:
        return False
    if until and sample.date > until:
        return False
    return True


def _is_excluded(name: str, email: str, exclude: set[str]) -> bool:
    return name.lower() in exclude or email.lower() in exclude


def rank_authors(
    samples: Sequence[CommitTimeSample],
    since: Optional[str] = None,
    until: Optional[str] = None,
    min_commits: int = MIN_AUTHOR_COMMITS,
    exclude_authors: Sequence[str] = (),
    custom_work_hours: Optional[str] = None,
) -> AuthorRankingResult:
    """
    Rank authors by their own 996 index.

    Each author's samples are aggregated and parsed on their own, so the
    working window is detected per author unless ``custom_work_hours`` is
    given. Authors below ``min_commits`` inside the range are left out.

    Args:
        samples: Samples carrying author identities
        since: Inclusive range start
        until: Inclusive range end
        min_commits: Commits an author needs to be ranked
        exclude_authors: Names or emails to leave out (case-insensitive)
        custom_work_hours: Manual "start-end" window applied to every author

    Returns:
        AuthorRankingResult sorted by index996 descending; ties keep the
        commit-count order

    Raises:
        InvalidWorkHoursError: If custom_work_hours is malformed
    """
    in_range = [s for s in samples if _in_range(s, since, until)]
    exclude = {a.strip().lower() for a in exclude_authors if a.strip()}

    by_author: dict[str, list[CommitTimeSample]] = defaultdict(list)
    for sample in in_range:
        if sample.author_key:
            by_author[sample.author_key].append(sample)

    authors: list[AuthorStats] = []
    for contributor in collect_contributors(in_range):
        if contributor.commits < min_commits:
            continue
        if _is_excluded(contributor.name, contributor.email, exclude):
            continue

        parsed = parse_sample_set(
            aggregate_samples(by_author[contributor.email]),
            custom_work_hours=custom_work_hours,
            since=since,
            until=until,
        )
        result = index_for(parsed)
        authors.append(
            AuthorStats(
                name=contributor.name,
                email=contributor.email,
                total_commits=contributor.commits,
                index996=result.index996,
                index996_str=result.index996_str,
                overtime_ratio=result.overtime_ratio,
                working_hour_commits=parsed.split.work,
                overtime_commits=parsed.split.overtime,
                weekday_commits=parsed.split.weekday,
                weekend_commits=parsed.split.weekend,
            )
        )

    authors.sort(key=lambda a: a.index996, reverse=True)
    logger.debug(f"Ranked {len(authors)} author(s) with >= {min_commits} commits")
    return AuthorRankingResult(authors=authors, total_authors=len(authors), since=since, until=until)
