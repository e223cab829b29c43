"""
timeline.py

Mutually exclusive, priority-ordered temporal buckets for active tasks.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import Field

from .config import config
from .date_utils import end_of_week, parse_iso_date, was_modified_within
from .filters import is_blocked
from .schema import ResultModel, Task

OVERDUE = "overdue"
DUE_TODAY = "due_today"
SCHEDULED_TODAY = "scheduled_today"
NEWLY_ACTIONABLE = "newly_actionable"
BLOCKED = "blocked"
SCHEDULED_THIS_WEEK = "scheduled_this_week"
RECENTLY_MODIFIED = "recently_modified"

# (bucket, predicate(task, today, week_end)) tested in order; first match wins.
_DATED_BUCKETS: List[Tuple[str, Callable[[Task, str, str], bool]]] = [
    (OVERDUE, lambda t, today, _: bool(t.due) and t.due < today),
    (DUE_TODAY, lambda t, today, _: t.due == today),
    (SCHEDULED_TODAY, lambda t, today, _: t.scheduled == today),
    (NEWLY_ACTIONABLE, lambda t, today, _: t.defer_until == today),
    (BLOCKED, lambda t, today, _: is_blocked(t)),
    (SCHEDULED_THIS_WEEK, lambda t, today, week_end: bool(t.scheduled) and today < t.scheduled <= week_end),
]

BUCKET_ORDER = [name for name, _ in _DATED_BUCKETS] + [RECENTLY_MODIFIED]


class Timeline(ResultModel):
    overdue: List[Task] = Field(default_factory=list)
    due_today: List[Task] = Field(default_factory=list)
    scheduled_today: List[Task] = Field(default_factory=list)
    newly_actionable: List[Task] = Field(default_factory=list)
    blocked: List[Task] = Field(default_factory=list)
    scheduled_this_week: Dict[str, List[Task]] = Field(default_factory=dict)
    recently_modified: List[Task] = Field(default_factory=list)

    def bucket_tasks(self, bucket: str) -> List[Task]:
        if bucket == SCHEDULED_THIS_WEEK:
            return [t for day in self.scheduled_this_week.values() for t in day]
        return list(getattr(self, bucket))

    def bucket_of(self, path: str) -> Optional[str]:
        for bucket in BUCKET_ORDER:
            if any(t.path == path for t in self.bucket_tasks(bucket)):
                return bucket
        return None

    def all_paths(self) -> List[str]:
        """Paths across every bucket; duplicates would mean a task sits in two."""
        return [t.path for bucket in BUCKET_ORDER for t in self.bucket_tasks(bucket)]

    @property
    def scheduled_this_week_count(self) -> int:
        return sum(len(v) for v in self.scheduled_this_week.values())


def classify_task(task: Task, today: str, week_end: Optional[str] = None) -> Optional[str]:
    """
    First dated bucket (1-6) a task falls into, or None.

    recently_modified is decided over the whole candidate set, see build_timeline.
    """
    week_end = week_end or end_of_week(today)
    for bucket, matches in _DATED_BUCKETS:
        if matches(task, today, week_end):
            return bucket
    return None


def build_timeline(
    tasks: List[Task],
    today: str,
    now: Optional[datetime] = None,
    recent_hours: Optional[int] = None,
    recent_limit: Optional[int] = None
) -> Timeline:
    """
    Classify active tasks into timeline buckets.

    Args:
        tasks: Active tasks, in display order.
        today: YYYY-MM-DD reference day.
        now: End of the "recently modified" window; defaults to the end of `today`.
        recent_hours: Window length, default from config (24).
        recent_limit: Candidate ceiling above which recently_modified is dropped
            entirely, default from config (20).

    Returns:
        A Timeline where each task appears in at most one bucket.
    """
    parse_iso_date(today)
    hours = recent_hours if recent_hours is not None else config['recent_window_hours']
    limit = recent_limit if recent_limit is not None else config['recent_limit']
    week_end = end_of_week(today)

    buckets: Dict[str, List[Task]] = {name: [] for name, _ in _DATED_BUCKETS}
    week: Dict[str, List[Task]] = {}
    recent_candidates: List[Task] = []

    for task in tasks:
        bucket = classify_task(task, today, week_end)
        if bucket == SCHEDULED_THIS_WEEK:
            week.setdefault(task.scheduled, []).append(task)
        elif bucket is not None:
            buckets[bucket].append(task)
        elif was_modified_within(task.updated_at, today, hours=hours, now=now):
            recent_candidates.append(task)

    # over the ceiling the bucket is emptied, not truncated
    recently_modified = recent_candidates if len(recent_candidates) <= limit else []

    return Timeline(
        overdue=buckets[OVERDUE],
        due_today=buckets[DUE_TODAY],
        scheduled_today=buckets[SCHEDULED_TODAY],
        newly_actionable=buckets[NEWLY_ACTIONABLE],
        blocked=buckets[BLOCKED],
        scheduled_this_week={day: week[day] for day in sorted(week)},
        recently_modified=recently_modified,
    )
