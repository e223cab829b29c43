"""
stats.py

Summary counts for projection results. Every number here is read off the
graph partition or the timeline so that all output modes agree.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .filters import is_blocked, is_in_progress
from .graph import GraphPartition
from .schema import Project, ProjectStatus, ResultModel, Task, TaskStatus
from .timeline import Timeline

PROJECT_STATUS_GROUPS = [
    ProjectStatus.IN_PROGRESS.value,
    ProjectStatus.READY.value,
    ProjectStatus.PLANNING.value,
    ProjectStatus.BLOCKED.value,
    ProjectStatus.PAUSED.value,
    ProjectStatus.DONE.value,
    "unset",
]

TASK_STATUS_GROUPS = [
    TaskStatus.IN_PROGRESS.value,
    TaskStatus.BLOCKED.value,
    TaskStatus.READY.value,
    TaskStatus.INBOX.value,
]


class ContextStats(ResultModel):
    area_count: int = 0
    project_count: int = 0
    task_count: int = 0
    overdue_count: int = 0
    due_today_count: int = 0
    in_progress_count: int = 0
    blocked_count: Optional[int] = None


@dataclass(frozen=True)
class TaskStatusCounts:
    in_progress: int = 0
    ready: int = 0
    inbox: int = 0
    blocked: int = 0

    @property
    def total(self) -> int:
        return self.in_progress + self.ready + self.inbox + self.blocked


def count_tasks_by_status(tasks: Iterable[Task]) -> TaskStatusCounts:
    """Counts for the four active statuses; done, dropped and icebox are ignored."""
    counts = {s: 0 for s in TASK_STATUS_GROUPS}
    for task in tasks:
        if task.status.value in counts:
            counts[task.status.value] += 1
    return TaskStatusCounts(
        in_progress=counts[TaskStatus.IN_PROGRESS.value],
        ready=counts[TaskStatus.READY.value],
        inbox=counts[TaskStatus.INBOX.value],
        blocked=counts[TaskStatus.BLOCKED.value],
    )


def format_task_count_shorthand(counts: TaskStatusCounts) -> str:
    """
    "(2 in-progress, 1 blocked)"; zero counts are left out, "" when all are zero.
    """
    parts = [
        f"{n} {label}"
        for n, label in (
            (counts.in_progress, "in-progress"),
            (counts.ready, "ready"),
            (counts.inbox, "inbox"),
            (counts.blocked, "blocked"),
        )
        if n > 0
    ]
    if not parts:
        return ""
    return "(" + ", ".join(parts) + ")"


def group_projects_by_status(projects: Iterable[Project]) -> Dict[str, List[Project]]:
    groups: Dict[str, List[Project]] = {key: [] for key in PROJECT_STATUS_GROUPS}
    for project in projects:
        key = project.status.value if project.status is not None else "unset"
        groups[key].append(project)
    return groups


def group_tasks_by_status(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    groups: Dict[str, List[Task]] = {key: [] for key in TASK_STATUS_GROUPS}
    for task in tasks:
        if task.status.value in groups:
            groups[task.status.value].append(task)
    return groups


def vault_stats(partition: GraphPartition, timeline: Timeline) -> ContextStats:
    tasks = partition.placed_tasks()
    return ContextStats(
        area_count=len(partition.area_projects),
        project_count=len(partition.project_tasks),
        task_count=partition.task_count,
        overdue_count=len(timeline.overdue),
        due_today_count=len(timeline.due_today),
        in_progress_count=sum(1 for t in tasks if is_in_progress(t)),
    )


def area_stats(projects: List[Project], tasks: List[Task], timeline: Timeline) -> ContextStats:
    """`tasks` is the area's direct tasks followed by its project tasks."""
    return ContextStats(
        area_count=1,
        project_count=len(projects),
        task_count=len(tasks),
        overdue_count=len(timeline.overdue),
        due_today_count=len(timeline.due_today),
        in_progress_count=sum(1 for t in tasks if is_in_progress(t)),
    )


def project_stats(tasks: List[Task], timeline: Timeline, has_area: bool = False) -> ContextStats:
    return ContextStats(
        area_count=1 if has_area else 0,
        project_count=1,
        task_count=len(tasks),
        overdue_count=len(timeline.overdue),
        due_today_count=len(timeline.due_today),
        in_progress_count=sum(1 for t in tasks if is_in_progress(t)),
        blocked_count=sum(1 for t in tasks if is_blocked(t)),
    )
