"""
filters.py

Default-visibility predicates. Every temporal check takes `today` explicitly.
"""

from typing import Iterable, List, NamedTuple, Optional
from pathlib import PurePosixPath

from .config import config
from .schema import Area, AreaStatus, Project, ProjectStatus, Task, TaskStatus

INACTIVE_TASK_STATUSES = {TaskStatus.DONE, TaskStatus.DROPPED, TaskStatus.ICEBOX}


class ActiveEntities(NamedTuple):
    tasks: List[Task]
    projects: List[Project]
    areas: List[Area]


def _segments(path: str) -> List[str]:
    return [p.lower() for p in PurePosixPath(path.replace("\\", "/").strip("/")).parts]


def is_archived_path(path: str, archive_dir: Optional[str] = None) -> bool:
    """
    True when the file sits under the tasks archive folder (`tasks/archive`).

    Only the innermost tasks folder on the path counts, so folders above the
    vault that happen to be named "archive" or "tasks" never hide a task.
    A single-segment `archive_dir` matches at the top of a vault-relative path.
    """
    subpath = _segments(archive_dir or config['archive_dir'])
    root, leaf = subpath[:-1], subpath[-1]
    parents = _segments(path)[:-1]

    if not root:
        return bool(parents) and parents[0] == leaf

    starts = [
        i for i in range(len(parents) - len(root) + 1)
        if parents[i:i + len(root)] == root
    ]
    if not starts:
        return False
    after = starts[-1] + len(root)
    return after < len(parents) and parents[after] == leaf


def is_active_task(task: Task, today: str, archive_dir: Optional[str] = None) -> bool:
    if task.status in INACTIVE_TASK_STATUSES:
        return False
    # still deferred
    if task.defer_until and task.defer_until > today:
        return False
    return not is_archived_path(task.path, archive_dir)


def is_active_project(project: Project) -> bool:
    return project.status is None or project.status != ProjectStatus.DONE


def is_active_area(area: Area) -> bool:
    return area.status is None or area.status == AreaStatus.ACTIVE


def is_in_progress(task: Task) -> bool:
    return task.status == TaskStatus.IN_PROGRESS


def is_blocked(task: Task) -> bool:
    return task.status == TaskStatus.BLOCKED


def filter_active(
    tasks: Iterable[Task],
    projects: Iterable[Project],
    areas: Iterable[Area],
    today: str,
    archive_dir: Optional[str] = None
) -> ActiveEntities:
    """Apply each entity type's predicate, preserving input order."""
    return ActiveEntities(
        tasks=[t for t in tasks if is_active_task(t, today, archive_dir)],
        projects=[p for p in projects if is_active_project(p)],
        areas=[a for a in areas if is_active_area(a)],
    )
