"""
tree.py

ASCII outline of an area's projects and tasks.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from .filters import is_in_progress
from .schema import Project, ResultModel, Task
from .stats import count_tasks_by_status, format_task_count_shorthand

TREE_BRANCH = "├── "
TREE_LAST = "└── "
TREE_PIPE = "│   "
TREE_BLANK = "    "

PROJECT_STATUS_EMOJI = {
    "in-progress": "🔵",
    "ready": "🟢",
    "planning": "🟡",
    "blocked": "🚫",
    "paused": "⏸️",
    "done": "✅",
}

TASK_STATUS_EMOJI = {
    "in-progress": "▶️",
    "ready": "🟢",
    "inbox": "📥",
    "blocked": "🚫",
}

DIRECT_TASKS_ICON = "📋"


class TreeNode(ResultModel):
    content: str = ""
    children: List[TreeNode] = Field(default_factory=list)


class AreaTaskCount(ResultModel):
    direct: int
    via_projects: int
    total: int


def render_tree(node: TreeNode, prefix: str = "") -> List[str]:
    """
    Render a node and its descendants with box-drawing connectors.

    A root with empty content is not printed; its children start at column 0.
    """
    lines: List[str] = []
    if node.content:
        lines.append(prefix + node.content)
    _render_children(node.children, prefix if node.content else "", lines)
    return lines


def _render_children(children: List[TreeNode], prefix: str, lines: List[str]) -> None:
    for i, child in enumerate(children):
        last = i == len(children) - 1
        lines.append(prefix + (TREE_LAST if last else TREE_BRANCH) + child.content)
        _render_children(child.children, prefix + (TREE_BLANK if last else TREE_PIPE), lines)


def _task_noun(n: int) -> str:
    return f"{n} task" if n == 1 else f"{n} tasks"


def format_project_one_liner(project: Project, tasks: List[Task]) -> str:
    """{emoji} {title} [{status}] — {n} tasks {shorthand}"""
    parts: List[str] = []
    status = project.status.value if project.status is not None else None
    if status:
        parts.append(PROJECT_STATUS_EMOJI[status])
    parts.append(project.title)
    if status:
        parts.append(f"[{status}]")
    parts.append("—")
    parts.append(_task_noun(len(tasks)))
    shorthand = format_task_count_shorthand(count_tasks_by_status(tasks))
    if shorthand:
        parts.append(shorthand)
    return " ".join(parts)


def format_in_progress_task_line(task: Task) -> str:
    return f"{TASK_STATUS_EMOJI['in-progress']} {task.title}"


def format_direct_tasks_summary(tasks: List[Task]) -> str:
    parts = [DIRECT_TASKS_ICON, "Direct:", _task_noun(len(tasks))]
    shorthand = format_task_count_shorthand(count_tasks_by_status(tasks))
    if shorthand:
        parts.append(shorthand)
    return " ".join(parts)


def _in_progress_nodes(tasks: List[Task]) -> List[TreeNode]:
    return [TreeNode(content=format_in_progress_task_line(t)) for t in tasks if is_in_progress(t)]


def build_area_tree(
    projects: List[Project],
    project_tasks: Dict[str, List[Task]],
    direct_tasks: List[Task]
) -> TreeNode:
    root = TreeNode()
    for project in projects:
        tasks = project_tasks.get(project.path, [])
        root.children.append(TreeNode(
            content=format_project_one_liner(project, tasks),
            children=_in_progress_nodes(tasks),
        ))

    if direct_tasks:
        root.children.append(TreeNode(
            content=format_direct_tasks_summary(direct_tasks),
            children=_in_progress_nodes(direct_tasks),
        ))
    return root


def calculate_area_task_count(
    project_tasks: Dict[str, List[Task]],
    direct_tasks: List[Task],
    projects: Optional[List[Project]] = None
) -> AreaTaskCount:
    """
    Direct, via-project and total task counts for one area.

    When `projects` is given only those projects' buckets are counted.
    """
    if projects is None:
        via_projects = sum(len(tasks) for tasks in project_tasks.values())
    else:
        via_projects = sum(len(project_tasks.get(p.path, [])) for p in projects)
    direct = len(direct_tasks)
    return AreaTaskCount(direct=direct, via_projects=via_projects, total=direct + via_projects)
