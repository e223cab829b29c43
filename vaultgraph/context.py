"""
context.py

Projects a vault snapshot into the four result shapes the output modes
render: the vault overview and the area, project and task contexts.

Formatters read these results as-is. Counts, bucket membership and tree
structure are all computed here once.
"""

import json
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from pydantic import Field

from backend.storage import EntityStore
from .date_utils import parse_iso_date
from .config import config
from .filters import ActiveEntities, filter_active, is_active_area, is_active_project
from .graph import GraphPartition, build_graph
from .references import ReferenceEntry, collect_references
from .resolve import ReferenceResolver, reference_name
from .schema import Area, Project, ResultModel, Task
from .stats import (
    ContextStats,
    area_stats,
    group_projects_by_status,
    group_tasks_by_status,
    project_stats,
    vault_stats,
)
from .timeline import Timeline, build_timeline
from .tree import AreaTaskCount, TreeNode, build_area_tree, calculate_area_task_count

logger = logging.getLogger(__name__)

Entities = Union[EntityStore, ActiveEntities, Sequence]


class VaultOverview(ResultModel):
    areas: List[Area] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    area_projects: Dict[str, List[Project]] = Field(default_factory=dict)
    project_tasks: Dict[str, List[Task]] = Field(default_factory=dict)
    direct_area_tasks: Dict[str, List[Task]] = Field(default_factory=dict)
    orphan_projects: List[Project] = Field(default_factory=list)
    orphan_tasks: List[Task] = Field(default_factory=list)
    timeline: Timeline = Field(default_factory=Timeline)
    stats: ContextStats = Field(default_factory=ContextStats)
    area_trees: Dict[str, TreeNode] = Field(default_factory=dict)
    references: List[ReferenceEntry] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class AreaContext(ResultModel):
    area: Area
    projects: List[Project] = Field(default_factory=list)
    project_tasks: Dict[str, List[Task]] = Field(default_factory=dict)
    direct_tasks: List[Task] = Field(default_factory=list)
    projects_by_status: Dict[str, List[Project]] = Field(default_factory=dict)
    timeline: Timeline = Field(default_factory=Timeline)
    stats: ContextStats = Field(default_factory=ContextStats)
    tree: TreeNode = Field(default_factory=TreeNode)
    task_count: AreaTaskCount = Field(default_factory=lambda: AreaTaskCount(direct=0, via_projects=0, total=0))
    references: List[ReferenceEntry] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ProjectContext(ResultModel):
    project: Project
    area: Optional[Area] = None
    tasks: List[Task] = Field(default_factory=list)
    tasks_by_status: Dict[str, List[Task]] = Field(default_factory=dict)
    timeline: Timeline = Field(default_factory=Timeline)
    stats: ContextStats = Field(default_factory=ContextStats)
    references: List[ReferenceEntry] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class TaskContext(ResultModel):
    task: Task
    project: Optional[Project] = None
    area: Optional[Area] = None
    references: List[ReferenceEntry] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


def as_store(entities: Entities) -> EntityStore:
    """Accept an EntityStore or a (tasks, projects, areas) triple."""
    if isinstance(entities, EntityStore):
        return entities
    tasks, projects, areas = entities
    return EntityStore(tasks=tasks, projects=projects, areas=areas)


def broken_reference_warning(entity_type: str, title: str, target_type: str, name: str) -> str:
    return f"{entity_type.capitalize()} '{title}' references non-existent {target_type} '{name}'"


def ambiguous_title_warning(target_type: str, name: str, chosen_path: str) -> str:
    return f"Multiple {target_type}s share the title '{name}'; using '{chosen_path}'"


class ContextProjector:
    def __init__(
        self,
        archive_dir: Optional[str] = None,
        recent_hours: Optional[int] = None,
        recent_limit: Optional[int] = None
    ):
        """
        Initialize the projector.

        Args:
            archive_dir: Tasks archive subpath inside the vault (config default "tasks/archive").
            recent_hours: "Recently modified" window length (config default 24).
            recent_limit: Ceiling above which recently_modified is emptied (config default 20).
        """
        self.archive_dir = archive_dir or config['archive_dir']
        self.recent_hours = recent_hours if recent_hours is not None else config['recent_window_hours']
        self.recent_limit = recent_limit if recent_limit is not None else config['recent_limit']

    # -----------------------------
    # Vault overview
    # -----------------------------

    def build_vault_overview(
        self,
        entities: Entities,
        today: str,
        now: Optional[datetime] = None
    ) -> VaultOverview:
        """
        Full pipeline over every active entity in the vault.

        Raises:
            ValueError: `today` is not a YYYY-MM-DD date.
        """
        parse_iso_date(today)
        store = as_store(entities)
        active = filter_active(store.tasks, store.projects, store.areas, today, self.archive_dir)

        partition = build_graph(active.tasks, active.projects, active.areas)
        timeline = self._timeline(active.tasks, today, now)

        area_trees = {
            area.path: build_area_tree(
                partition.area_projects[area.path],
                partition.project_tasks,
                partition.direct_area_tasks[area.path],
            )
            for area in active.areas
        }

        return VaultOverview(
            areas=active.areas,
            projects=active.projects,
            tasks=active.tasks,
            area_projects=partition.area_projects,
            project_tasks=partition.project_tasks,
            direct_area_tasks=partition.direct_area_tasks,
            orphan_projects=partition.orphan_projects,
            orphan_tasks=partition.orphan_tasks,
            timeline=timeline,
            stats=vault_stats(partition, timeline),
            area_trees=area_trees,
            references=collect_references(active.areas, active.projects, active.tasks),
            warnings=self._warnings(partition, store),
        )

    # -----------------------------
    # Area context
    # -----------------------------

    def build_area_context(
        self,
        area: Area,
        entities: Entities,
        today: str,
        now: Optional[datetime] = None
    ) -> AreaContext:
        """
        One area's projects and tasks, plus projects grouped by status.

        The focal area is included even when it is archived.
        """
        parse_iso_date(today)
        store = as_store(entities)
        active = filter_active(store.tasks, store.projects, store.areas, today, self.archive_dir)
        areas = _with_focal(store.areas, area, is_active_area)

        partition = build_graph(active.tasks, active.projects, areas)
        projects = partition.area_projects.get(area.path, [])
        project_tasks = {p.path: partition.project_tasks[p.path] for p in projects}
        direct_tasks = partition.direct_area_tasks.get(area.path, [])

        scope = {area.path} | {p.path for p in projects}
        scope |= {t.path for t in direct_tasks}
        scope |= {t.path for tasks in project_tasks.values() for t in tasks}
        # input order, not bucket order
        tasks = [t for t in active.tasks if t.path in scope]
        timeline = self._timeline(tasks, today, now)

        # done projects stay out of the graph but fill the "done" group
        area_lookup = ReferenceResolver(areas=areas)
        done_projects = [
            p for p in store.projects
            if not is_active_project(p)
            and getattr(area_lookup.resolve_area(p.area_ref), "path", None) == area.path
        ]

        return AreaContext(
            area=area,
            projects=projects,
            project_tasks=project_tasks,
            direct_tasks=direct_tasks,
            projects_by_status=group_projects_by_status(projects + done_projects),
            timeline=timeline,
            stats=area_stats(projects, tasks, timeline),
            tree=build_area_tree(projects, project_tasks, direct_tasks),
            task_count=calculate_area_task_count(project_tasks, direct_tasks, projects),
            references=collect_references([area], projects, tasks),
            warnings=self._warnings(partition, store, scope),
        )

    # -----------------------------
    # Project context
    # -----------------------------

    def build_project_context(
        self,
        project: Project,
        entities: Entities,
        today: str,
        now: Optional[datetime] = None
    ) -> ProjectContext:
        """
        One project's tasks grouped by status, with its area.

        The focal project is included even when it is done. Its area is
        looked up among every area in the store, archived ones too.
        """
        parse_iso_date(today)
        store = as_store(entities)
        active = filter_active(store.tasks, store.projects, store.areas, today, self.archive_dir)
        projects = _with_focal(store.projects, project, is_active_project)

        partition = build_graph(active.tasks, projects, active.areas)
        tasks = partition.project_tasks.get(project.path, [])

        area = partition.graph.effective_area(project.path)
        if area is None:
            area = store.resolver.resolve_area(project.area_ref)

        timeline = self._timeline(tasks, today, now)
        scope = {project.path} | {t.path for t in tasks}
        if area is not None:
            scope.add(area.path)

        return ProjectContext(
            project=project,
            area=area,
            tasks=tasks,
            tasks_by_status=group_tasks_by_status(tasks),
            timeline=timeline,
            stats=project_stats(tasks, timeline, has_area=area is not None),
            references=collect_references([area], [project], tasks),
            warnings=self._warnings(partition, store, scope),
        )

    # -----------------------------
    # Task context
    # -----------------------------

    def build_task_context(self, task: Task, entities: Entities, today: str) -> TaskContext:
        """
        A task's parent project and area.

        The area comes from the project when the project has one, otherwise
        from the task's own area reference. Parents are resolved among every
        entity in the store, active or not.
        """
        parse_iso_date(today)
        store = as_store(entities)
        resolver = store.resolver
        warnings: List[str] = []

        project = resolver.resolve_project(task.project_ref)
        if project is None and reference_name(task.project_ref):
            warnings.append(broken_reference_warning(
                "task", task.title, "project", reference_name(task.project_ref)
            ))
        elif project is not None and resolver.is_ambiguous_project(task.project_ref):
            warnings.append(ambiguous_title_warning(
                "project", reference_name(task.project_ref), project.path
            ))

        area = None
        if project is not None:
            area = resolver.resolve_area(project.area_ref)
            if area is None and reference_name(project.area_ref):
                warnings.append(broken_reference_warning(
                    "project", project.title, "area", reference_name(project.area_ref)
                ))
            elif area is not None and resolver.is_ambiguous_area(project.area_ref):
                warnings.append(ambiguous_title_warning(
                    "area", reference_name(project.area_ref), area.path
                ))

        own_area = resolver.resolve_area(task.area_ref)
        if own_area is None and reference_name(task.area_ref):
            warnings.append(broken_reference_warning(
                "task", task.title, "area", reference_name(task.area_ref)
            ))
        if area is None:
            area = own_area
            if area is not None and resolver.is_ambiguous_area(task.area_ref):
                warnings.append(ambiguous_title_warning(
                    "area", reference_name(task.area_ref), area.path
                ))

        for message in warnings:
            logger.info(message)

        return TaskContext(
            task=task,
            project=project,
            area=area,
            references=collect_references([area], [project], [task]),
            warnings=warnings,
        )

    # -----------------------------
    # Internal helpers
    # -----------------------------

    def _timeline(self, tasks: List[Task], today: str, now: Optional[datetime]) -> Timeline:
        return build_timeline(
            tasks, today, now=now,
            recent_hours=self.recent_hours,
            recent_limit=self.recent_limit,
        )

    def _warnings(
        self,
        partition: GraphPartition,
        store: EntityStore,
        scope: Optional[Set[str]] = None
    ) -> List[str]:
        """
        Warning strings for the partition's broken and ambiguous references.

        A reference is only reported broken when nothing in the whole store
        carries that title; pointing at an inactive entity is not an error.
        With `scope`, only references made by (or resolved to) those paths count.
        """
        warnings: List[str] = []
        for ref in partition.broken_references:
            if scope is not None and ref.path not in scope:
                continue
            if _exists(store, ref.target_type, ref.name):
                continue
            message = broken_reference_warning(ref.entity_type, ref.title, ref.target_type, ref.name)
            if message not in warnings:
                warnings.append(message)

        for ref in partition.ambiguous_references:
            if scope is not None and ref.chosen_path not in scope:
                continue
            warnings.append(ambiguous_title_warning(ref.target_type, ref.name, ref.chosen_path))

        for message in warnings:
            logger.info(message)
        return warnings


def _with_focal(entities: Iterable, focal, is_active) -> list:
    """Active entities in store order, plus the focal one whatever its status."""
    out = [e for e in entities if is_active(e) or e.path == focal.path]
    if all(e.path != focal.path for e in out):
        out.append(focal)
    return out


def _exists(store: EntityStore, target_type: str, name: str) -> bool:
    if target_type == "project":
        return store.find_project_by_title(name) is not None
    return store.find_area_by_title(name) is not None


_default_projector = ContextProjector()


def build_vault_overview(entities: Entities, today: str, now: Optional[datetime] = None) -> VaultOverview:
    return _default_projector.build_vault_overview(entities, today, now=now)


def build_area_context(area: Area, entities: Entities, today: str, now: Optional[datetime] = None) -> AreaContext:
    return _default_projector.build_area_context(area, entities, today, now=now)


def build_project_context(
    project: Project,
    entities: Entities,
    today: str,
    now: Optional[datetime] = None
) -> ProjectContext:
    return _default_projector.build_project_context(project, entities, today, now=now)


def build_task_context(task: Task, entities: Entities, today: str) -> TaskContext:
    return _default_projector.build_task_context(task, entities, today)


def to_json(result: ResultModel, indent: int = 2) -> str:
    """Serialize any projection result with camelCase keys."""
    return json.dumps(result.model_dump(mode="json", by_alias=True), indent=indent, ensure_ascii=False)
