import networkx as nx
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .resolve import ReferenceResolver, reference_name
from .schema import Area, Project, Task

Entity = Union[Task, Project, Area]


@dataclass(frozen=True)
class BrokenReference:
    """A reference on `path` that named no entity in the graph."""
    path: str
    title: str
    entity_type: str  # 'task' | 'project'
    target_type: str  # 'project' | 'area'
    name: str


@dataclass(frozen=True)
class AmbiguousReference:
    """A reference that matched a title shared by several entities."""
    target_type: str
    name: str
    chosen_path: str


class VaultGraph:
    def __init__(self):
        """Area -> project -> task containment graph keyed by entity path."""
        self.graph = nx.DiGraph()
        self.entities: Dict[str, Entity] = {}

    def add_entity(self, entity: Entity, node_type: str):
        self.graph.add_node(entity.path, type=node_type, title=entity.title)
        self.entities[entity.path] = entity

    def link(self, parent_path: str, child_path: str, kind: str):
        """
        Attach a child to its parent. A child keeps exactly one parent edge.
        """
        if self.graph.in_degree(child_path) > 0:
            raise RuntimeError(f"{child_path} already has a parent")
        self.graph.add_edge(parent_path, child_path, kind=kind)

    def has(self, path: str) -> bool:
        return self.graph.has_node(path)

    def node_type(self, path: str) -> Optional[str]:
        if not self.graph.has_node(path):
            return None
        return self.graph.nodes[path].get("type")

    def children(self, path: str, node_type: Optional[str] = None) -> List[Entity]:
        """Children in the order they were linked."""
        if not self.graph.has_node(path):
            return []
        out: List[Entity] = []
        for child in self.graph.successors(path):
            if node_type is not None and self.graph.nodes[child].get("type") != node_type:
                continue
            out.append(self.entities[child])
        return out

    def parent(self, path: str) -> Optional[Entity]:
        if not self.graph.has_node(path):
            return None
        for pred in self.graph.predecessors(path):
            return self.entities[pred]
        return None

    def effective_area(self, path: str) -> Optional[Area]:
        """
        The area a task or project ultimately sits in.

        For a task inside a project this is the project's area, never the
        task's own area reference.
        """
        node = self.parent(path)
        while node is not None:
            if isinstance(node, Area):
                return node
            node = self.parent(node.path)
        return None

    def orphans(self, node_type: str) -> List[Entity]:
        return [
            self.entities[n]
            for n, data in self.graph.nodes(data=True)
            if data.get("type") == node_type and self.graph.in_degree(n) == 0
        ]


@dataclass
class GraphPartition:
    graph: VaultGraph
    area_projects: Dict[str, List[Project]] = field(default_factory=dict)
    project_tasks: Dict[str, List[Task]] = field(default_factory=dict)
    direct_area_tasks: Dict[str, List[Task]] = field(default_factory=dict)
    orphan_projects: List[Project] = field(default_factory=list)
    orphan_tasks: List[Task] = field(default_factory=list)
    broken_references: List[BrokenReference] = field(default_factory=list)
    ambiguous_references: List[AmbiguousReference] = field(default_factory=list)

    def placed_tasks(self) -> List[Task]:
        """Every task exactly once: project buckets, direct buckets, then orphans."""
        out: List[Task] = []
        for tasks in self.project_tasks.values():
            out.extend(tasks)
        for tasks in self.direct_area_tasks.values():
            out.extend(tasks)
        out.extend(self.orphan_tasks)
        return out

    @property
    def task_count(self) -> int:
        return (
            sum(len(t) for t in self.project_tasks.values())
            + sum(len(t) for t in self.direct_area_tasks.values())
            + len(self.orphan_tasks)
        )


def _resolve_into_graph(
    vg: VaultGraph,
    resolver: ReferenceResolver,
    target_type: str,
    raw: Optional[str],
    ambiguous: List[AmbiguousReference]
) -> Optional[Entity]:
    if target_type == "project":
        target = resolver.resolve_project(raw)
        is_ambiguous = resolver.is_ambiguous_project(raw)
    else:
        target = resolver.resolve_area(raw)
        is_ambiguous = resolver.is_ambiguous_area(raw)
    if target is None or vg.node_type(target.path) != target_type:
        return None
    if is_ambiguous:
        hit = AmbiguousReference(target_type, reference_name(raw) or "", target.path)
        if hit not in ambiguous:
            ambiguous.append(hit)
    return target


def build_graph(
    tasks: List[Task],
    projects: List[Project],
    areas: List[Area],
    resolver: Optional[ReferenceResolver] = None
) -> GraphPartition:
    """
    Partition tasks and projects into area/project buckets and orphans.

    Each task is placed once, as it is visited: its project if the project
    reference resolves, otherwise its area if the area reference resolves,
    otherwise the orphan list. Unresolvable references are recorded, never raised.
    """
    resolver = resolver or ReferenceResolver(projects, areas)
    vg = VaultGraph()
    broken: List[BrokenReference] = []
    ambiguous: List[AmbiguousReference] = []

    for area in areas:
        vg.add_entity(area, "area")

    for project in projects:
        vg.add_entity(project, "project")
        area = _resolve_into_graph(vg, resolver, "area", project.area_ref, ambiguous)
        if area is not None:
            vg.link(area.path, project.path, "contains")
        elif reference_name(project.area_ref):
            broken.append(BrokenReference(
                project.path, project.title, "project", "area", reference_name(project.area_ref)
            ))

    for task in tasks:
        vg.add_entity(task, "task")
        project = _resolve_into_graph(vg, resolver, "project", task.project_ref, ambiguous)
        if project is None and reference_name(task.project_ref):
            broken.append(BrokenReference(
                task.path, task.title, "task", "project", reference_name(task.project_ref)
            ))

        # the area reference is checked even when a project claims the task
        area = _resolve_into_graph(vg, resolver, "area", task.area_ref, ambiguous)
        if area is None and reference_name(task.area_ref):
            broken.append(BrokenReference(
                task.path, task.title, "task", "area", reference_name(task.area_ref)
            ))

        if project is not None:
            vg.link(project.path, task.path, "contains")
        elif area is not None:
            vg.link(area.path, task.path, "direct")

    return GraphPartition(
        graph=vg,
        area_projects={a.path: vg.children(a.path, "project") for a in areas},
        project_tasks={p.path: vg.children(p.path, "task") for p in projects},
        direct_area_tasks={a.path: vg.children(a.path, "task") for a in areas},
        orphan_projects=vg.orphans("project"),
        orphan_tasks=vg.orphans("task"),
        broken_references=broken,
        ambiguous_references=ambiguous,
    )
