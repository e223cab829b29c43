from typing import Any, Dict, Iterable, List, Optional, Tuple

from vaultgraph.resolve import ReferenceResolver
from vaultgraph.schema import Area, Project, Task


class EntityStore:
    def __init__(
        self,
        tasks: Iterable[Task] = (),
        projects: Iterable[Project] = (),
        areas: Iterable[Area] = (),
    ):
        """
        Read-only snapshot of one vault's records at one instant.

        Args:
            tasks: Parsed task records, in scan order.
            projects: Parsed project records, in scan order.
            areas: Parsed area records, in scan order.
        """
        self.tasks: Tuple[Task, ...] = tuple(tasks)
        self.projects: Tuple[Project, ...] = tuple(projects)
        self.areas: Tuple[Area, ...] = tuple(areas)
        self._tasks_by_path = {t.path: t for t in self.tasks}
        self._projects_by_path = {p.path: p for p in self.projects}
        self._areas_by_path = {a.path: a for a in self.areas}
        self._resolver: Optional[ReferenceResolver] = None

    @classmethod
    def from_records(
        cls,
        tasks: Optional[List[Dict[str, Any]]] = None,
        projects: Optional[List[Dict[str, Any]]] = None,
        areas: Optional[List[Dict[str, Any]]] = None,
    ) -> "EntityStore":
        """
        Validate raw parser output (camelCase or snake_case keys).

        Raises pydantic.ValidationError on a malformed record.
        """
        return cls(
            tasks=[Task.model_validate(r) for r in tasks or []],
            projects=[Project.model_validate(r) for r in projects or []],
            areas=[Area.model_validate(r) for r in areas or []],
        )

    @property
    def resolver(self) -> ReferenceResolver:
        """Title lookup over every project and area, active or not."""
        if self._resolver is None:
            self._resolver = ReferenceResolver(self.projects, self.areas)
        return self._resolver

    def find_task(self, path: str) -> Optional[Task]:
        return self._tasks_by_path.get(path)

    def find_project(self, path: str) -> Optional[Project]:
        return self._projects_by_path.get(path)

    def find_area(self, path: str) -> Optional[Area]:
        return self._areas_by_path.get(path)

    def find_project_by_title(self, name: str) -> Optional[Project]:
        return self.resolver.resolve_project(name)

    def find_area_by_title(self, name: str) -> Optional[Area]:
        return self.resolver.resolve_area(name)

    def __len__(self) -> int:
        return len(self.tasks) + len(self.projects) + len(self.areas)
