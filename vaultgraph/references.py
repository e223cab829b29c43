"""
references.py

Footer table of every entity a result mentions.
"""

from typing import Iterable, List, Optional

from .schema import Area, Project, ResultModel, Task

TYPE_PRIORITY = {"area": 0, "project": 1, "task": 2}


class ReferenceEntry(ResultModel):
    name: str
    type: str
    path: str


def collect_references(
    areas: Optional[Iterable[Area]] = None,
    projects: Optional[Iterable[Project]] = None,
    tasks: Optional[Iterable[Task]] = None
) -> List[ReferenceEntry]:
    """
    Deduplicate by path (first sighting wins) and sort by type, then name.
    """
    seen = set()
    entries: List[ReferenceEntry] = []
    for entity_type, entities in (("area", areas), ("project", projects), ("task", tasks)):
        for entity in entities or ():
            if entity is None or entity.path in seen:
                continue
            seen.add(entity.path)
            entries.append(ReferenceEntry(name=entity.title, type=entity_type, path=entity.path))
    return sort_references(entries)


def sort_references(entries: List[ReferenceEntry]) -> List[ReferenceEntry]:
    return sorted(entries, key=lambda e: (TYPE_PRIORITY[e.type], e.name.lower(), e.path))
