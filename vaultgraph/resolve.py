"""
resolve.py

Exact, case-insensitive resolution of wikilink/title references to entities.
"""

import logging
from typing import Dict, Generic, Iterable, Optional, Set, TypeVar

from .schema import Area, Project

logger = logging.getLogger(__name__)

E = TypeVar("E", Project, Area)


def reference_name(raw: Optional[str]) -> Optional[str]:
    """
    Extract the target name from a reference, keeping its original case.

    "[[Q1 Planning]]" -> "Q1 Planning"
    "[[Q1 Planning|Q1]]" -> "Q1 Planning"
    "[[Q1 Planning#Goals]]" -> "Q1 Planning"
    "Q1 Planning" -> "Q1 Planning"
    None / "" / "[[ ]]" -> None
    """
    if raw is None:
        return None
    text = raw.strip()
    if text.startswith("[[") and text.endswith("]]"):
        inner = text[2:-2]
        inner = inner.split("|", 1)[0]
        inner = inner.split("#", 1)[0]
        text = inner.strip()
    return text or None


def normalize(raw: Optional[str]) -> Optional[str]:
    """Comparable form of a reference: wikilink stripped, trimmed, lowercased."""
    name = reference_name(raw)
    return name.lower() if name else None


class _TitleIndex(Generic[E]):
    def __init__(self, entities: Iterable[E], kind: str):
        self.kind = kind
        self.by_title: Dict[str, E] = {}
        self.ambiguous: Set[str] = set()
        for entity in entities:
            key = normalize(entity.title)
            if key is None:
                continue
            if key in self.by_title:
                self.ambiguous.add(key)
                logger.debug(
                    "duplicate %s title %r: %s replaces %s",
                    kind, entity.title, entity.path, self.by_title[key].path
                )
            # last one inserted wins
            self.by_title[key] = entity

    def get(self, raw: Optional[str]) -> Optional[E]:
        key = normalize(raw)
        if key is None:
            return None
        return self.by_title.get(key)

    def is_ambiguous(self, raw: Optional[str]) -> bool:
        key = normalize(raw)
        return key is not None and key in self.ambiguous


class ReferenceResolver:
    def __init__(self, projects: Iterable[Project] = (), areas: Iterable[Area] = ()):
        """
        Build title lookups for the given projects and areas.

        Args:
            projects: Projects that references may point at.
            areas: Areas that references may point at.
        """
        self._projects = _TitleIndex(projects, "project")
        self._areas = _TitleIndex(areas, "area")

    def resolve_project(self, raw: Optional[str]) -> Optional[Project]:
        return self._projects.get(raw)

    def resolve_area(self, raw: Optional[str]) -> Optional[Area]:
        return self._areas.get(raw)

    def is_ambiguous_project(self, raw: Optional[str]) -> bool:
        return self._projects.is_ambiguous(raw)

    def is_ambiguous_area(self, raw: Optional[str]) -> bool:
        return self._areas.is_ambiguous(raw)

    @property
    def ambiguous_projects(self) -> Set[str]:
        return set(self._projects.ambiguous)

    @property
    def ambiguous_areas(self) -> Set[str]:
        return set(self._areas.ambiguous)
