"""
fields.py

Which entity fields an output shows, in what order, and how each renders.

Declared once per entity type and shared by the human, AI and JSON output
modes, so the three never disagree on what a record contains.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple, Union

from .schema import Area, Project, Task

MISSING = "(missing)"


class OutputMode(str, Enum):
    HUMAN = "human"
    AI = "ai"
    JSON = "json"


def get_output_mode(ai: bool = False, json: bool = False) -> OutputMode:
    if json:
        return OutputMode.JSON
    if ai:
        return OutputMode.AI
    return OutputMode.HUMAN


def _value(attr: str) -> Callable[[Any], Any]:
    def read(entity: Any) -> Any:
        value = getattr(entity, attr, None)
        if isinstance(value, Enum):
            return value.value
        return value
    return read


def _present(read: Callable[[Any], Any]) -> Callable[[Any], bool]:
    return lambda entity: read(entity) not in (None, "", [])


def _always(entity: Any) -> bool:
    return True


@dataclass(frozen=True)
class FieldSpec:
    label: str  # kebab-case, used by human and AI output
    json_key: str
    shown: Callable[[Any], bool]
    render: Callable[[Any], Any]


def _required(label: str, json_key: str, attr: str) -> FieldSpec:
    return FieldSpec(label, json_key, _always, _value(attr))


def _optional(label: str, json_key: str, attr: str) -> FieldSpec:
    read = _value(attr)
    return FieldSpec(label, json_key, _present(read), read)


TASK_FIELDS: List[FieldSpec] = [
    _required("path", "path", "path"),
    _required("title", "title", "title"),
    _required("status", "status", "status"),
    _required("created-at", "createdAt", "created_at"),
    _required("updated-at", "updatedAt", "updated_at"),
    _optional("completed-at", "completedAt", "completed_at"),
    _optional("due", "due", "due"),
    _optional("scheduled", "scheduled", "scheduled"),
    _optional("defer-until", "deferUntil", "defer_until"),
    _optional("project", "project", "project_ref"),
    _optional("area", "area", "area_ref"),
    _optional("body", "body", "body"),
]

PROJECT_FIELDS: List[FieldSpec] = [
    _required("path", "path", "path"),
    _required("title", "title", "title"),
    _optional("status", "status", "status"),
    _optional("area", "area", "area_ref"),
    _optional("description", "description", "description"),
    _optional("start-date", "startDate", "start_date"),
    _optional("end-date", "endDate", "end_date"),
    _optional("unique-id", "uniqueId", "unique_id"),
    _optional("blocked-by", "blockedBy", "blocked_by"),
    _optional("body", "body", "body"),
]

AREA_FIELDS: List[FieldSpec] = [
    _required("path", "path", "path"),
    _required("title", "title", "title"),
    _optional("status", "status", "status"),
    _optional("type", "areaType", "area_type"),
    _optional("description", "description", "description"),
    _optional("body", "body", "body"),
]

FIELD_TABLE: Dict[type, List[FieldSpec]] = {
    Task: TASK_FIELDS,
    Project: PROJECT_FIELDS,
    Area: AREA_FIELDS,
}


def field_specs(entity: Union[Task, Project, Area]) -> List[FieldSpec]:
    for entity_type, specs in FIELD_TABLE.items():
        if isinstance(entity, entity_type):
            return specs
    raise ValueError(f"No field table for {type(entity).__name__}")


def visible_fields(
    entity: Union[Task, Project, Area],
    mode: OutputMode = OutputMode.AI,
    include_body: bool = True
) -> List[Tuple[str, Any]]:
    """
    Ordered (label, value) pairs for one entity.

    Required fields always appear; an empty required value renders as
    "(missing)" in text modes and None in JSON. List values are joined with
    ", " in text modes.
    """
    out: List[Tuple[str, Any]] = []
    for spec in field_specs(entity):
        if spec.label == "body" and not include_body:
            continue
        if not spec.shown(entity):
            continue
        value = spec.render(entity)
        if mode == OutputMode.JSON:
            out.append((spec.json_key, value if value not in ("", []) else None))
            continue
        if value in (None, "", []):
            value = MISSING
        elif isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        out.append((spec.label, value))
    return out


def to_record(entity: Union[Task, Project, Area], include_body: bool = True) -> Dict[str, Any]:
    """JSON-ready dict of the visible fields, in canonical order."""
    return dict(visible_fields(entity, OutputMode.JSON, include_body=include_body))
