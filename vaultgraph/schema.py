# vaultgraph/schema.py

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    INBOX = "inbox"
    ICEBOX = "icebox"
    READY = "ready"
    IN_PROGRESS = "in-progress"
    BLOCKED = "blocked"
    DROPPED = "dropped"
    DONE = "done"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    READY = "ready"
    BLOCKED = "blocked"
    IN_PROGRESS = "in-progress"
    PAUSED = "paused"
    DONE = "done"


class AreaStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


def canonical_status(value: Any) -> Any:
    """
    Convert an external status spelling to the kebab-case enum value.

    "InProgress", "in_progress", "In-Progress" and "in progress" all become
    "in-progress". Enum members and non-strings pass through untouched.
    """
    if isinstance(value, Enum) or not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return None
    text = re.sub(r"(?<=[a-z0-9])([A-Z])", r"-\1", text)
    return re.sub(r"[\s_]+", "-", text).lower()


def _iso_or_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return value


def _text_or_none(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return value


class _Record(BaseModel):
    """Shared config: read-only, accepts camelCase keys and snake_case names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = Field(..., description="Vault-relative file path; the identity key")
    title: str = Field(..., description="Human readable title, target of wikilinks")
    body: str = ""


class Task(_Record):
    status: TaskStatus
    due: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    scheduled: Optional[str] = Field(default=None, description="YYYY-MM-DD")
    defer_until: Optional[str] = Field(default=None, alias="deferUntil", description="YYYY-MM-DD")

    project_ref: Optional[str] = Field(default=None, alias="projectRef")
    area_ref: Optional[str] = Field(default=None, alias="areaRef")

    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    completed_at: Optional[str] = Field(default=None, alias="completedAt")

    @field_validator("status", mode="before")
    @classmethod
    def canonicalize_status(cls, v):
        return canonical_status(v)

    @field_validator(
        "due", "scheduled", "defer_until", "created_at", "updated_at", "completed_at",
        mode="before",
    )
    @classmethod
    def coerce_dates(cls, v):
        """Dates arrive as date objects or strings; store ISO strings, blank -> None."""
        return _iso_or_none(v)

    @field_validator("project_ref", "area_ref", mode="before")
    @classmethod
    def blank_refs(cls, v):
        return _text_or_none(v)


class Project(_Record):
    status: Optional[ProjectStatus] = None
    area_ref: Optional[str] = Field(default=None, alias="areaRef")
    description: Optional[str] = None
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    unique_id: Optional[str] = Field(default=None, alias="uniqueId")
    blocked_by: List[str] = Field(default_factory=list, alias="blockedBy")

    @field_validator("status", mode="before")
    @classmethod
    def canonicalize_status(cls, v):
        return canonical_status(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, v):
        return _iso_or_none(v)

    @field_validator("area_ref", mode="before")
    @classmethod
    def blank_refs(cls, v):
        return _text_or_none(v)

    @field_validator("blocked_by", mode="before")
    @classmethod
    def listify_blocked_by(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        return v


class Area(_Record):
    status: Optional[AreaStatus] = None
    area_type: Optional[str] = Field(default=None, alias="areaType")
    description: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def canonicalize_status(cls, v):
        return canonical_status(v)


class ResultModel(BaseModel):
    """Base for projection outputs; serializes with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
