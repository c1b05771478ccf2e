"""Data models shared by the graph layer and the context engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class EdgeType(str, Enum):
    """How one workspace file refers to another."""

    IMPORT = "import"
    LINK = "link"
    ASSET = "asset"
    ROUTE = "route"


class FileRecord(BaseModel):
    """One file of the workspace snapshot supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    path: str = ""
    content: str = ""

    @field_validator("path", "content", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        return "" if value is None else str(value)


class DependencyEdge(BaseModel):
    """A directed file-to-file reference between two normalized paths."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    type: EdgeType = EdgeType.IMPORT
    weight: int = 1
