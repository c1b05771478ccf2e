"""Data models for context retrieval and bundling."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ctxbundle.config import ContextMode
from ctxbundle.graph.models import FileRecord


class ManifestType(str, Enum):
    """Coarse file classification."""

    CODE = "code"
    CONFIG = "config"
    ASSET = "asset"
    DOC = "doc"
    OTHER = "other"


class ManifestEntry(BaseModel):
    """One classified, hashed file of the workspace."""

    model_config = ConfigDict(frozen=True)

    path: str
    hash: str
    size: int
    type: ManifestType
    extension: str = ""


class ContextRetrievalItem(BaseModel):
    """A scored path and the signals that explain its score."""

    model_config = ConfigDict(frozen=True)

    path: str
    score: float = 0.0
    reasons: list[str] = Field(default_factory=lambda: ["global-context"])


class ContextRetrievalTrace(BaseModel):
    """Audit record of which files were selected or dropped and why."""

    model_config = ConfigDict(frozen=True)

    selected: list[ContextRetrievalItem] = Field(default_factory=list)
    dropped: list[ContextRetrievalItem] = Field(default_factory=list)
    budget_used: int = 0
    budget_max: int = 0
    chars_used: int = 0
    chars_max: int = 0
    generated_at: int = 0  # epoch milliseconds from the bundler's clock
    strategy: ContextMode = ContextMode.BALANCED_GRAPH

    @property
    def selected_paths(self) -> list[str]:
        return [item.path for item in self.selected]

    @property
    def dropped_paths(self) -> list[str]:
        return [item.path for item in self.dropped]


class ContextBundleFile(BaseModel):
    """A selected file with its prompt-ready excerpt."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    snippet: str
    hash: str
    size: int
    score: float


class ContextBundleActiveFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    hash: str


class WorkspaceAnalysis(BaseModel):
    """Read sets computed by the external workspace-analysis step.

    Trusted as-is. Missing lists are treated as empty. Accepts both the
    snake_case field names and the camelCase keys of the analysis report
    (``requiredReadSet`` / ``expandedReadSet``).
    """

    model_config = ConfigDict(populate_by_name=True)

    manifest: list[ManifestEntry] | None = None
    required_read_set: list[str] = Field(default_factory=list, alias="requiredReadSet")
    expanded_read_set: list[str] = Field(default_factory=list, alias="expandedReadSet")

    @field_validator("required_read_set", "expanded_read_set", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class BundleRequest(BaseModel):
    """Everything one bundling invocation needs."""

    files: list[FileRecord] = Field(default_factory=list)
    active_file: str | None = None
    recent_preview_errors: list[str] = Field(default_factory=list)
    prompt: str = ""
    mode: ContextMode | None = None  # None = configured default
    max_files: int | None = None
    max_chars: int | None = None
    workspace_analysis: WorkspaceAnalysis | None = None

    @field_validator("recent_preview_errors", mode="before")
    @classmethod
    def _coerce_errors(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return ["" if line is None else str(line) for line in value]
        return value

    @field_validator("prompt", mode="before")
    @classmethod
    def _coerce_prompt(cls, value: object) -> object:
        return "" if value is None else value


class ContextBundle(BaseModel):
    """The final artifact handed to the prompt assembler."""

    model_config = ConfigDict(frozen=True)

    manifest: list[ManifestEntry] = Field(default_factory=list)
    files: list[ContextBundleFile] = Field(default_factory=list)
    active_file: ContextBundleActiveFile | None = None
    retrieval_trace: ContextRetrievalTrace = Field(default_factory=ContextRetrievalTrace)

    def render(self, use_snippets: bool = True, include_metadata: bool = True) -> str:
        """Render the bundle as plain text, one section per selected file."""
        trace = self.retrieval_trace
        reasons_by_path = {item.path: item.reasons for item in trace.selected}
        sections: list[str] = []

        if include_metadata:
            sections.append(
                f"# Workspace context ({trace.strategy.value}): "
                f"{len(self.files)} of {len(self.manifest)} files, "
                f"{trace.chars_used:,} chars"
            )
            if self.active_file:
                sections.append(f"# Active file: {self.active_file.path}")
            sections.append("")

        for f in self.files:
            sections.append(f"## {f.path}")
            if include_metadata:
                reasons = reasons_by_path.get(f.path, [])
                sections.append(f"# score: {f.score:g}; {', '.join(reasons)}")
            sections.append(f.snippet if use_snippets else f.content)
            sections.append("")

        return "\n".join(sections)

    def summary(self) -> str:
        """Human-readable summary of what's in the bundle."""
        trace = self.retrieval_trace
        lines = [
            f"Strategy: {trace.strategy.value}",
            f"Files: {trace.budget_used} / {trace.budget_max}",
            f"Chars: {trace.chars_used:,} / {trace.chars_max:,}",
            f"Manifest: {len(self.manifest)} entries",
            f"Active file: {self.active_file.path if self.active_file else '-'}",
            "",
            "Selected:",
        ]
        for item in trace.selected:
            lines.append(f"  > {item.path} score={item.score:g} [{', '.join(item.reasons)}]")
        if trace.dropped:
            lines.append("Dropped:")
            for item in trace.dropped:
                lines.append(f"  - {item.path} [{', '.join(item.reasons)}]")
        return "\n".join(lines)
