"""Configuration management for ctxbundle."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ctxbundle.exceptions import ConfigError

CTXBUNDLE_DIR = ".ctxbundle"
CONFIG_FILE = "config.json"


class ContextMode(str, Enum):
    """Retrieval strategy requested by the caller."""

    LIGHT = "light"
    BALANCED_GRAPH = "balanced_graph"
    MAX = "max"
    STRICT_FULL = "strict_full"


class DirectSelectionWeights(BaseModel):
    """Weights for the lightweight retrieval trace (graph-driven ranking)."""

    active_file: float = 120
    active_directory: float = 18
    error_proximity: float = 35
    distance_base: float = 28
    distance_step: float = 7
    degree_step: float = 4
    degree_cap: float = 24
    web_extension: float = 6


class BundleWeights(BaseModel):
    """Weights for the full context bundle path.

    The preview-error bonus deliberately differs from the direct selection
    value; both are kept as tuned in production.
    """

    path_token: float = 18
    content_token: float = 7
    lexical_cap: float = 140
    content_window: int = 6000
    preview_error: float = 24
    recency_base: int = 20
    graph_window_min: int = 24
    required_base: float = 200
    expanded_base: float = 120


class SnippetConfig(BaseModel):
    """Snippet window around the first prompt-token hit."""

    before: int = 300
    after: int = 1200
    fallback_chars: int = 1600
    min_token_length: int = 3


class RetrievalConfig(BaseModel):
    """Budget defaults and scoring weights."""

    default_mode: ContextMode = ContextMode.BALANCED_GRAPH
    mode_max_files: dict[ContextMode, int] = Field(
        default_factory=lambda: {
            ContextMode.LIGHT: 24,
            ContextMode.BALANCED_GRAPH: 56,
            ContextMode.MAX: 90,
            ContextMode.STRICT_FULL: 120,
        }
    )
    default_max_chars: int = 120_000
    max_prompt_tokens: int = 48
    direct_weights: DirectSelectionWeights = Field(default_factory=DirectSelectionWeights)
    bundle_weights: BundleWeights = Field(default_factory=BundleWeights)
    snippet: SnippetConfig = Field(default_factory=SnippetConfig)

    def max_files_for(self, mode: ContextMode | str) -> int:
        """Default file budget for a mode (falls back to balanced_graph)."""
        try:
            mode = ContextMode(mode)
        except ValueError:
            mode = ContextMode.BALANCED_GRAPH
        if mode in self.mode_max_files:
            return self.mode_max_files[mode]
        return self.mode_max_files.get(ContextMode.BALANCED_GRAPH, 56)


class WorkspaceConfig(BaseModel):
    """Workspace snapshot loading configuration."""

    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "node_modules",
            "__pycache__",
            ".git",
            ".ctxbundle",
            "dist",
            "build",
            ".venv",
            "venv",
            "*.pyc",
            "*.so",
            "*.dylib",
            "*.dll",
            "*.exe",
            "*.min.js",
            "*.min.css",
            "*.map",
        ]
    )
    max_file_size_kb: int = 500


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Nearest directory at or above ``start`` (default: cwd) holding .ctxbundle/."""
    here = (start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if (candidate / CTXBUNDLE_DIR).is_dir():
            return candidate
    return None


def get_ctxbundle_dir(root: Path) -> Path:
    return root / CTXBUNDLE_DIR


def _config_path(root: Path) -> Path:
    return get_ctxbundle_dir(root) / CONFIG_FILE


def load_config(root: Path) -> ProjectConfig:
    """Read ``<root>/.ctxbundle/config.json``.

    A project without a config file gets defaults named after its directory.
    Unparseable JSON or values that fail validation raise ``ConfigError``.
    """
    path = _config_path(root)
    if not path.exists():
        return ProjectConfig(name=root.name, root_path=str(root))
    try:
        return ProjectConfig.model_validate(json.loads(path.read_text()))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def save_config(root: Path, config: ProjectConfig) -> None:
    path = _config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.model_dump(mode="json"), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Return a copy of ``config`` with one dotted key replaced.

    ``set_config_value(cfg, "retrieval.bundle_weights.preview_error", 30)``

    Unknown keys raise ``KeyError``; values the models reject (for example
    an unknown ``retrieval.default_mode``) raise pydantic ``ValidationError``.
    """
    *parents, leaf = key.split(".")
    data = config.model_dump(mode="json")
    node = data
    for part in parents:
        node = node.get(part) if isinstance(node, dict) else None
        if not isinstance(node, dict):
            raise KeyError(f"Invalid config key: {key}")
    if leaf not in node:
        raise KeyError(f"Invalid config key: {key}")
    node[leaf] = value
    return ProjectConfig.model_validate(data)
