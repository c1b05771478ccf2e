"""Custom exceptions for ctxbundle."""


class CtxBundleError(Exception):
    """Base exception for all ctxbundle errors."""


class ConfigError(CtxBundleError):
    """Configuration-related errors."""


class WorkspaceError(CtxBundleError):
    """Workspace loading errors."""


class AnalysisError(CtxBundleError):
    """Malformed workspace-analysis input."""

    def __init__(self, source: str, detail: str):
        super().__init__(f"Invalid workspace analysis in '{source}': {detail}")
        self.source = source
        self.detail = detail
