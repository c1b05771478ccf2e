"""Context retrieval and bundling.

Selects a budget-constrained set of workspace files for a generation request
and records why every file was selected or dropped.

Usage:
    from ctxbundle.context import BundleRequest, ContextBundler

    bundler = ContextBundler()
    bundle = bundler.build(BundleRequest(files=files, prompt="fix the navbar"))
    print(bundle.render())
"""

from ctxbundle.context.engine import ContextBundler, build_context_bundle
from ctxbundle.context.models import (
    BundleRequest,
    ContextBundle,
    ContextBundleActiveFile,
    ContextBundleFile,
    ContextMode,
    ContextRetrievalItem,
    ContextRetrievalTrace,
    ManifestEntry,
    ManifestType,
    WorkspaceAnalysis,
)

__all__ = [
    "BundleRequest",
    "ContextBundle",
    "ContextBundleActiveFile",
    "ContextBundleFile",
    "ContextBundler",
    "ContextMode",
    "ContextRetrievalItem",
    "ContextRetrievalTrace",
    "ManifestEntry",
    "ManifestType",
    "WorkspaceAnalysis",
    "build_context_bundle",
]
