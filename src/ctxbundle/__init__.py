"""ctxbundle - budgeted context retrieval and bundling for code workspaces."""

__version__ = "0.1.0"
