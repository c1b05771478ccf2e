"""Command-line interface for ctxbundle."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.logging import RichHandler

from ctxbundle import __version__
from ctxbundle.config import (
    ProjectConfig,
    find_project_root,
    load_config,
    save_config,
    set_config_value,
)
from ctxbundle.exceptions import AnalysisError, CtxBundleError
from ctxbundle.ui.console import Console

console = Console()

_MODES = ["light", "balanced_graph", "max", "strict_full"]


def _get_project_root(path: str | None = None) -> Path:
    """Find the project root or error."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        return root

    root = find_project_root()
    if root is None:
        console.error(
            "No ctxbundle project found. Run 'ctxbundle init' first, "
            "or specify a path with --path."
        )
        sys.exit(1)
    return root


def _load(path: str | None) -> tuple[Path, ProjectConfig, list]:
    """Resolve the root, load its config and read the workspace snapshot."""
    from ctxbundle.workspace import load_workspace

    root = _get_project_root(path)
    try:
        config = load_config(root)
        files = load_workspace(root, config.workspace)
    except CtxBundleError as e:
        console.error(str(e))
        sys.exit(1)
    return root, config, files


def _load_analysis(analysis_path: str):
    from ctxbundle.context.models import WorkspaceAnalysis

    try:
        data = json.loads(Path(analysis_path).read_text())
        return WorkspaceAnalysis.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise AnalysisError(analysis_path, str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="ctxbundle")
@click.option("--verbose", "-v", is_flag=True, help="Log engine decisions to stderr.")
def main(verbose: bool):
    """ctxbundle - pick the right files for an LLM prompt, within budget."""
    if verbose:
        logger = logging.getLogger("ctxbundle")
        logger.setLevel(logging.DEBUG)
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            logger.addHandler(RichHandler(show_path=False))


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
def init(path: str | None):
    """Write a default configuration to .ctxbundle/config.json."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    console.banner()
    console.info(f"Initializing ctxbundle for: {root}")

    try:
        config = load_config(root)
    except CtxBundleError as e:
        console.error(str(e))
        sys.exit(1)
    config.name = root.name
    config.root_path = str(root)
    save_config(root, config)
    console.success("Configuration saved to .ctxbundle/")


@main.command()
@click.argument("prompt", default="")
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--active", "-a", default=None, help="Path of the file open in the editor.")
@click.option("--error", "-e", "errors", multiple=True, help="Recent preview error line (repeatable).")
@click.option("--mode", "-m", type=click.Choice(_MODES), default=None, help="Retrieval mode.")
@click.option("--max-files", type=int, default=None, help="File budget (default depends on mode).")
@click.option("--max-chars", type=int, default=None, help="Character budget.")
@click.option(
    "--analysis", type=click.Path(exists=True, dir_okay=False), default=None,
    help="Workspace analysis JSON with required/expanded read sets (strict_full).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the bundle as JSON.")
@click.option("--render", is_flag=True, help="Print the rendered context text.")
def bundle(
    prompt: str, path: str | None, active: str | None, errors: tuple[str, ...],
    mode: str | None, max_files: int | None, max_chars: int | None,
    analysis: str | None, as_json: bool, render: bool,
):
    """Build a budgeted context bundle for PROMPT.

    Examples:

        ctxbundle bundle "fix the navbar overlap" --active src/Navbar.tsx

        ctxbundle bundle "add dark mode" --mode max --max-chars 60000

        ctxbundle bundle "finish the checkout" --mode strict_full --analysis analysis.json
    """
    from ctxbundle.context.engine import ContextBundler
    from ctxbundle.context.models import BundleRequest

    _, config, files = _load(path)
    try:
        workspace_analysis = _load_analysis(analysis) if analysis else None
    except AnalysisError as e:
        console.error(str(e))
        sys.exit(1)

    bundler = ContextBundler(config.retrieval)
    result = bundler.build(
        BundleRequest(
            files=files,
            active_file=active,
            recent_preview_errors=list(errors),
            prompt=prompt,
            mode=mode,
            max_files=max_files,
            max_chars=max_chars,
            workspace_analysis=workspace_analysis,
        )
    )

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return
    if render:
        click.echo(result.render())
        return

    console.show_trace(result.retrieval_trace)
    if result.active_file:
        console.info(f"Active file: {result.active_file.path}")
    if not result.files:
        console.warning("No files selected.")


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--active", "-a", default=None, help="Path of the file open in the editor.")
@click.option("--error", "-e", "errors", multiple=True, help="Recent preview error line (repeatable).")
@click.option("--mode", "-m", type=click.Choice(_MODES), default=None, help="Retrieval mode.")
@click.option("--max-files", type=int, default=None, help="Number of files to keep.")
@click.option("--json", "as_json", is_flag=True, help="Print the trace as JSON.")
def trace(
    path: str | None, active: str | None, errors: tuple[str, ...],
    mode: str | None, max_files: int | None, as_json: bool,
):
    """Rank files by dependency-graph signals only (no prompt, no char budget)."""
    from ctxbundle.context.engine import ContextBundler

    _, config, files = _load(path)
    result = ContextBundler(config.retrieval).trace(
        files, active_file=active, recent_preview_errors=list(errors),
        mode=mode, max_items=max_files,
    )
    if as_json:
        click.echo(result.model_dump_json(indent=2))
    else:
        console.show_trace(result)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
def graph(path: str | None):
    """Show the inferred file dependency graph."""
    from ctxbundle.graph.builder import DependencyGraphBuilder

    _, _, files = _load(path)
    console.show_graph(DependencyGraphBuilder().build(files))


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--json", "as_json", is_flag=True, help="Print the manifest as JSON.")
def manifest(path: str | None, as_json: bool):
    """List every workspace file with its type, size and hash."""
    from ctxbundle.context.manifest import build_manifest

    _, _, files = _load(path)
    entries = build_manifest(files)
    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
    else:
        console.show_manifest(entries)


# =========================================================================
# Config Management
# =========================================================================

@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage ctxbundle configuration."""
    root = _get_project_root(path)
    try:
        config = load_config(root)
    except CtxBundleError as e:
        console.error(str(e))
        sys.exit(1)

    if action == "show":
        console.console.print_json(json.dumps(config.model_dump(mode="json"), indent=2))
    elif action == "get":
        if not key:
            console.error("Usage: ctxbundle config get <key>")
            sys.exit(1)
        data = config.model_dump(mode="json")
        for part in key.split("."):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                console.error(f"Unknown key: {key}")
                sys.exit(1)
        console.console.print(f"{key} = {data}")
    elif action == "set":
        if not key or value is None:
            console.error("Usage: ctxbundle config set <key> <value>")
            sys.exit(1)
        try:
            try:
                parsed_value = json.loads(value)
            except json.JSONDecodeError:
                parsed_value = value

            config = set_config_value(config, key, parsed_value)
            save_config(root, config)
            console.success(f"Set {key} = {parsed_value}")
        except KeyError:
            console.error(f"Unknown config key: {key}")
            sys.exit(1)
        except ValidationError as e:
            console.error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
            sys.exit(1)


if __name__ == "__main__":
    main()
