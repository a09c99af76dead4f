"""CLI interface for hedgehog using Typer framework."""

import shlex
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from hedgehog import __description__, __version__
from hedgehog.config import Engine, HedgehogConfig, StoreKind, load_config
from hedgehog.errors import ArtifactIoError
from hedgehog.graph.svg import SvgRenderer
from hedgehog.logging_config import configure_logging
from hedgehog.messages import Clear
from hedgehog.orchestrator import AnalysisOptions, AnalysisOrchestrator
from hedgehog.viewport import Viewport
from hedgehog.workspace import Workspace

app = typer.Typer(
    name="hedgehog",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option("-c", "--config", help="Configuration file path (default: search for .hedgehog.json)"),
]
SvgOption = Annotated[Path | None, typer.Option("--svg", help="Write the rendered view to this SVG file")]

SESSION_HELP = """Commands:
  open PATH     select a workspace folder
  run           run the analysis on the selected workspace
  wait          block until the running analysis finishes
  clear         clear results
  load FILE     load an existing artifact
  zoom N        zoom N wheel steps (negative zooms out)
  pan DX DY     drag the view
  fit           fit the graph to the view
  save FILE     write the current view as SVG
  files         list source files of the workspace
  status        show current state
  quit          leave the session"""


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"hedgehog version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=version_callback, help="Show version and exit")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """hedgehog - Call graph viewer for the mr_hedgehog analyzer."""
    if verbose:
        configure_logging("debug")


def _load_config(config_path: Path | None) -> HedgehogConfig:
    try:
        config = load_config(config_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(config.logging.level)
    return config


def _new_viewport(config: HedgehogConfig) -> Viewport:
    return Viewport(config.viewport, config.layout)


def _print_view(viewport: Viewport, show_nodes: bool = False) -> None:
    """Print the viewport state, and optionally its node table."""
    if viewport.is_placeholder:
        if viewport.placeholder_text:
            console.print(f"[dim]{escape(viewport.placeholder_text)}[/dim]")
        console.print(f"[yellow]{escape(viewport.status)}[/yellow]")
        return

    console.print(
        f"[green]{viewport.status}[/green] "
        f"{len(viewport.model.nodes)} nodes, {len(viewport.model.edges)} edges "
        f"[dim](scale {viewport.view.scale:.3f})[/dim]"
    )
    if not show_nodes:
        return

    table = Table(title="Call Graph Nodes")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Id", style="cyan")
    table.add_column("Label", style="white")
    table.add_column("Position", justify="right")
    for index, node in enumerate(viewport.model.nodes.values()):
        table.add_row(str(index), escape(node.id), escape(node.display_label), f"{node.x:g}, {node.y:g}")
    console.print(table)


def _write_svg(viewport: Viewport, config: HedgehogConfig, svg: Path) -> None:
    renderer = SvgRenderer(grid_size=config.viewport.grid_size)
    path = renderer.write(viewport, svg)
    console.print(f"[blue]SVG written:[/blue] {path}")


@app.command()
def view(
    artifact: Annotated[Path, typer.Argument(help="DOT artifact produced by mr_hedgehog")],
    svg: SvgOption = None,
    zoom: Annotated[int, typer.Option("--zoom", help="Wheel steps applied after fitting (negative zooms out)")] = 0,
    pan_x: Annotated[float, typer.Option("--pan-x", help="Horizontal drag in view pixels")] = 0.0,
    pan_y: Annotated[float, typer.Option("--pan-y", help="Vertical drag in view pixels")] = 0.0,
    nodes: Annotated[bool, typer.Option("--nodes/--no-nodes", help="List laid-out nodes")] = True,
    config: ConfigOption = None,
):
    """Load an existing call graph artifact and render it."""
    hedgehog_config = _load_config(config)
    viewport = _new_viewport(hedgehog_config)

    viewport.load(artifact)
    if not viewport.is_placeholder:
        viewport.zoom(zoom)
        viewport.pan(pan_x, pan_y)
    _print_view(viewport, show_nodes=nodes)

    if svg:
        _write_svg(viewport, hedgehog_config, svg)

    if isinstance(viewport.last_error, ArtifactIoError):
        raise typer.Exit(1)


@app.command()
def analyze(
    workspace: Annotated[Path, typer.Argument(help="Rust workspace folder or its Cargo.toml")],
    engine: Annotated[Engine | None, typer.Option("--engine", help="Analysis engine")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Artifact path for the backend")] = None,
    store: Annotated[StoreKind | None, typer.Option("--store", help="Backend symbol store")] = None,
    expand_paths: Annotated[bool, typer.Option("--expand-paths", help="Ask the backend to expand call paths")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Run the backend in debug mode")] = False,
    executable: Annotated[Path | None, typer.Option("--backend", help="Path to the mr_hedgehog binary")] = None,
    svg: SvgOption = None,
    config: ConfigOption = None,
):
    """Run mr_hedgehog on a workspace and show the resulting call graph."""
    hedgehog_config = _load_config(config)
    backend = hedgehog_config.backend
    if engine is not None:
        backend.engine = engine.value
    if output is not None:
        backend.output = str(output)
    if store is not None:
        backend.store = store.value
    if executable is not None:
        backend.executable = str(executable)
    backend.expand_paths = backend.expand_paths or expand_paths
    backend.debug = backend.debug or debug

    viewport = _new_viewport(hedgehog_config)
    with AnalysisOrchestrator(viewport.handle, backend) as orchestrator:
        try:
            selected = orchestrator.select_workspace(workspace)
        except FileNotFoundError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

        console.print(f"[dim]{orchestrator.status}[/dim]")
        console.print(f"[blue]Analyzing:[/blue] {selected.manifest}")
        with console.status("Running analysis..."):
            orchestrator.start(options=AnalysisOptions.from_config(backend))
            orchestrator.wait()

    _print_view(viewport, show_nodes=True)
    if svg:
        _write_svg(viewport, hedgehog_config, svg)

    if orchestrator.last_error is not None or isinstance(viewport.last_error, ArtifactIoError):
        raise typer.Exit(1)


@app.command()
def files(
    workspace: Annotated[Path, typer.Argument(help="Rust workspace folder")],
):
    """List the Rust source files of a workspace."""
    try:
        selected = Workspace.select(workspace)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    sources = selected.source_files()
    console.print(f"[green]{selected.describe()}[/green]")
    for path in sources:
        console.print(f"  {path.relative_to(selected.root)}")


@app.command()
def session(
    workspace: Annotated[Path | None, typer.Argument(help="Workspace to select on start")] = None,
    config: ConfigOption = None,
):
    """Interactive session: select, run, clear and navigate the graph."""
    hedgehog_config = _load_config(config)
    viewport = _new_viewport(hedgehog_config)
    renderer = SvgRenderer(grid_size=hedgehog_config.viewport.grid_size)

    def on_trigger(enabled: bool) -> None:
        console.print("[dim]run: enabled[/dim]" if enabled else "[dim]run: disabled[/dim]")

    with AnalysisOrchestrator(viewport.handle, hedgehog_config.backend, on_trigger) as orchestrator:
        if workspace is not None:
            _session_open(orchestrator, str(workspace))
        _print_view(viewport)

        while True:
            orchestrator.process_events()
            try:
                line = Prompt.ask("[bold]hedgehog[/bold]", console=console, default="", show_default=False)
            except (EOFError, KeyboardInterrupt):
                break
            try:
                words = shlex.split(line)
            except ValueError as e:
                console.print(f"[red]Error:[/red] {e}")
                continue
            if not words:
                continue
            if words[0] in ("quit", "exit"):
                break
            _session_command(words, orchestrator, viewport, renderer)
            orchestrator.process_events()


def _session_open(orchestrator: AnalysisOrchestrator, path: str) -> None:
    try:
        orchestrator.select_workspace(path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        return
    console.print(f"[green]{orchestrator.status}[/green]")


def _session_command(
    words: list[str],
    orchestrator: AnalysisOrchestrator,
    viewport: Viewport,
    renderer: SvgRenderer,
) -> None:
    command, args = words[0], words[1:]
    try:
        if command == "open" and len(args) == 1:
            _session_open(orchestrator, args[0])
        elif command == "run":
            if not orchestrator.trigger_enabled:
                reason = "analysis already running" if orchestrator.is_running else "select a workspace first"
                console.print(f"[yellow]Run ignored:[/yellow] {reason}")
            elif orchestrator.start():
                console.print(f"[blue]{orchestrator.status}[/blue]")
            else:
                _print_view(viewport)
        elif command == "wait":
            orchestrator.wait()
            _print_view(viewport)
        elif command == "clear":
            viewport.handle(Clear())
            _print_view(viewport)
        elif command == "load" and len(args) == 1:
            viewport.load(args[0])
            _print_view(viewport)
        elif command == "zoom" and len(args) == 1:
            viewport.zoom(int(args[0]))
            _print_view(viewport)
        elif command == "pan" and len(args) == 2:
            viewport.pan(float(args[0]), float(args[1]))
            _print_view(viewport)
        elif command == "fit":
            viewport.fit_to_view()
            _print_view(viewport)
        elif command == "save" and len(args) == 1:
            console.print(f"[blue]SVG written:[/blue] {renderer.write(viewport, args[0])}")
        elif command == "files":
            if orchestrator.workspace is None:
                console.print("[yellow]No workspace selected[/yellow]")
            else:
                for path in orchestrator.workspace.source_files():
                    console.print(f"  {path.relative_to(orchestrator.workspace.root)}")
        elif command == "status":
            console.print(f"[dim]backend:[/dim] {orchestrator.state.value} {orchestrator.status}")
            _print_view(viewport)
        elif command == "help":
            console.print(SESSION_HELP)
        else:
            console.print(f"[red]Unknown command:[/red] {' '.join(words)} [dim](try 'help')[/dim]")
    except (ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")


if __name__ == "__main__":
    app()
