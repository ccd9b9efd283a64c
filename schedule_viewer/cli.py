"""Command-line interface for watching schedule solver jobs."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from solver_client import SolverClient, SolverClientError

from .config import ViewerConfig
from .html_schedule_generator import save_html_timeline
from .layout import MAX_ZOOM, MIN_ZOOM
from .models import RefreshMode, ViewMode
from .polling import PollingController
from .schedule_printer import print_schedule
from .session import ViewerSession

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="viewer",
    help="Live timeline view of schedule solver jobs",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@app.callback()
def main_options(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose/debug logging"),
    ] = False,
) -> None:
    setup_logging(verbose)


def _load_config(url: str | None) -> ViewerConfig:
    try:
        config = ViewerConfig.from_env()
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1)
    if url:
        config.base_url = url
    return config


def _make_client(config: ViewerConfig) -> SolverClient:
    return SolverClient(base_url=config.base_url, timeout=config.request_timeout)


def _resolve_job(client: SolverClient, job_id: str | None) -> str:
    """Use the given job, or the first one the backend knows about."""
    if job_id:
        return job_id
    jobs = client.list_jobs()
    if not jobs:
        typer.echo("No solver jobs found", err=True)
        raise typer.Exit(1)
    return jobs[0]


UrlOption = Annotated[
    str | None,
    typer.Option("--url", help="Solver backend base URL (default: $SOLVER_URL)"),
]
ViewOption = Annotated[
    ViewMode | None,
    typer.Option("--view", help="Group rows by employee or by line"),
]
ZoomOption = Annotated[
    float | None,
    typer.Option("--zoom", "-z", help="Zoom factor", min=MIN_ZOOM, max=MAX_ZOOM),
]
OutputOption = Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Output HTML file path"),
]
TitleOption = Annotated[
    str,
    typer.Option("--title", help="Title for the HTML page"),
]


@app.command("jobs")
def jobs(url: UrlOption = None) -> None:
    """List the solver jobs known to the backend."""
    client = _make_client(_load_config(url))
    job_ids = client.list_jobs()
    if not job_ids:
        typer.echo("No solver jobs found")
        return
    for job_id in job_ids:
        typer.echo(job_id)


@app.command("status")
def status(
    job_id: Annotated[str, typer.Argument(help="Solver job id")],
    url: UrlOption = None,
) -> None:
    """Show score and solver status of a job."""
    client = _make_client(_load_config(url))
    try:
        snapshot = client.get_status(job_id)
    except SolverClientError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Status: {snapshot.solver_status or '-'}")
    typer.echo(f"Score: {snapshot.score or '-'}")


@app.command("stop")
def stop(
    job_id: Annotated[str, typer.Argument(help="Solver job id")],
    url: UrlOption = None,
) -> None:
    """Terminate a solver job early."""
    client = _make_client(_load_config(url))
    if client.stop_solving(job_id):
        typer.echo(f"Stopped {job_id}")
    else:
        typer.echo(f"Could not stop {job_id}", err=True)


@app.command("render")
def render(
    job_id: Annotated[str | None, typer.Argument(help="Solver job id (default: first listed job)")] = None,
    output: OutputOption = None,
    view: ViewOption = None,
    zoom: ZoomOption = None,
    title: TitleOption = "Schedule Timeline",
    url: UrlOption = None,
) -> None:
    """Fetch a job's schedule once and write it as an HTML timeline."""
    config = _load_config(url)
    client = _make_client(config)
    job_id = _resolve_job(client, job_id)

    try:
        snapshot = client.get_schedule(job_id)
    except SolverClientError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    session = ViewerSession(
        view_mode=view or config.view_mode,
        zoom_factor=zoom or config.zoom_factor,
        analyzer=client.analyze,
    )
    session.on_snapshot(job_id, snapshot)

    output = output or config.output
    save_html_timeline(
        frame=session.frame,
        file_path=output,
        report=session.report,
        snapshot=snapshot,
        job_id=job_id,
        title=title,
    )
    typer.echo(f"HTML timeline saved to: {output.absolute()}")


@app.command("summary")
def summary(
    job_id: Annotated[str | None, typer.Argument(help="Solver job id (default: first listed job)")] = None,
    view: ViewOption = None,
    url: UrlOption = None,
) -> None:
    """Print a text summary of a job's current schedule."""
    config = _load_config(url)
    client = _make_client(config)
    job_id = _resolve_job(client, job_id)
    try:
        snapshot = client.get_schedule(job_id)
    except SolverClientError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    session = ViewerSession(view_mode=view or config.view_mode, analyzer=client.analyze)
    session.on_snapshot(job_id, snapshot)
    print_schedule(session.frame, session.report, snapshot, title=f"Job {job_id}")


def _watch(
    client: SolverClient,
    config: ViewerConfig,
    job_id: str,
    output: Path,
    title: str,
) -> None:
    session = ViewerSession(
        view_mode=config.view_mode,
        zoom_factor=config.zoom_factor,
        analyzer=client.analyze,
    )
    refresh_seconds = max(1, config.poll_interval_ms // 1000)

    def write_page(current: ViewerSession) -> None:
        save_html_timeline(
            frame=current.frame,
            file_path=output,
            report=current.report,
            snapshot=current.rendered_snapshot,
            job_id=current.job_id,
            title=title,
            refresh_seconds=refresh_seconds,
        )
        logger.debug(f"Wrote {output}")

    session.add_listener(write_page)
    controller = PollingController(client, session, refresh_mode=config.refresh_mode)

    async def run() -> None:
        controller.start(job_id, config.poll_interval_ms)
        await controller.wait()
        await session.wait_for_analysis()

    typer.echo(f"Watching {job_id}, writing {output.absolute()} (Ctrl-C to stop)")
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        typer.echo("\nStopped watching")
        return
    typer.echo(f"Job {job_id} finished solving; last timeline kept in {output}")


@app.command("watch")
def watch(
    job_id: Annotated[str | None, typer.Argument(help="Solver job id (default: first listed job)")] = None,
    output: OutputOption = None,
    interval: Annotated[
        int | None,
        typer.Option("--interval", "-i", help="Poll interval in milliseconds", min=1),
    ] = None,
    refresh_mode: Annotated[
        RefreshMode | None,
        typer.Option("--refresh-mode", help="Keep polling always or only while solving"),
    ] = None,
    view: ViewOption = None,
    zoom: ZoomOption = None,
    title: TitleOption = "Schedule Timeline",
    url: UrlOption = None,
) -> None:
    """Poll a job and rewrite the HTML timeline whenever a stable change arrives."""
    config = _load_config(url)
    config.poll_interval_ms = interval or config.poll_interval_ms
    config.refresh_mode = refresh_mode or config.refresh_mode
    config.view_mode = view or config.view_mode
    config.zoom_factor = zoom or config.zoom_factor

    client = _make_client(config)
    job_id = _resolve_job(client, job_id)
    _watch(client, config, job_id, output or config.output, title)


@app.command("solve")
def solve(
    watch_job: Annotated[
        bool,
        typer.Option("--watch", "-w", help="Watch the new job until it stops solving"),
    ] = False,
    output: OutputOption = None,
    url: UrlOption = None,
) -> None:
    """Start a solver job on the backend's default problem."""
    config = _load_config(url)
    client = _make_client(config)
    try:
        job_id = client.start_solving()
    except SolverClientError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(job_id)

    if watch_job:
        config.refresh_mode = RefreshMode.ONLY_WHEN_SOLVING
        _watch(client, config, job_id, output or config.output, "Schedule Timeline")


if __name__ == "__main__":
    app()
