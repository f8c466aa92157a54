"""Command-line interface using Typer."""

from collections.abc import Generator
from contextlib import contextmanager
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from knowledge_portal import __version__
from knowledge_portal.logging import setup_logging

# Setup logging
setup_logging()

app = typer.Typer(
    name="knowledge-portal",
    help="Knowledge Portal - Course lesson training pipeline CLI",
    add_completion=False,
)

console = Console()

def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Knowledge Portal v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Knowledge Portal - Manage which course lessons train the community knowledge base."""
    pass


@contextmanager
def _services() -> Generator[tuple, None, None]:
    """Aggregator and lifecycle service over a fresh session and the configured adapters."""
    from knowledge_portal.db.session import get_session_context
    from knowledge_portal.services import (
        CourseAggregator,
        LessonLifecycleService,
        TrainingStatusStore,
    )
    from knowledge_portal.services.providers import (
        get_catalog_adapter,
        get_notifier,
        get_storage_adapter,
        get_summary_generator,
    )

    with get_session_context() as session:
        store = TrainingStatusStore(session)
        catalog = get_catalog_adapter()
        yield (
            CourseAggregator(catalog=catalog, store=store),
            LessonLifecycleService(
                store=store,
                catalog=catalog,
                storage=get_storage_adapter(),
                notifier=get_notifier(),
                summary=get_summary_generator(),
            ),
        )


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error: {message}[/bold red]")
    raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"Knowledge Portal v{__version__}")


@app.command()
def courses(
    company_id: str = typer.Argument(..., help="Company (tenant) ID"),
) -> None:
    """Show courses with per-course training progress."""
    from knowledge_portal.utils import run_async

    with _services() as (aggregator, _):
        view = run_async(aggregator.merge_view(company_id))

    if view.catalog_error:
        console.print(f"[bold yellow]{view.catalog_error}[/bold yellow]")

    if not view.courses:
        console.print("[dim]No courses found.[/dim]")
        return

    table = Table(title=f"Courses for {company_id}")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Video Lessons", justify="right")
    table.add_column("Trained", justify="right", style="green")
    table.add_column("In Progress", justify="right")
    table.add_column("Failed", justify="right", style="red")

    for course in view.courses:
        stats = course.stats
        in_progress = stats.transcribing + stats.transcribed + stats.training
        table.add_row(
            course.id,
            course.title,
            str(stats.total),
            str(stats.trained),
            str(in_progress),
            str(stats.transcribe_failed + stats.train_failed),
        )

    console.print(table)
    if view.orphaned_lessons:
        console.print(
            f"[yellow]{len(view.orphaned_lessons)} trained lesson(s) no longer in the catalog. "
            f"See 'knowledge-portal orphans {company_id}'[/yellow]"
        )


@app.command()
def orphans(
    company_id: str = typer.Argument(..., help="Company (tenant) ID"),
) -> None:
    """List trained lessons that are no longer in the catalog."""
    from knowledge_portal.utils import run_async

    with _services() as (aggregator, _):
        view = run_async(aggregator.merge_view(company_id))

    if view.catalog_error:
        _fail(f"Cannot detect orphans: {view.catalog_error}")

    if not view.orphaned_lessons:
        console.print("[dim]No orphaned lessons.[/dim]")
        return

    table = Table(title="Orphaned Lessons")
    table.add_column("Lesson ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Course ID", style="dim")
    table.add_column("Trained")
    table.add_column("Kept", style="green")

    for record in view.orphaned_lessons:
        table.add_row(
            record.lesson_id,
            record.title,
            record.course_id,
            record.trained_at.strftime("%Y-%m-%d") if record.trained_at else "-",
            "Yes" if record.is_orphaned_kept else "No",
        )

    console.print(table)


@app.command()
def untrain(
    company_id: str = typer.Argument(..., help="Company (tenant) ID"),
    lesson_id: str = typer.Argument(..., help="Lesson ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a trained lesson's artifacts and training record."""
    from knowledge_portal.domain import PortalError
    from knowledge_portal.utils import run_async

    if not yes:
        typer.confirm(f"Untrain lesson {lesson_id} and delete its artifacts?", abort=True)

    try:
        with _services() as (_, lifecycle):
            record = run_async(lifecycle.untrain(company_id, None, lesson_id))
    except PortalError as e:
        if e.details.get("files_attempted"):
            console.print(f"[dim]Files: {', '.join(e.details['files_attempted'])}[/dim]")
        _fail(e.message)

    console.print(f"[bold green]✓ Untrained '{record.title}'[/bold green]")


@app.command("keep-orphaned")
def keep_orphaned(
    company_id: str = typer.Argument(..., help="Company (tenant) ID"),
    lesson_id: str = typer.Argument(..., help="Lesson ID"),
) -> None:
    """Keep a trained lesson that was removed from the catalog."""
    from knowledge_portal.domain import PortalError
    from knowledge_portal.utils import run_async

    try:
        with _services() as (_, lifecycle):
            record = run_async(lifecycle.keep_orphaned(company_id, lesson_id))
    except PortalError as e:
        _fail(e.message)

    console.print(f"[bold green]✓ Keeping '{record.title}'[/bold green]")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Start the API server."""
    import uvicorn

    from knowledge_portal.config import settings

    console.print("[bold blue]Starting API server...[/bold blue]")
    uvicorn.run(
        "knowledge_portal.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload or settings.api_reload,
    )


if __name__ == "__main__":
    app()
