"""CLI commands for contentflow using Typer and Rich.

Implements 4 CLI commands:
- create: Insert a new content job (local tooling; jobs normally come from upstream)
- emit: Apply one worker event to a job, exactly as the webhook would
- status: Show detailed job information
- list: List recent jobs in a table
"""

import asyncio
import json
import logging
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from contentflow import configure_logging
from contentflow.config import settings
from contentflow.db import async_session, init_database
from contentflow.orchestrator import (
    EventDispatcher,
    IllegalTransition,
    JobNotFound,
    JobStatus,
    SqlJobStore,
    StorageFailure,
)
from contentflow.schemas.events import WebhookPayload

app = typer.Typer(name="contentflow", help="Webhook-driven status orchestration for content jobs")
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(settings.logging.level, "--log-level", help="Logging level"),
):
    """Configure logging before any command runs."""
    try:
        configure_logging(log_level)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(code=1)


@app.command()
def create(
    status: JobStatus = typer.Option(JobStatus.PENDING, "--status", "-s", help="Initial status"),
    job_id: Optional[str] = typer.Option(None, "--id", help="Explicit job id (default: random UUID)"),
):
    """Create a new content job."""
    asyncio.run(_create_async(status, job_id))


async def _create_async(status: JobStatus, job_id: Optional[str]):
    await init_database()
    store = SqlJobStore(async_session)
    try:
        job = await store.create(status=status, job_id=job_id)
    except StorageFailure as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(code=1)

    console.print(f"[green]Created job:[/green] {job.id}")


@app.command()
def emit(
    job_id: str = typer.Argument(..., help="Content job id"),
    event: str = typer.Argument(..., help="Event type, e.g. script_generated"),
    data: str = typer.Option("{}", "--data", "-d", help="Event data as a JSON object"),
    strict: bool = typer.Option(
        settings.webhook.strict_transitions, "--strict/--permissive",
        help="Reject transitions from unexpected statuses",
    ),
):
    """Apply a worker event to a job, as if delivered by webhook."""
    try:
        parsed = json.loads(data)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] --data is not valid JSON: {e}")
        raise typer.Exit(code=1)

    try:
        payload = WebhookPayload(event=event, content_job_id=job_id, data=parsed)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        console.print(f"[red]Error:[/red] Invalid event: {problems}")
        raise typer.Exit(code=1)

    asyncio.run(_emit_async(payload, strict))


async def _emit_async(payload: WebhookPayload, strict: bool):
    await init_database()
    dispatcher = EventDispatcher(
        SqlJobStore(async_session),
        strict=strict,
        logger=logging.getLogger("contentflow.cli"),
    )

    try:
        ack = await dispatcher.dispatch(payload)
    except JobNotFound as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(code=1)
    except IllegalTransition as e:
        console.print(f"[red]✗ Rejected:[/red] {str(e)}")
        raise typer.Exit(code=1)
    except StorageFailure as e:
        console.print(f"[red]✗ Not persisted:[/red] {str(e)}")
        raise typer.Exit(code=1)

    if ack.status:
        color = _get_status_color(ack.status)
        console.print(f"[green]✓[/green] {payload.content_job_id} -> [{color}]{ack.status}[/{color}]")
    else:
        console.print(f"[yellow]{ack.message}[/yellow] (status unchanged)")


@app.command()
def status(
    job_id: str = typer.Argument(..., help="Content job id"),
):
    """Show detailed job status and stage outputs."""
    asyncio.run(_status_async(job_id))


async def _status_async(job_id: str):
    await init_database()
    try:
        job = await SqlJobStore(async_session).get(job_id)
    except StorageFailure as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(code=1)

    if job is None:
        console.print(f"[red]Error:[/red] Job not found: {job_id}")
        raise typer.Exit(code=1)

    status_color = _get_status_color(job.status.value)
    info_lines = [
        f"[bold]ID:[/bold] {job.id}",
        f"[bold]Status:[/bold] [{status_color}]{job.status.value}[/{status_color}]",
    ]
    if job.created_at:
        info_lines.append(f"[bold]Created:[/bold] {job.created_at.strftime('%Y-%m-%d %H:%M:%S')}")
    if job.updated_at:
        info_lines.append(f"[bold]Updated:[/bold] {job.updated_at.strftime('%Y-%m-%d %H:%M:%S')}")

    if job.title:
        info_lines.append(f"[bold]Title:[/bold] {job.title}")
    if job.script:
        script_display = job.script if len(job.script) <= 80 else job.script[:77] + "..."
        info_lines.append(f"[bold]Script:[/bold] {script_display}")
    if job.audio_url:
        info_lines.append(f"[bold]Audio:[/bold] {job.audio_url}")
    if job.video_url:
        info_lines.append(f"[bold]Video:[/bold] {job.video_url}")
    if job.published_video_id:
        info_lines.append(f"[bold]Published:[/bold] [green]{job.published_video_id}[/green]")
    if job.status == JobStatus.FAILED and job.error_message:
        info_lines.append(f"[bold]Error:[/bold] [red]{job.error_message}[/red]")

    console.print(Panel(
        "\n".join(info_lines),
        title="[bold]Job Status[/bold]",
        border_style="blue",
    ))


@app.command(name="list")
def list_jobs(
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum number of jobs to show"),
):
    """List recent content jobs."""
    asyncio.run(_list_async(limit))


async def _list_async(limit: int):
    await init_database()
    try:
        jobs = await SqlJobStore(async_session).list_recent(limit=limit)
    except StorageFailure as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise typer.Exit(code=1)

    if not jobs:
        console.print("[yellow]No jobs found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Created")

    for job in jobs:
        title_display = job.title or ""
        if len(title_display) > 50:
            title_display = title_display[:47] + "..."
        status_color = _get_status_color(job.status.value)
        created_display = job.created_at.strftime("%Y-%m-%d %H:%M") if job.created_at else ""
        table.add_row(
            job.id,
            title_display,
            f"[{status_color}]{job.status.value}[/{status_color}]",
            created_display,
        )

    console.print(table)


def _get_status_color(status: str) -> str:
    """Get Rich color for a job status.

    Color coding:
    - COMPLETED: green
    - FAILED: red
    - in-progress states: yellow
    - PENDING: dim
    """
    if status == JobStatus.COMPLETED.value:
        return "green"
    elif status == JobStatus.FAILED.value:
        return "red"
    elif status == JobStatus.PENDING.value:
        return "dim"
    elif status in {s.value for s in JobStatus}:
        return "yellow"
    else:
        return "white"


if __name__ == "__main__":
    app()
