"""CLI command for extracting timestamped recipe steps from a YouTube video."""

from __future__ import annotations

import json
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeRemainingColumn
from rich.table import Table

from cheffy.models.recipe import ExtractionResult
from cheffy.services.metadata import YtDlpDurationSource
from cheffy.services.pipeline import RecipeStepService
from cheffy.utils.progress import PipelineStage, ProgressUpdate
from cheffy.utils.validation import InvalidYouTubeURLError


class ParseExitCode:
    """Mapping of meaningful CLI exit codes."""

    SUCCESS = 0
    INVALID_INPUT = 1
    NEEDS_DURATION = 2
    PROCESSING_ERROR = 4


StageRanges = dict[PipelineStage, tuple[int, int]]

STAGE_RANGES: StageRanges = {
    PipelineStage.RESOLVING: (0, 5),
    PipelineStage.ACQUIRING: (5, 50),
    PipelineStage.CHAPTERS: (50, 55),
    PipelineStage.TRANSCRIPT: (55, 65),
    PipelineStage.AGGRESSIVE: (65, 72),
    PipelineStage.LENIENT: (72, 78),
    PipelineStage.SYNTHESIZING: (78, 85),
    PipelineStage.FINALIZING: (85, 100),
    PipelineStage.COMPLETE: (100, 100),
}


def build_service(console: Console, *, probe_duration: bool) -> RecipeStepService:
    """Create the extraction service used by the ``parse-youtube`` command."""

    duration_source = YtDlpDurationSource(console=console) if probe_duration else None
    return RecipeStepService(console=console, duration_source=duration_source)


def register(app: typer.Typer, console: Console) -> None:
    """Register the recipe-step extraction command."""

    @app.command("parse-youtube")
    def parse_youtube(
        url: str = typer.Argument(..., help="YouTube video URL or 11-character video id"),
        duration: Optional[float] = typer.Option(
            None, "--duration", "-d", help="Known video duration in seconds"
        ),
        probe_duration: bool = typer.Option(
            False, "--probe-duration", help="Look the duration up with yt-dlp when not provided"
        ),
        json_output: bool = typer.Option(False, "--json", help="Print the result as JSON"),
        quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress progress and log output"),
    ) -> None:
        service_console = Console(stderr=True, quiet=quiet or json_output)
        service = build_service(service_console, probe_duration=probe_duration)

        progress: Optional[Progress] = None
        if not (quiet or json_output):
            progress = Progress(
                TextColumn("{task.description}"),
                BarColumn(),
                TextColumn("{task.percentage:>3.0f}%"),
                TimeRemainingColumn(),
                console=console,
                transient=True,
            )

        try:
            if progress is None:
                result = service.extract(url, duration=duration)
            else:
                with progress as running_progress:
                    task_id = running_progress.add_task("Processing", total=100)
                    result = service.extract(
                        url,
                        duration=duration,
                        on_progress=_progress_handler_factory(running_progress, task_id, STAGE_RANGES),
                    )
        except InvalidYouTubeURLError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(code=ParseExitCode.INVALID_INPUT) from exc
        except Exception as exc:  # pragma: no cover - unexpected failure
            console.print(f"[red]Failed to parse YouTube video:[/red] {exc}")
            raise typer.Exit(code=ParseExitCode.PROCESSING_ERROR) from exc
        finally:
            service.close()

        exit_code = ParseExitCode.NEEDS_DURATION if result.needs_duration else ParseExitCode.SUCCESS

        if json_output:
            typer.echo(json.dumps(_build_json_payload(result), ensure_ascii=False, indent=2))
            raise typer.Exit(code=exit_code)

        if result.needs_duration:
            console.print(
                "[yellow]No chapters or transcript found.[/yellow] "
                "Re-run with --duration SECONDS or --probe-duration to get default steps."
            )
            raise typer.Exit(code=exit_code)

        if not quiet:
            console.print(Panel.fit(f"Video: [bold]{result.video_id}[/bold]", border_style="green"))
        _render_steps(console, result)


def _progress_handler_factory(
    progress: Progress,
    task_id: TaskID,
    stage_ranges: StageRanges,
) -> Callable[[ProgressUpdate], None]:
    def handler(update: ProgressUpdate) -> None:
        start, end = stage_ranges.get(update.stage, (0, 100))
        span = max(end - start, 1)
        overall = start + (update.stage_progress / 100) * span
        progress.update(
            task_id,
            completed=min(overall, 100),
            description=f"{update.stage.value.title()}...",
        )

    return handler


def _build_json_payload(result: ExtractionResult) -> dict[str, object]:
    return {
        "status": "needs_duration" if result.needs_duration else "success",
        "video_id": result.video_id,
        "duration_seconds": result.duration_seconds,
        "needs_duration": result.needs_duration,
        "source": result.source.value,
        "steps": [step.to_payload() for step in result.steps],
    }


def _render_steps(console: Console, result: ExtractionResult) -> None:
    table = Table(title="Recipe Steps", show_lines=False)
    table.add_column("Time", justify="right")
    table.add_column("Instruction", overflow="fold")
    table.add_column("Category")

    for step in result.steps:
        table.add_row(
            step.display_time,
            step.instruction,
            step.category.value if step.category else "-",
        )

    console.print(table)
    console.print(f"Steps: {len(result.steps)} | Source: {result.source.value}")


__all__ = ["ParseExitCode", "build_service", "register"]
