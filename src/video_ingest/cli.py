"""CLI entry point for video-ingest.

Usage:
    video-ingest upload clip.mp4 --owner <user-id>   # Upload + process one video
    video-ingest serve                               # Run the video-processor API
    video-ingest check                               # Show config, probe ffmpeg
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from video_ingest.config import settings
from video_ingest.logging_config import configure_logging

app = typer.Typer(name="video-ingest", help="Video upload and thumbnail pipeline")
console = Console()


@app.command()
def upload(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Video file to publish"),
    owner: str = typer.Option(..., "--owner", "-o", help="Owner (user) id"),
    description: str = typer.Option("", "--description", "-d", help="Optional description"),
    tags: str = typer.Option("", "--tags", "-t", help="Comma-separated tags"),
    content_type: Optional[str] = typer.Option(None, help="Override the guessed media type"),
    processor_url: Optional[str] = typer.Option(None, help="Video-processor endpoint"),
    backend: Optional[str] = typer.Option(None, help="Storage backend: supabase | memory"),
) -> None:
    """Validate, upload and process one video."""
    configure_logging(level="WARNING")

    from video_ingest.tools.storage_backend import create_backend
    from video_ingest.uploader.client import ProcessorClient
    from video_ingest.uploader.form import UploadForm
    from video_ingest.uploader.service import VideoUploader
    from video_ingest.uploader.validation import VideoFile

    video = VideoFile.from_path(file, content_type=content_type)
    store = create_backend(kind=backend, key=settings.supabase_anon_key or None)
    uploader = VideoUploader(backend=store, client=ProcessorClient(url=processor_url))

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("Publicando...", total=100)

        def _on_progress(pct: int, message: str) -> None:
            progress.update(task, completed=pct, description=message or "Publicando...")

        form = UploadForm(uploader, owner_id=owner, on_progress=_on_progress)
        form.description = description
        form.tags_text = tags

        if not form.select_file(video):
            progress.stop()
            console.print(f"[red]{form.message}[/red]")
            raise typer.Exit(1)

        result = asyncio.run(form.publish())

    if result is None:
        console.print(f"[red]{form.message}[/red]")
        raise typer.Exit(1)

    table = Table(title=form.message)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("video_id", str(result.video_id))
    table.add_row("video_path", result.video_path)
    table.add_row("thumbnail_path", result.thumbnail_path)
    table.add_row("timestamp", result.timestamp)
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
) -> None:
    """Run the video-processor API under uvicorn."""
    import uvicorn

    uvicorn.run("video_ingest.main:app", host=host, port=port, reload=reload)


@app.command()
def check() -> None:
    """Show effective configuration and whether ffmpeg is available."""
    from video_ingest.tools.ffmpeg import FFmpegFrameExtractor

    extractor = FFmpegFrameExtractor()
    table = Table(title="video-ingest")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("storage_backend", settings.storage_backend)
    table.add_row("supabase_url", settings.supabase_url or "-")
    table.add_row("videos_bucket", settings.videos_bucket)
    table.add_row("thumbnails_bucket", settings.thumbnails_bucket)
    table.add_row("videos_table", settings.videos_table)
    table.add_row("processor_url", settings.resolved_processor_url())
    table.add_row("ffmpeg_bin", extractor.ffmpeg_bin)
    table.add_row("ffmpeg available", "Y" if extractor.is_available() else "N")
    console.print(table)

    if not extractor.is_available():
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
