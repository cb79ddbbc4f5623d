"""ffmpeg frame extraction: pulls one JPEG frame out of in-memory video bytes."""

from __future__ import annotations

import asyncio
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Protocol

import structlog

from video_ingest.config import settings
from video_ingest.errors import ExternalToolError

logger = structlog.get_logger()

_DIAGNOSTIC_TAIL = 500


class FrameExtractor(Protocol):
    async def extract_frame(self, video_bytes: bytes, offset_seconds: float) -> bytes:
        """Return encoded image bytes of the frame at *offset_seconds*."""
        ...


def _tail(text: Optional[str | bytes]) -> str:
    if not text:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return text.strip()[-_DIAGNOSTIC_TAIL:]


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess:
    """Run an external command, capturing output. Never raises on exit status."""
    logger.info("ffmpeg.command", cmd=" ".join(cmd))

    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        errors="replace",
        timeout=timeout,
        check=False,
    )

    if result.stderr:
        logger.debug("ffmpeg.stderr", stderr=_tail(result.stderr))
    return result


@contextmanager
def staging_dir(prefix: str = "thumb-", root: str | None = None) -> Iterator[Path]:
    """Create a uniquely named working directory, removed on every exit path.

    Removal is best effort: a failure is logged and never replaces the
    exception (if any) raised inside the block.
    """
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=root))
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
        except OSError:
            logger.warning("ffmpeg.cleanup_failed", path=str(path), exc_info=True)


def _format_offset(seconds: float) -> str:
    return f"{seconds:.3f}".rstrip("0").rstrip(".") or "0"


class FFmpegFrameExtractor:
    """Runs ``ffmpeg`` to grab a single high-quality frame.

    The video is staged to disk because ffmpeg needs a seekable input.
    Both the staged video and the output image live in a per-call
    temporary directory.
    """

    def __init__(
        self,
        ffmpeg_bin: str | None = None,
        quality: int | None = None,
        timeout: float | None = None,
        temp_root: str | None = None,
        input_suffix: str = ".mp4",
    ):
        self.ffmpeg_bin = ffmpeg_bin or settings.ffmpeg_bin
        self.quality = quality if quality is not None else settings.thumbnail_quality
        self.timeout = timeout if timeout is not None else settings.ffmpeg_timeout_sec
        self.temp_root = temp_root if temp_root is not None else settings.temp_dir
        self.input_suffix = input_suffix

    def is_available(self) -> bool:
        return shutil.which(self.ffmpeg_bin) is not None

    def build_command(self, input_path: Path, output_path: Path, offset_seconds: float) -> list[str]:
        return [
            self.ffmpeg_bin,
            "-y",
            "-loglevel", "error",
            "-ss", _format_offset(offset_seconds),
            "-i", str(input_path),
            "-frames:v", "1",
            "-q:v", str(self.quality),
            str(output_path),
        ]

    def _extract_sync(self, video_bytes: bytes, offset_seconds: float) -> bytes:
        with staging_dir(root=self.temp_root) as workdir:
            input_path = workdir / f"input{self.input_suffix}"
            output_path = workdir / "thumbnail.jpg"
            cmd = self.build_command(input_path, output_path, offset_seconds)

            try:
                input_path.write_bytes(video_bytes)
                result = run_command(cmd, cwd=workdir, timeout=self.timeout)
            except FileNotFoundError as exc:
                raise ExternalToolError(
                    f"{self.ffmpeg_bin} no encontrado", diagnostics=str(exc)
                ) from exc
            except subprocess.TimeoutExpired as exc:
                raise ExternalToolError(
                    f"ffmpeg excedió el tiempo límite ({self.timeout}s)",
                    diagnostics=_tail(exc.stderr),
                ) from exc
            except OSError as exc:
                raise ExternalToolError(f"error de E/S: {exc}", diagnostics=str(exc)) from exc

            if result.returncode != 0:
                diagnostics = _tail(result.stderr)
                raise ExternalToolError(
                    f"ffmpeg terminó con código {result.returncode}: {diagnostics}",
                    diagnostics=diagnostics,
                    returncode=result.returncode,
                )

            try:
                frame = output_path.read_bytes()
            except FileNotFoundError:
                frame = b""
            except OSError as exc:
                raise ExternalToolError(f"error de E/S: {exc}", diagnostics=str(exc)) from exc

            if not frame:
                raise ExternalToolError(
                    "ffmpeg no produjo ningún fotograma",
                    diagnostics=_tail(result.stderr),
                    returncode=result.returncode,
                )
            return frame

    async def extract_frame(self, video_bytes: bytes, offset_seconds: float) -> bytes:
        logger.info(
            "ffmpeg.extract_frame.start",
            input_bytes=len(video_bytes),
            offset_seconds=offset_seconds,
        )
        frame = await asyncio.to_thread(self._extract_sync, video_bytes, offset_seconds)
        logger.info("ffmpeg.extract_frame.done", output_bytes=len(frame))
        return frame
