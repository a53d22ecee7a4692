"""Local staging of input images and tesseract output files."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable
from uuid import uuid4

from starlette.concurrency import run_in_threadpool

from cortana_ocr_api.config import Settings
from cortana_ocr_api.errors import StagingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedFiles:
    """Input image path and tesseract output base for one request."""

    image_path: Path
    output_base: Path

    @property
    def text_path(self) -> Path:
        return self.output_base.with_name(f"{self.output_base.name}.txt")

    @property
    def tsv_path(self) -> Path:
        return self.output_base.with_name(f"{self.output_base.name}.tsv")

    def paths(self) -> tuple[Path, Path, Path]:
        return self.image_path, self.text_path, self.tsv_path


def ensure_staging_dirs(settings: Settings) -> None:
    """Create the upload and output directories if missing."""
    for directory in (settings.upload_dir, settings.output_dir):
        directory.mkdir(parents=True, exist_ok=True)


def new_staged_files(settings: Settings) -> StagedFiles:
    """Build a unique path pair for one request."""
    token = uuid4().hex
    return StagedFiles(
        image_path=settings.upload_dir / f"image_{token}.png",
        output_base=settings.output_dir / f"image_{token}",
    )


def _write_image(path: Path, data: bytes) -> None:
    with open(path, "wb") as buffer:
        buffer.write(data)


async def stage_image(data: bytes, settings: Settings) -> StagedFiles:
    """Write the decoded image to the upload directory (off main thread).

    Returns:
        StagedFiles for the request.

    Raises:
        StagingError: If the image cannot be written. Any partial file is
            removed before raising.
    """
    staged = new_staged_files(settings)
    try:
        await run_in_threadpool(_write_image, staged.image_path, data)
    except OSError as e:
        logger.error(f"Failed to write {staged.image_path}: {e}")
        cleanup_staged_files(staged)
        raise StagingError() from e

    logger.debug(f"Staged {len(data)} bytes at {staged.image_path}")
    return staged


def cleanup_staged_files(staged: StagedFiles) -> None:
    """Delete every file belonging to a request. Never raises."""
    for path in staged.paths():
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Cleanup failed for {path}: {e}")


def sweep_staging_dirs(directories: Iterable[Path]) -> int:
    """Delete all files in the given directories.

    Used at startup (orphans of a crashed run) and shutdown. Errors are
    logged and skipped.

    Returns:
        Number of files removed.
    """
    removed = 0
    for directory in directories:
        if not directory.is_dir():
            continue
        for entry in list(directory.iterdir()):
            if not entry.is_file():
                continue
            try:
                entry.unlink()
                removed += 1
            except OSError as e:
                logger.error(f"Cleanup error during sweep of {entry}: {e}")
    return removed
