"""Tesseract invocation and output readers."""

import asyncio
import logging
import subprocess
from pathlib import Path
from typing import Optional

import pytesseract
from starlette.concurrency import run_in_threadpool

from cortana_ocr_api.config import Settings
from cortana_ocr_api.errors import RecognitionError, ResultReadError
from cortana_ocr_api.models import BoundingBox
from cortana_ocr_api.utils.staging import StagedFiles
from cortana_ocr_api.utils.tsv import parse_tsv

logger = logging.getLogger(__name__)

TSV_CONFIG = ("-c", "tessedit_create_tsv=1")


def build_command(staged: StagedFiles, settings: Settings, tabular: bool = False) -> list[str]:
    """Build the tesseract command line for a staged image."""
    cmd = [settings.tesseract_cmd, str(staged.image_path), str(staged.output_base)]
    if settings.tesseract_lang:
        cmd.extend(["-l", settings.tesseract_lang])
    if settings.tesseract_psm is not None:
        cmd.extend(["--psm", str(settings.tesseract_psm)])
    if tabular:
        cmd.extend(TSV_CONFIG)
    return cmd


async def recognize(staged: StagedFiles, settings: Settings, tabular: bool = False) -> None:
    """Run tesseract on a staged image and wait for it to exit.

    Tesseract writes <output_base>.txt, plus <output_base>.tsv when tabular
    is set.

    Raises:
        RecognitionError: If the process cannot start, exits non-zero
            (message carries its stderr), or exceeds the configured timeout.
    """
    cmd = build_command(staged, settings, tabular)
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.error(f"Could not start {settings.tesseract_cmd}: {e}")
        raise RecognitionError(str(e)) from e

    try:
        _, stderr = await asyncio.wait_for(
            process.communicate(), timeout=settings.recognizer_timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        logger.error(
            f"Tesseract timed out after {settings.recognizer_timeout}s on {staged.image_path}"
        )
        raise RecognitionError(f"timed out after {settings.recognizer_timeout} seconds")
    except asyncio.CancelledError:
        # client went away; do not leave tesseract running
        process.kill()
        await process.wait()
        raise

    if process.returncode != 0:
        detail = stderr.decode("utf-8", errors="replace")
        logger.error(f"Tesseract exited with {process.returncode}: {detail.strip()}")
        raise RecognitionError(detail)

    logger.debug(f"Tesseract finished for {staged.image_path}")


def _read_output(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {path}: {e}")
        raise ResultReadError() from e


async def read_text_result(staged: StagedFiles) -> str:
    """Return the trimmed plain-text output."""
    content = await run_in_threadpool(_read_output, staged.text_path)
    return content.strip()


async def read_tsv_result(staged: StagedFiles) -> list[BoundingBox]:
    """Return every row of the TSV output as a BoundingBox."""
    content = await run_in_threadpool(_read_output, staged.tsv_path)
    return parse_tsv(content)


def check_tesseract_version(settings: Settings) -> Optional[str]:
    """Log the version of the configured tesseract binary.

    Returns:
        The version string, or None when the binary is missing or broken.
    """
    pytesseract.pytesseract.tesseract_cmd = settings.tesseract_cmd
    # pytesseract raises SystemExit when --version output cannot be parsed
    try:
        version = pytesseract.get_tesseract_version()
    except (pytesseract.TesseractNotFoundError, subprocess.CalledProcessError, SystemExit) as e:
        logger.warning(f"Tesseract not usable at {settings.tesseract_cmd}: {e}")
        return None
    logger.info(f"Using tesseract {version} at {settings.tesseract_cmd}")
    return str(version)
