"""Shared fixtures: a fake tesseract executable and a configured test client."""

import base64
import os
import sys
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from cortana_ocr_api.config import Settings, get_settings

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
)
PNG_B64 = base64.b64encode(PNG_BYTES).decode()

SAMPLE_TSV = (
    "level\tpage_num\tblock_num\tpar_num\tline_num\tword_num\tleft\ttop\twidth\theight\tconf\ttext\n"
    "1\t1\t0\t0\t0\t0\t0\t0\t100\t50\t-1\t\n"
    "2\t1\t1\t0\t0\t0\t10\t20\t30\t8\t-1\t\n"
    "3\t1\t1\t1\t0\t0\t10\t20\t30\t8\t-1\t\n"
    "4\t1\t1\t1\t1\t0\t10\t20\t30\t8\t-1\t\n"
    "5\t1\t1\t1\t1\t1\t10\t20\t30\t8\t95.5\thello\n"
)

FAKE_TESSERACT = '''#!{python}
import os
import sys
import time

args = sys.argv[1:]
if args[:1] == ["--version"]:
    print("tesseract 5.3.0")
    sys.exit(0)

log_path = os.environ.get("FAKE_TESSERACT_LOG")
if log_path:
    with open(log_path, "a") as log:
        log.write(" ".join(args) + "\\n")

mode = os.environ.get("FAKE_TESSERACT_MODE", "ok")
if mode == "fail":
    sys.stderr.write("Error in pixReadStream: Unknown format\\n")
    sys.exit(1)
if mode == "hang":
    time.sleep(30)
if mode == "silent":
    sys.exit(0)

image, base = args[0], args[1]
with open(image, "rb") as f:
    data = f.read()

text = data.hex() if mode == "echo" else "Hello World"
with open(base + ".txt", "w") as f:
    f.write("  " + text + "\\n\\n")

if "tessedit_create_tsv=1" in args:
    with open(base + ".tsv", "w") as f:
        f.write({tsv!r})
'''


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_tesseract(tmp_path):
    """Write an executable that mimics the tesseract CLI."""
    script = tmp_path / "fake-tesseract"
    script.write_text(FAKE_TESSERACT.format(python=sys.executable, tsv=SAMPLE_TSV))
    script.chmod(0o755)
    return script


@pytest.fixture
def invocation_log(tmp_path):
    """File the fake tesseract appends its arguments to."""
    return tmp_path / "invocations.log"


@pytest.fixture
def settings(tmp_path, fake_tesseract):
    return Settings(
        tesseract_cmd=str(fake_tesseract),
        upload_dir=tmp_path / "uploads",
        output_dir=tmp_path / "output",
        recognizer_timeout=5,
    )


@pytest.fixture
def mock_env(tmp_path, fake_tesseract, invocation_log):
    """Point the service at temporary directories and the fake tesseract."""
    env_vars = {
        "TESSERACT_CMD": str(fake_tesseract),
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "OUTPUT_DIR": str(tmp_path / "output"),
        "RECOGNIZER_TIMEOUT": "5",
        "FAKE_TESSERACT_LOG": str(invocation_log),
        "FAKE_TESSERACT_MODE": "ok",
    }

    with patch.dict(os.environ, env_vars):
        get_settings.cache_clear()
        yield env_vars
    get_settings.cache_clear()


@pytest.fixture
def client(mock_env):
    from cortana_ocr_api.main import app

    with TestClient(app) as test_client:
        yield test_client


def staged_files(tmp_path):
    """All files currently in the staging directories."""
    return [
        path
        for directory in (tmp_path / "uploads", tmp_path / "output")
        if directory.exists()
        for path in directory.iterdir()
    ]
