import sys
import os
from pathlib import Path

import pytest

# Make the checkout importable when the package has not been pip-installed.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

TRACES_DIR = Path(__file__).resolve().parent.parent / "traces"


@pytest.fixture
def traces_dir() -> Path:
    """Directory holding the reference traces shipped with the repo."""
    return TRACES_DIR


@pytest.fixture
def write_trace(tmp_path: Path):
    """Writes trace lines to a temporary file and returns its path."""
    def _write(lines, name="test.trace"):
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines))
        return path
    return _write
