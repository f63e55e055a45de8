from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))


@pytest.fixture
def scripts_dir(tmp_path: Path):
    """Return a factory that writes {file name: content} into a scripts directory."""

    def _write(files: dict[str, str]) -> Path:
        target = tmp_path / "scripts"
        target.mkdir(exist_ok=True)
        for name, content in files.items():
            (target / name).write_text(content, encoding="utf-8")
        return target

    return _write
