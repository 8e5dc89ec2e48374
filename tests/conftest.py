"""Pytest configuration helpers."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest


def _ensure_repo_on_path() -> None:
    """Allow tests to import from repo modules without setting PYTHONPATH."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()

FIXTURE_PATH = Path(__file__).resolve().parent / "fixtures" / "metadata.json"


@pytest.fixture()
def fixture_path() -> Path:
    return FIXTURE_PATH


@pytest.fixture()
def dataset_payload() -> dict:
    return json.loads(FIXTURE_PATH.read_text(encoding="utf-8"))
