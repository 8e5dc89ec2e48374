"""Pick the sync client matching the configured settings."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from ..config import StudioSettings
from .fixture import FixtureSyncClient
from .network import SyncClient

SyncBackend = Union[SyncClient, FixtureSyncClient]


def build_client(settings: StudioSettings) -> SyncBackend:
    if settings.fixture_path:
        return FixtureSyncClient(Path(settings.fixture_path))
    return SyncClient(settings)


__all__ = ["SyncBackend", "build_client"]
