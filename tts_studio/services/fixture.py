"""Offline stand-in for the studio API backed by a dataset JSON file."""

from __future__ import annotations

import copy
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import NetworkFailure

LOGGER = logging.getLogger("tts_studio.fixture")


class FixtureSyncClient:
    """Serves ``GET /data`` from a file and echoes segment edits back.

    Edits are kept in memory only; the file on disk is never rewritten.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: Optional[Dict[str, Any]] = None

    async def fetch_dataset(self) -> Dict[str, Any]:
        return copy.deepcopy(self._dataset())

    async def update_segment_slice(self, uid: str, *, start: float, end: float, text: str) -> Dict[str, Any]:
        return self._merge(uid, {"start": start, "end": end, "text": text})

    async def update_segment_status(self, uid: str, status: str) -> Dict[str, Any]:
        return self._merge(uid, {"status": status})

    def segment_audio_url(self, uid: str, cache_buster: Optional[int] = None) -> str:
        if cache_buster is None:
            cache_buster = int(time.time() * 1000)
        return f"fixture://{self.path.name}/segment/{uid}/wav?t={cache_buster}"

    async def fetch_segment_audio(self, uid: str, cache_buster: Optional[int] = None) -> bytes:
        """Read ``audio/<uid>.wav`` next to the fixture file."""
        audio_path = self.path.parent / "audio" / f"{uid}.wav"
        try:
            return audio_path.read_bytes()
        except OSError as exc:
            raise NetworkFailure(f"No audio for segment {uid} in fixture mode", 404) from exc

    async def close(self) -> None:
        return None

    def _merge(self, uid: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        for segment in self._dataset().get("segments", []):
            if segment.get("uid") == uid:
                segment.update(changes)
                LOGGER.info("Fixture segment %s updated: %s", uid, ", ".join(sorted(changes)))
                return copy.deepcopy(segment)
        raise NetworkFailure(f"Unknown segment {uid}", 404)

    def _dataset(self) -> Dict[str, Any]:
        if self._data is None:
            try:
                self._data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise NetworkFailure(f"Cannot read fixture {self.path}: {exc}") from exc
        return self._data


__all__ = ["FixtureSyncClient"]
