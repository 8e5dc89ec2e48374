"""Dataset store: snapshot ownership, selection, navigation and sync."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..errors import DataInconsistency, DatasetNotLoaded, NetworkFailure, NotFound
from ..metrics import RECONCILE_COUNTER
from ..services.factory import SyncBackend
from .models import Batch, Segment, SegmentStatus
from .snapshot import DatasetSnapshot

LOGGER = logging.getLogger("tts_studio.store")

LOADED = "loaded"
SELECTION = "selection"
SEGMENT = "segment"


@dataclass(slots=True, frozen=True)
class StoreChange:
    kind: str
    uid: Optional[str] = None


Listener = Callable[[StoreChange], None]


class DatasetStore:
    """Single owner of the dataset snapshot and the current selection.

    Must be created inside a running event loop: construction schedules the
    one and only dataset load. Selection is kept as a uid, so replacing a
    segment never leaves a stale selected object behind.
    """

    def __init__(self, client: SyncBackend) -> None:
        self.client = client
        self.snapshot: Optional[DatasetSnapshot] = None
        self.load_error: Optional[Exception] = None
        self._selected_uid: Optional[str] = None
        self._listeners: List[Listener] = []
        self._load_task = asyncio.get_running_loop().create_task(self._load())

    async def _load(self) -> None:
        try:
            payload = await self.client.fetch_dataset()
            snapshot = DatasetSnapshot.from_payload(payload)
        except (NetworkFailure, ValidationError) as exc:
            LOGGER.error("Dataset load failed: %s", exc)
            self.load_error = exc
            return
        for problem in snapshot.check_consistency():
            LOGGER.warning("Dataset inconsistency: %s", problem)
        self.snapshot = snapshot
        self._selected_uid = None
        LOGGER.info(
            "Loaded %s (%s): %d batches, %d segments",
            snapshot.source_name,
            snapshot.language,
            len(snapshot.batches),
            len(snapshot),
        )
        self._notify(StoreChange(LOADED))

    async def wait_until_loaded(self) -> Optional[DatasetSnapshot]:
        await asyncio.shield(self._load_task)
        return self.snapshot

    @property
    def is_loaded(self) -> bool:
        return self.snapshot is not None

    def _require_snapshot(self) -> DatasetSnapshot:
        if self.snapshot is None:
            raise DatasetNotLoaded("Dataset not loaded yet")
        return self.snapshot

    # Subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                LOGGER.exception("Store listener failed on %s change", change.kind)

    # Lookup

    @property
    def batches(self) -> List[Batch]:
        return self._require_snapshot().batches

    @property
    def segments(self) -> List[Segment]:
        return self._require_snapshot().segments

    def get_batch(self, uid: str) -> Batch:
        return self._require_snapshot().get_batch(uid)

    def get_segment(self, uid: str) -> Segment:
        return self._require_snapshot().get_segment(uid)

    def segments_for_batch(self, batch_uid: str) -> List[Segment]:
        return self._require_snapshot().segments_for_batch(batch_uid)

    # Selection

    @property
    def selected_uid(self) -> Optional[str]:
        return self._selected_uid

    @property
    def selected_segment(self) -> Optional[Segment]:
        if self._selected_uid is None or self.snapshot is None:
            return None
        try:
            return self.snapshot.get_segment(self._selected_uid)
        except NotFound:
            return None

    def select_segment(self, uid: str) -> Optional[Segment]:
        try:
            segment: Optional[Segment] = self.get_segment(uid)
        except (NotFound, DatasetNotLoaded):
            segment = None
        self._set_selection(segment)
        return segment

    def clear_selection(self) -> None:
        self._set_selection(None)

    def select_next_segment(self) -> Optional[Segment]:
        return self._step_selection(1)

    def select_previous_segment(self) -> Optional[Segment]:
        return self._step_selection(-1)

    def _step_selection(self, step: int) -> Optional[Segment]:
        current = self.selected_segment
        if current is None or self.snapshot is None:
            return None
        count = len(self.snapshot)
        # Walks by the segment's dataset-wide num, not by batch.
        target = self.snapshot.segment_at((count + current.num + step) % count)
        self._set_selection(target)
        return target

    def _set_selection(self, segment: Optional[Segment]) -> None:
        self._selected_uid = segment.uid if segment is not None else None
        self._notify(StoreChange(SELECTION, self._selected_uid))

    # Local edits

    def set_segment_start(self, uid: str, time: float) -> None:
        self._edit(uid, start=time)

    def set_segment_end(self, uid: str, time: float) -> None:
        self._edit(uid, end=time)

    def set_segment_text(self, uid: str, text: str) -> None:
        self._edit(uid, text=text)

    def set_segment_status(self, uid: str, status: SegmentStatus | str) -> None:
        self._edit(uid, status=SegmentStatus(status))

    def _edit(self, uid: str, **fields: Any) -> None:
        segment = self.get_segment(uid)
        for name, value in fields.items():
            setattr(segment, name, value)
        self._notify(StoreChange(SEGMENT, uid))

    # Persistence

    async def update_segment_slice(self, uid: str) -> Segment:
        segment = self.get_segment(uid)
        response = await self.client.update_segment_slice(
            uid,
            start=segment.start,
            end=segment.end,
            text=segment.text,
        )
        return self._reconcile(uid, response, "slice")

    async def update_segment_status(self, uid: str) -> Segment:
        segment = self.get_segment(uid)
        response = await self.client.update_segment_status(uid, segment.status.value)
        return self._reconcile(uid, response, "status")

    def _reconcile(self, uid: str, response: Dict[str, Any], kind: str) -> Segment:
        snapshot = self._require_snapshot()
        try:
            updated = Segment.model_validate(response)
        except ValidationError as exc:
            raise DataInconsistency(f"Invalid segment returned for {uid}: {exc}") from exc
        if updated.uid != uid:
            raise DataInconsistency(f"Server answered for segment {updated.uid} instead of {uid}")
        previous = snapshot.replace_segment(updated)
        if previous.num != updated.num:
            LOGGER.warning(
                "Segment %s came back with num %d (was %d); kept at its indexed position",
                uid,
                updated.num,
                previous.num,
            )
        RECONCILE_COUNTER.labels(kind=kind).inc()
        LOGGER.debug("Segment %s reconciled after %s update", uid, kind)
        self._notify(StoreChange(SEGMENT, uid))
        return updated


__all__ = ["DatasetStore", "Listener", "StoreChange", "LOADED", "SELECTION", "SEGMENT"]
