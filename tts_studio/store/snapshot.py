"""In-memory dataset snapshot: ordered batches/segments plus uid indices."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

from ..errors import DataInconsistency, NotFound
from .models import AudioSlice, Batch, Segment

T = TypeVar("T", bound=AudioSlice)


class DatasetPayload(BaseModel):
    """Body of ``GET /data``."""

    source_name: str = ""
    language: str = ""
    batches: List[Batch] = Field(default_factory=list)
    segments: List[Segment] = Field(default_factory=list)
    batches_index: Optional[Dict[str, int]] = None
    segments_index: Optional[Dict[str, int]] = None


def build_index(items: Sequence[AudioSlice]) -> Dict[str, int]:
    return {item.uid: position for position, item in enumerate(items)}


class DatasetSnapshot:
    """All batches and segments of one source.

    Sequences and indices are private and only change together, through
    :meth:`replace_segment`.
    """

    def __init__(
        self,
        source_name: str,
        language: str,
        batches: Sequence[Batch],
        segments: Sequence[Segment],
        batches_index: Optional[Dict[str, int]] = None,
        segments_index: Optional[Dict[str, int]] = None,
    ) -> None:
        self.source_name = source_name
        self.language = language
        self._batches = list(batches)
        self._segments = list(segments)
        self._batches_index = dict(batches_index) if batches_index is not None else build_index(self._batches)
        self._segments_index = dict(segments_index) if segments_index is not None else build_index(self._segments)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "DatasetSnapshot":
        parsed = DatasetPayload.model_validate(payload)
        return cls(
            source_name=parsed.source_name,
            language=parsed.language,
            batches=parsed.batches,
            segments=parsed.segments,
            batches_index=parsed.batches_index,
            segments_index=parsed.segments_index,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "source_name": self.source_name,
            "language": self.language,
            "batches": [batch.model_dump(mode="json") for batch in self._batches],
            "segments": [segment.model_dump(mode="json") for segment in self._segments],
            "batches_index": dict(self._batches_index),
            "segments_index": dict(self._segments_index),
        }

    @property
    def batches(self) -> List[Batch]:
        return list(self._batches)

    @property
    def segments(self) -> List[Segment]:
        return list(self._segments)

    @property
    def batches_index(self) -> Dict[str, int]:
        return dict(self._batches_index)

    @property
    def segments_index(self) -> Dict[str, int]:
        return dict(self._segments_index)

    def __len__(self) -> int:
        return len(self._segments)

    def get_batch(self, uid: str) -> Batch:
        return self._lookup("batch", uid, self._batches_index, self._batches)

    def get_segment(self, uid: str) -> Segment:
        return self._lookup("segment", uid, self._segments_index, self._segments)

    def segment_at(self, position: int) -> Segment:
        try:
            return self._segments[position]
        except IndexError:
            raise DataInconsistency(f"No segment at position {position}") from None

    def segments_for_batch(self, batch_uid: str) -> List[Segment]:
        self.get_batch(batch_uid)
        return [segment for segment in self._segments if segment.batch == batch_uid]

    def replace_segment(self, segment: Segment) -> Segment:
        """Swap the stored segment with the same uid; returns the previous one."""
        previous = self.get_segment(segment.uid)
        self._segments[self._segments_index[segment.uid]] = segment
        return previous

    def check_consistency(self) -> List[str]:
        problems: List[str] = []
        for kind, items, index in (
            ("batch", self._batches, self._batches_index),
            ("segment", self._segments, self._segments_index),
        ):
            if len(index) != len(items):
                problems.append(f"{kind} index has {len(index)} entries for {len(items)} items")
            for position, item in enumerate(items):
                if index.get(item.uid) != position:
                    problems.append(f"{kind} {item.uid} stored at {position} but indexed at {index.get(item.uid)}")
        for position, segment in enumerate(self._segments):
            if segment.num != position:
                problems.append(f"segment {segment.uid} has num {segment.num} at position {position}")
            if segment.batch not in self._batches_index:
                problems.append(f"segment {segment.uid} references unknown batch {segment.batch}")
        return problems

    @staticmethod
    def _lookup(kind: str, uid: str, index: Dict[str, int], items: List[T]) -> T:
        if uid not in index:
            raise NotFound(kind, uid)
        position = index[uid]
        if not 0 <= position < len(items):
            raise DataInconsistency(f"{kind} {uid} indexed at missing position {position}")
        item = items[position]
        if item.uid != uid:
            raise DataInconsistency(f"{kind} {uid} indexed at position {position} holding {item.uid}")
        return item


__all__ = ["DatasetPayload", "DatasetSnapshot", "build_index"]
