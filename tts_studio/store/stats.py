"""Corpus statistics for a loaded snapshot."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict

import numpy as np

from .models import SegmentStatus
from .snapshot import DatasetSnapshot


@dataclass(slots=True)
class DatasetStats:
    batch_count: int = 0
    segment_count: int = 0
    word_count: int = 0
    mean_length_ms: float = 0.0
    std_length_ms: float = 0.0
    total_length_ms: float = 0.0
    status_counts: Dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return asdict(self)


def dataset_stats(snapshot: DatasetSnapshot) -> DatasetStats:
    segments = snapshot.segments
    counts = {status.value: 0 for status in SegmentStatus}
    for segment in segments:
        counts[segment.status.value] += 1
    stats = DatasetStats(
        batch_count=len(snapshot.batches),
        segment_count=len(segments),
        word_count=sum(len(segment.text.split()) for segment in segments),
        status_counts=counts,
    )
    if segments:
        lengths = np.array([segment.length for segment in segments], dtype=np.float64)
        stats.mean_length_ms = float(lengths.mean())
        stats.std_length_ms = float(lengths.std())
        stats.total_length_ms = float(lengths.sum())
    return stats


__all__ = ["DatasetStats", "dataset_stats"]
