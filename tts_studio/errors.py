"""Error taxonomy shared by the store and the sync clients."""

from __future__ import annotations

from typing import Optional


class StudioError(Exception):
    pass


class NotFound(StudioError):
    """A uid is absent from the batch or segment index."""

    def __init__(self, kind: str, uid: str) -> None:
        super().__init__(f"Unknown {kind} {uid}")
        self.kind = kind
        self.uid = uid


class DataInconsistency(StudioError):
    """Index and sequence disagree, or the server answered for another uid."""


class DatasetNotLoaded(StudioError):
    pass


class NetworkFailure(StudioError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "DataInconsistency",
    "DatasetNotLoaded",
    "NetworkFailure",
    "NotFound",
    "StudioError",
]
