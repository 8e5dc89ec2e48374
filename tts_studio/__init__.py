"""Client core for the TTS studio corpus editor."""

from .errors import DataInconsistency, DatasetNotLoaded, NetworkFailure, NotFound, StudioError

__all__ = ["DataInconsistency", "DatasetNotLoaded", "NetworkFailure", "NotFound", "StudioError"]
