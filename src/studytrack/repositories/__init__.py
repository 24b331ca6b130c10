"""Storage port for StudyTrack."""

from .record_store import RecordStore

__all__ = ["RecordStore"]
