"""Concrete record store adapters."""

from .json_store import JsonRecordStore
from .memory_store import MemoryRecordStore

__all__ = ["JsonRecordStore", "MemoryRecordStore"]
