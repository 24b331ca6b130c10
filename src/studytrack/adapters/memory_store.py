"""In-memory record store."""

import copy
from collections.abc import Sequence

from studytrack.repositories.record_store import RecordStore


class MemoryRecordStore(RecordStore):
    """Keeps records in a dict; nothing survives the process."""

    def __init__(self):
        self._data: dict[str, list[dict]] = {}

    def save(self, namespace_key: str, records: Sequence[dict]) -> None:
        self._data[namespace_key] = copy.deepcopy(list(records))

    def load(self, namespace_key: str) -> list[dict]:
        return copy.deepcopy(self._data.get(namespace_key, []))
