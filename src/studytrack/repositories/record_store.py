"""Record store abstraction.

Every manager persists plain records (JSON-compatible dictionaries) as an
ordered sequence under a namespace key. Concrete stores live in
``studytrack.adapters``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence


class RecordStore(ABC):
    """Abstract base class for namespaced record persistence."""

    @abstractmethod
    def save(self, namespace_key: str, records: Sequence[dict]) -> None:
        """Persist *records* under *namespace_key*, replacing what was there.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError("RecordStore.save() must be implemented by adapter")

    @abstractmethod
    def load(self, namespace_key: str) -> list[dict]:
        """Load the records stored under *namespace_key*.

        Returns an empty list if nothing is stored or the stored data cannot
        be decoded; decode failures are never raised to the caller.
        """
        raise NotImplementedError("RecordStore.load() must be implemented by adapter")
