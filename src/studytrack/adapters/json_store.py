"""JSON file record store.

Each namespace is written to its own ``<namespace>.json`` file in the data
directory. Writes go to a temporary file first and are moved into place so a
crash mid-write never leaves a truncated file behind.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from collections.abc import Sequence
from pathlib import Path

from studytrack.repositories.record_store import RecordStore
from studytrack.utils.logger import get_logger

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class JsonRecordStore(RecordStore):
    """Record store backed by one JSON file per namespace key."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize the store, creating *data_dir* if needed."""
        if data_dir is None:
            from platformdirs import user_data_dir

            data_dir = Path(user_data_dir("studytrack")) / "records"

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.log = get_logger("store")

    def path_for(self, namespace_key: str) -> Path:
        """File path used for *namespace_key*."""
        if not namespace_key:
            raise ValueError("namespace_key cannot be empty")
        return self.data_dir / f"{_SAFE_KEY.sub('_', namespace_key)}.json"

    def save(self, namespace_key: str, records: Sequence[dict]) -> None:
        """Serialize *records* to the namespace file."""
        path = self.path_for(namespace_key)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.stem}.", suffix=".tmp", dir=self.data_dir
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(records), f, indent=2)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        self.log.debug("Saved %d records to %s", len(records), path)

    def load(self, namespace_key: str) -> list[dict]:
        """Load the namespace file. Returns [] if missing or invalid."""
        path = self.path_for(namespace_key)
        if not path.exists():
            return []

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            self.log.warning("Ignoring unreadable records in %s: %s", path, e)
            return []

        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            self.log.warning("Ignoring malformed records in %s", path)
            return []

        return data
