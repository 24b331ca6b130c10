"""Study session record."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # Naive timestamps are taken as local time
    return parsed if parsed.tzinfo else parsed.astimezone()


class StudySubject(str, Enum):
    """Preset subject labels offered when starting a session."""

    MATH = "Math"
    SCIENCE = "Science"
    HISTORY = "History"
    LANGUAGES = "Languages"
    ART = "Art"
    MUSIC = "Music"
    COMPUTER_SCIENCE = "Computer Science"
    OTHER = "Other"


@dataclass
class StudySession:
    """One continuous (possibly paused) interval of studying."""

    subject: str
    start_time: datetime
    end_time: datetime | None = None
    pomodoro_cycles: int = 0
    notes: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def is_ongoing(self) -> bool:
        """True until the session has been finalized."""
        return self.end_time is None

    def total_duration(self, now: datetime | None = None) -> float:
        """Seconds between start and end, or between start and *now* if ongoing."""
        if self.end_time is not None:
            end = self.end_time
        else:
            end = now if now is not None else datetime.now().astimezone()
        return max(0.0, (end - self.start_time).total_seconds())

    def finalize(self, end_time: datetime) -> "StudySession":
        """Return a finalized copy ending at *end_time*."""
        if not self.is_ongoing:
            raise ValueError("Session has already ended")
        return replace(self, end_time=max(end_time, self.start_time))

    def copy(self) -> "StudySession":
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "subject": self.subject,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "pomodoro_cycles": self.pomodoro_cycles,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StudySession":
        """Create from dictionary.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed.
        """
        end_time = data.get("end_time")
        return cls(
            id=str(data["id"]),
            subject=str(data["subject"]),
            start_time=_parse_timestamp(data["start_time"]),
            end_time=_parse_timestamp(end_time) if end_time else None,
            pomodoro_cycles=int(data.get("pomodoro_cycles", 0)),
            notes=str(data.get("notes", "")),
        )
