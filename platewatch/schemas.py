"""
PlateWatch Schema Definitions

Data structures shared by the inference client, the session manager
and the operator API.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple

from platewatch.errors import InvalidImageError


def new_record_id() -> str:
    """Opaque id: creation time in epoch millis plus a random suffix"""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class DetectionRecord:
    """One processed image's retained result"""
    id: str
    plates: Tuple[str, ...]  # As returned by the model, may be empty
    violation: str  # Free text or "NONE"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON storage"""
        return {
            "id": self.id,
            "plates": list(self.plates),
            "violation": self.violation,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetectionRecord":
        """
        Create from a stored dictionary.

        Raises:
            ValueError: if the entry does not have the current record shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Record must be an object, got {type(data).__name__}")

        record_id = data.get("id")
        plates = data.get("plates")
        violation = data.get("violation")

        if not isinstance(record_id, str):
            raise ValueError("Record is missing a string 'id'")
        if not isinstance(plates, list) or not all(isinstance(p, str) for p in plates):
            raise ValueError(f"Record {record_id} is missing a 'plates' list of strings")
        if not isinstance(violation, str):
            raise ValueError(f"Record {record_id} is missing a string 'violation'")

        return cls(id=record_id, plates=tuple(plates), violation=violation)

    @classmethod
    def create(cls, plates: List[str], violation: str) -> "DetectionRecord":
        """Create a new record with a fresh id"""
        return cls(id=new_record_id(), plates=tuple(plates), violation=violation)


@dataclass
class ImageUpload:
    """Image selected by the operator"""
    content: bytes
    mime_type: str
    filename: str = ""

    def __post_init__(self):
        if not self.mime_type or not self.mime_type.lower().startswith("image/"):
            raise InvalidImageError(
                f"Unsupported file type '{self.mime_type}'. Please upload an image file."
            )
        if not self.content:
            raise InvalidImageError("The selected image file is empty.")

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ProcessOutcome:
    """Result of one process-image operation"""
    success: bool
    plates: List[str] = field(default_factory=list)
    violation: str = ""
    record: Optional[DetectionRecord] = None
    new_alerts: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "plates": list(self.plates),
            "violation": self.violation,
            "record": self.record.to_dict() if self.record else None,
            "new_alerts": list(self.new_alerts),
            "error": self.error,
        }


@dataclass
class SessionSnapshot:
    """Everything the operator page needs to render"""
    has_image: bool
    image_filename: Optional[str]
    has_processed_image: bool
    watchlist_text: str
    detected_plates: List[str]
    violations: str
    has_violation: bool
    error: Optional[str]
    status_message: Optional[str]
    is_loading: bool
    history: List[DetectionRecord]
    alert_log: List[str]
    can_process: bool
    can_clear_watchlist: bool
    can_clear_data: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_image": self.has_image,
            "image_filename": self.image_filename,
            "has_processed_image": self.has_processed_image,
            "watchlist_text": self.watchlist_text,
            "detected_plates": list(self.detected_plates),
            "violations": self.violations,
            "has_violation": self.has_violation,
            "error": self.error,
            "status_message": self.status_message,
            "is_loading": self.is_loading,
            "history": [r.to_dict() for r in self.history],
            "alert_log": list(self.alert_log),
            "can_process": self.can_process,
            "can_clear_watchlist": self.can_clear_watchlist,
            "can_clear_data": self.can_clear_data,
        }
