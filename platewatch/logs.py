"""
PlateWatch Persisted Logs

Two append-only logs mirrored into key-value storage:

- DetectionHistory: one DetectionRecord per informative processed image
- AlertLog: de-duplicated plates that ever matched the operator watchlist

Each log is stored whole as a JSON array under a fixed key and rewritten
on every append. The stored schema is versioned under its own key.
"""

import json
from typing import List, Optional

from platewatch.plates.normalize import normalize_plate
from platewatch.schemas import DetectionRecord


HISTORY_KEY = "detectionHistoryDB"
ALERT_LOG_KEY = "criminalAlertLogDB"
SCHEMA_VERSION_KEY = "platewatchSchemaVersion"

# 1 = unversioned single-plate records ({"plate": ...}); 2 = {"id", "plates", "violation"}
SCHEMA_VERSION = 2


def write_log(storage, key: str, entries: list) -> None:
    """Store a whole log together with the current schema version, in one write"""
    storage.set_items({
        key: json.dumps(entries),
        SCHEMA_VERSION_KEY: json.dumps(SCHEMA_VERSION),
    })


def erase_stored_logs(storage) -> None:
    """Remove both logs and the schema version from storage, in one write"""
    storage.remove_items([HISTORY_KEY, ALERT_LOG_KEY, SCHEMA_VERSION_KEY])


def read_schema_version(storage) -> Optional[int]:
    """
    Read the stored schema version.

    Returns:
        The version, None if never written, or -1 if unreadable
    """
    raw = storage.get_item(SCHEMA_VERSION_KEY)
    if raw is None:
        return None
    try:
        version = json.loads(raw)
    except ValueError:
        return -1
    if isinstance(version, bool) or not isinstance(version, int):
        return -1
    return version


def _is_legacy_history(entries: list) -> bool:
    """Unversioned data whose first entry lacks the plates list is the old format"""
    if not entries:
        return False
    first = entries[0]
    return not isinstance(first, dict) or not isinstance(first.get("plates"), list)


class DetectionHistory:
    """
    Append-only detection history.

    Insertion order is chronological. Cleared only as a whole.
    """

    def __init__(self, storage):
        self.storage = storage
        self._records: List[DetectionRecord] = []

    def load(self) -> None:
        """
        Load the stored history.

        An incompatible or malformed log is discarded (and removed from
        storage) instead of raising.
        """
        self._records = []

        raw = self.storage.get_item(HISTORY_KEY)
        if raw is None:
            return

        try:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError(f"expected a JSON array, got {type(entries).__name__}")

            version = read_schema_version(self.storage)
            if version is None:
                if _is_legacy_history(entries):
                    print("[DetectionHistory] Discarding history stored in the old single-plate format")
                    self.storage.remove_item(HISTORY_KEY)
                    return
            elif version != SCHEMA_VERSION:
                print(f"[DetectionHistory] Discarding history stored with unsupported schema version {version}")
                self.storage.remove_item(HISTORY_KEY)
                return

            self._records = [DetectionRecord.from_dict(entry) for entry in entries]
        except (ValueError, TypeError) as e:
            print(f"[DetectionHistory] Failed to parse stored history, discarding it: {e}")
            self._records = []
            self.storage.remove_item(HISTORY_KEY)

    @property
    def records(self) -> List[DetectionRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: DetectionRecord) -> None:
        """Append a record and persist the entire updated history"""
        updated = self._records + [record]
        write_log(self.storage, HISTORY_KEY, [r.to_dict() for r in updated])
        self._records = updated

    def reset(self) -> None:
        """Forget the in-memory records (storage is erased by erase_stored_logs)"""
        self._records = []


class AlertLog:
    """
    Append-only, duplicate-free log of watchlist matches.
    """

    def __init__(self, storage):
        self.storage = storage
        self._plates: List[str] = []

    def load(self) -> None:
        """Load the stored alert log, discarding it if malformed"""
        self._plates = []

        raw = self.storage.get_item(ALERT_LOG_KEY)
        if raw is None:
            return

        try:
            plates = json.loads(raw)
            if not isinstance(plates, list) or not all(isinstance(p, str) for p in plates):
                raise ValueError("expected a JSON array of plate strings")
        except ValueError as e:
            print(f"[AlertLog] Failed to parse stored alert log, discarding it: {e}")
            self.storage.remove_item(ALERT_LOG_KEY)
            return

        for plate in plates:
            if plate not in self._plates:
                self._plates.append(plate)

    @property
    def plates(self) -> List[str]:
        return list(self._plates)

    def __len__(self) -> int:
        return len(self._plates)

    def __contains__(self, plate: str) -> bool:
        return normalize_plate(plate) in self._plates

    def add_matches(self, matched_plates: List[str]) -> List[str]:
        """
        Append matched plates not already in the log.

        Args:
            matched_plates: Normalized plates that matched the watchlist

        Returns:
            Plates actually appended (empty if all were already logged)
        """
        new_plates = []
        for plate in matched_plates:
            plate = normalize_plate(plate)
            if plate and plate not in self._plates and plate not in new_plates:
                new_plates.append(plate)

        if not new_plates:
            return []

        updated = self._plates + new_plates
        write_log(self.storage, ALERT_LOG_KEY, updated)
        self._plates = updated

        print(f"[AlertLog] Watchlist match logged: {', '.join(new_plates)}")
        return new_plates

    def reset(self) -> None:
        """Forget the in-memory plates (storage is erased by erase_stored_logs)"""
        self._plates = []
