"""
PlateWatch Session Manager

Owns the operator session: the selected image, the watchlist text, the
latest results, and the two persisted logs. Storage and the inference
client are injected so either can be replaced by an in-memory fake.
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from platewatch.errors import (
    ConfirmationRequiredError,
    NoImageSelectedError,
    OperationInProgressError,
    StorageError,
)
from platewatch.logs import AlertLog, DetectionHistory, erase_stored_logs
from platewatch.plates.normalize import has_violation, match_watchlist, parse_watchlist
from platewatch.schemas import DetectionRecord, ImageUpload, ProcessOutcome, SessionSnapshot


UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred during analysis."
CLEARED_STATUS_MESSAGE = "Database and logs successfully cleared."


@dataclass
class SessionState:
    """Transient per-image state (never persisted)"""
    image: Optional[ImageUpload] = None
    preview: Optional[ImageUpload] = None
    processed_image: Optional[ImageUpload] = None
    watchlist_text: str = ""
    detected_plates: List[str] = field(default_factory=list)
    violations: str = ""
    error: Optional[str] = None
    status_message: Optional[str] = None
    is_loading: bool = False


class SessionManager:
    """
    Orchestrates image processing and maintains the persisted logs.

    Usage:
        manager = SessionManager(storage=JsonFileStore(path), client=InferenceClient(config))
        manager.select_image(ImageUpload(content, "image/jpeg"))
        outcome = await manager.process_image("XYZ-123")
    """

    def __init__(self, storage, client):
        self.storage = storage
        self.client = client
        self.state = SessionState()
        self.history = DetectionHistory(storage)
        self.alert_log = AlertLog(storage)
        self.load()

    def load(self) -> None:
        """Load both persisted logs; a bad log is discarded, never raised"""
        self.history.load()
        self.alert_log.load()
        print(
            f"[SessionManager] Loaded {len(self.history)} detection records, "
            f"{len(self.alert_log)} alert log entries"
        )

    # Operator input

    def select_image(self, image: ImageUpload) -> None:
        """Select a new image and reset the previous image's results"""
        if self.state.is_loading:
            raise OperationInProgressError()

        self.state.image = image
        self.state.preview = image
        self.state.detected_plates = []
        self.state.violations = ""
        self.state.error = None
        self.state.processed_image = None

    def set_watchlist_text(self, text: str) -> None:
        if self.state.is_loading:
            raise OperationInProgressError()
        self.state.watchlist_text = text or ""

    def clear_watchlist_input(self) -> None:
        """Clear the operator watchlist text (logs are untouched)"""
        if self.state.is_loading:
            raise OperationInProgressError()
        self.state.watchlist_text = ""

    def dismiss_status(self) -> None:
        self.state.status_message = None

    # Processing

    async def process_image(self, watchlist_text: Optional[str] = None) -> ProcessOutcome:
        """
        Analyze the selected image and update the logs.

        Args:
            watchlist_text: Watchlist to check against (defaults to the
                session's watchlist text)

        Returns:
            ProcessOutcome; failures are reported in it, not raised

        Raises:
            OperationInProgressError: if another image is still being processed
        """
        if self.state.is_loading:
            raise OperationInProgressError()

        if watchlist_text is not None:
            self.set_watchlist_text(watchlist_text)

        image = self.state.image
        if image is None or self.state.preview is None:
            message = NoImageSelectedError().message
            self.state.error = message
            return ProcessOutcome(success=False, error=message)

        # Matched against the watchlist as it was when processing started
        watchlist = parse_watchlist(self.state.watchlist_text)

        self.state.is_loading = True
        self.state.error = None
        self.state.detected_plates = []
        self.state.violations = ""
        self.state.processed_image = self.state.preview

        try:
            # Both calls settle before either failure is reported
            results = await asyncio.gather(
                self.client.extract_plates(image),
                self.client.classify_violations(image),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            plates, violation = results
        except Exception as e:
            print(f"[SessionManager] Error processing image: {e}")
            message = str(e) or UNEXPECTED_ERROR_MESSAGE
            self.state.error = message
            return ProcessOutcome(success=False, error=message)
        finally:
            self.state.is_loading = False

        plates = list(plates)
        self.state.detected_plates = plates
        self.state.violations = violation

        record = None
        if plates or has_violation(violation):
            record = DetectionRecord.create(plates, violation)
            self.history.append(record)

        new_alerts = self.alert_log.add_matches(match_watchlist(plates, watchlist))

        return ProcessOutcome(
            success=True,
            plates=plates,
            violation=violation,
            record=record,
            new_alerts=new_alerts,
        )

    # Reset

    def clear_all_data(self, confirmed: bool = False) -> bool:
        """
        Erase both logs and all transient state.

        Args:
            confirmed: Operator confirmed the irreversible reset

        Returns:
            True if data was cleared, False if not confirmed
        """
        if not confirmed:
            return False
        if self.state.is_loading:
            raise OperationInProgressError()

        # Storage first: if the erase fails, nothing in memory has changed
        try:
            erase_stored_logs(self.storage)
        except OSError as e:
            print(f"[SessionManager] Failed to clear stored logs: {e}")
            raise StorageError(f"Failed to clear stored data: {e}")

        self.history.reset()
        self.alert_log.reset()
        self.state = SessionState(
            watchlist_text=self.state.watchlist_text,
            status_message=CLEARED_STATUS_MESSAGE,
        )

        print("[SessionManager] Detection history and alert log cleared")
        return True

    def require_confirmed_clear(self, confirmed: bool) -> None:
        """clear_all_data for callers that must report a missing confirmation"""
        if not self.clear_all_data(confirmed):
            raise ConfirmationRequiredError()

    # Display

    def snapshot(self) -> SessionSnapshot:
        state = self.state
        history = self.history.records
        alert_log = self.alert_log.plates
        return SessionSnapshot(
            has_image=state.image is not None,
            image_filename=state.image.filename if state.image else None,
            has_processed_image=state.processed_image is not None,
            watchlist_text=state.watchlist_text,
            detected_plates=list(state.detected_plates),
            violations=state.violations,
            has_violation=has_violation(state.violations),
            error=state.error,
            status_message=state.status_message,
            is_loading=state.is_loading,
            history=history,
            alert_log=alert_log,
            can_process=state.image is not None and not state.is_loading,
            can_clear_watchlist=not state.is_loading and len(state.watchlist_text) > 0,
            can_clear_data=not state.is_loading and (len(history) > 0 or len(alert_log) > 0),
        )
