"""
PlateWatch - Traffic Violation & Watchlist Plate Tracking

Sends traffic scene photographs to a hosted vision model to read license
plates and describe violations, and keeps a persisted detection history
and watchlist alert log.
"""

__version__ = "1.0.0"

from platewatch.schemas import (
    DetectionRecord,
    ImageUpload,
    ProcessOutcome,
    SessionSnapshot,
)
from platewatch.session import SessionManager
from platewatch.storage import JsonFileStore, MemoryStore
from platewatch.vision.inference_client import InferenceClient

__all__ = [
    "DetectionRecord",
    "ImageUpload",
    "ProcessOutcome",
    "SessionSnapshot",
    "SessionManager",
    "JsonFileStore",
    "MemoryStore",
    "InferenceClient",
]
