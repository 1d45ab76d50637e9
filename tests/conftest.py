"""
Shared fixtures: in-memory storage, a scripted inference client, a tiny image.
"""

import pytest

from platewatch.errors import ConfigurationError
from platewatch.schemas import ImageUpload
from platewatch.storage import MemoryStore


# Smallest valid PNG header plus padding; the model is never called for real
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class FakeInferenceClient:
    """Scripted stand-in for InferenceClient"""

    def __init__(self, plates=None, violation="NONE", plate_error=None,
                 violation_error=None, initialized=True):
        self.plates = list(plates or [])
        self.violation = violation
        self.plate_error = plate_error
        self.violation_error = violation_error
        self.initialized = initialized
        self.calls = []

    @property
    def is_initialized(self):
        return self.initialized

    async def extract_plates(self, image):
        self.calls.append(("extract_plates", image))
        if not self.initialized:
            raise ConfigurationError()
        if self.plate_error:
            raise self.plate_error
        return list(self.plates)

    async def classify_violations(self, image):
        self.calls.append(("classify_violations", image))
        if not self.initialized:
            raise ConfigurationError()
        if self.violation_error:
            raise self.violation_error
        return self.violation


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def fake_client():
    return FakeInferenceClient()


@pytest.fixture
def sample_image():
    return ImageUpload(content=PNG_BYTES, mime_type="image/png", filename="scene.png")


@pytest.fixture
def client_factory():
    """Build a FakeInferenceClient with scripted answers"""
    return FakeInferenceClient
