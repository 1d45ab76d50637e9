from platewatch.vision.inference_client import (
    InferenceClient,
    PLATE_PROMPT,
    VIOLATION_PROMPT,
    VIOLATION_FAILURE_MESSAGE,
)

__all__ = [
    "InferenceClient",
    "PLATE_PROMPT",
    "VIOLATION_PROMPT",
    "VIOLATION_FAILURE_MESSAGE",
]
