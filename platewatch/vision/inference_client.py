"""
Inference Client - Plate Reading and Violation Description

Sends a traffic-scene image to a hosted multimodal model with a fixed
instruction and parses the free-text answer.

Failure handling differs per call:
- extract_plates: service errors mean "no plates found" (returns [])
- classify_violations: service errors return a failure message as the text
Both raise ConfigurationError when the client was never initialized.
"""

import base64
from typing import Any, Dict, List, Optional

from platewatch.config import PlateWatchConfig
from platewatch.errors import ConfigurationError
from platewatch.plates.normalize import parse_plate_response, parse_violation_response
from platewatch.schemas import ImageUpload


PLATE_PROMPT = (
    "Analyze this image. Identify all vehicle license plates visible. "
    "Return only a comma-separated list of the license plate numbers. "
    "If no plates are found, return an empty string."
)

VIOLATION_PROMPT = (
    "Analyze this traffic scene image for traffic violations. "
    "Describe each violation in a few words (e.g., 'No helmet', 'Illegal lane change'). "
    "Use a bulleted list if there are multiple violations. "
    "IMPORTANT: If and only if there are absolutely no violations, return the single word 'NONE'."
)

VIOLATION_FAILURE_MESSAGE = "Failed to detect violations due to an API error."


def encode_image(image: ImageUpload) -> str:
    """Encode an image as a base64 data URL for transport"""
    payload = base64.b64encode(image.content).decode("utf-8")
    return f"data:{image.mime_type};base64,{payload}"


def _response_text(response: Any) -> Optional[str]:
    """Pull the first choice's text out of a chat completion, if any"""
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)


class InferenceClient:
    """
    Wraps the two model calls made for every processed image.

    Uses the OpenAI chat completions API with an image content part.
    """

    def __init__(self, config: Optional[PlateWatchConfig] = None, client: Any = None):
        """
        Initialize inference client.

        Args:
            config: Model and credential settings (defaults to environment)
            client: Pre-built async OpenAI-compatible client (skips construction)
        """
        self.config = config or PlateWatchConfig.from_env()
        self._client = client

        if self._client is None:
            if not self.config.openai_api_key:
                print("[InferenceClient] No OPENAI_API_KEY set; inference is unavailable")
            else:
                try:
                    import openai
                    self._client = openai.AsyncOpenAI(api_key=self.config.openai_api_key)
                    print(f"[InferenceClient] Using model {self.config.openai_model}")
                except Exception as e:
                    print(f"[InferenceClient] Failed to initialize OpenAI client. Is the API key set? {e}")
                    self._client = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def _require_client(self) -> Any:
        if self._client is None:
            raise ConfigurationError()
        return self._client

    def _build_messages(self, image: ImageUpload, prompt: str) -> List[Dict[str, Any]]:
        return [
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": encode_image(image),
                            "detail": self.config.image_detail,
                        },
                    },
                    {"type": "text", "text": prompt},
                ],
            }
        ]

    async def _generate(self, client: Any, image: ImageUpload, prompt: str) -> Optional[str]:
        response = await client.chat.completions.create(
            model=self.config.openai_model,
            messages=self._build_messages(image, prompt),
            max_tokens=self.config.openai_max_tokens,
            temperature=self.config.openai_temperature,
        )
        return _response_text(response)

    async def extract_plates(self, image: ImageUpload) -> List[str]:
        """
        Read all license plates visible in the image.

        Args:
            image: Image to analyze

        Returns:
            Plate strings in the order the model listed them ([] on any
            service failure)

        Raises:
            ConfigurationError: if the client was never initialized
        """
        client = self._require_client()

        try:
            text = await self._generate(client, image, PLATE_PROMPT)
        except Exception as e:
            print(f"[InferenceClient] Error in extract_plates: {e}")
            return []

        return parse_plate_response(text)

    async def classify_violations(self, image: ImageUpload) -> str:
        """
        Describe the traffic violations visible in the image.

        Args:
            image: Image to analyze

        Returns:
            Violation description, "NONE" if there are none, or
            VIOLATION_FAILURE_MESSAGE on service failure

        Raises:
            ConfigurationError: if the client was never initialized
        """
        client = self._require_client()

        try:
            text = await self._generate(client, image, VIOLATION_PROMPT)
        except Exception as e:
            print(f"[InferenceClient] Error in classify_violations: {e}")
            return VIOLATION_FAILURE_MESSAGE

        return parse_violation_response(text)
