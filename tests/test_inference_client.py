"""
Tests for the Inference Client

The OpenAI client is replaced with a Mock; no network calls are made.
"""

import asyncio
import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

import pytest

from platewatch.config import PlateWatchConfig
from platewatch.errors import ConfigurationError
from platewatch.vision.inference_client import (
    InferenceClient,
    PLATE_PROMPT,
    VIOLATION_PROMPT,
    VIOLATION_FAILURE_MESSAGE,
    encode_image,
)


def make_openai(text=None, error=None):
    """Mock async OpenAI client answering every request with `text`"""
    client = Mock()
    if error is not None:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        response = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=text))]
        )
        client.chat.completions.create = AsyncMock(return_value=response)
    return client


@pytest.fixture
def config():
    return PlateWatchConfig(openai_api_key="test-key", openai_model="test-model")


class TestEncoding:
    """Test image transport encoding"""

    def test_data_url(self, sample_image):
        url = encode_image(sample_image)
        prefix = "data:image/png;base64,"
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]) == sample_image.content


class TestExtractPlates:
    """Test plate extraction"""

    def test_parses_comma_separated_list(self, config, sample_image):
        client = InferenceClient(config, client=make_openai(" ABC-123, xyz-9 ,, "))
        plates = asyncio.run(client.extract_plates(sample_image))
        assert plates == ["ABC-123", "xyz-9"]

    def test_empty_response_is_no_plates(self, config, sample_image):
        client = InferenceClient(config, client=make_openai(""))
        assert asyncio.run(client.extract_plates(sample_image)) == []

    def test_missing_response_is_no_plates(self, config, sample_image):
        client = InferenceClient(config, client=make_openai(None))
        assert asyncio.run(client.extract_plates(sample_image)) == []

    def test_service_error_degrades_to_no_plates(self, config, sample_image, capsys):
        client = InferenceClient(config, client=make_openai(error=RuntimeError("503 upstream")))
        assert asyncio.run(client.extract_plates(sample_image)) == []
        assert "Error in extract_plates" in capsys.readouterr().out

    def test_request_carries_image_and_prompt(self, config, sample_image):
        openai_client = make_openai("ABC-123")
        client = InferenceClient(config, client=openai_client)
        asyncio.run(client.extract_plates(sample_image))

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        content = kwargs["messages"][0]["content"]
        image_part = next(p for p in content if p["type"] == "image_url")
        text_part = next(p for p in content if p["type"] == "text")
        assert image_part["image_url"]["url"].startswith("data:image/png;base64,")
        assert text_part["text"] == PLATE_PROMPT


class TestClassifyViolations:
    """Test violation classification"""

    def test_returns_trimmed_text(self, config, sample_image):
        client = InferenceClient(config, client=make_openai("\n- No helmet\n- Wrong lane\n"))
        violation = asyncio.run(client.classify_violations(sample_image))
        assert violation == "- No helmet\n- Wrong lane"

    def test_blank_response_is_none_sentinel(self, config, sample_image):
        client = InferenceClient(config, client=make_openai("   "))
        assert asyncio.run(client.classify_violations(sample_image)) == "NONE"

    def test_service_error_surfaces_failure_message(self, config, sample_image):
        client = InferenceClient(config, client=make_openai(error=TimeoutError("timed out")))
        violation = asyncio.run(client.classify_violations(sample_image))
        assert violation == VIOLATION_FAILURE_MESSAGE

    def test_uses_violation_prompt(self, config, sample_image):
        openai_client = make_openai("NONE")
        client = InferenceClient(config, client=openai_client)
        asyncio.run(client.classify_violations(sample_image))

        content = openai_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert any(p.get("text") == VIOLATION_PROMPT for p in content)


class TestUninitializedClient:
    """Test fail-fast behaviour without a credential"""

    def test_no_api_key(self, sample_image):
        client = InferenceClient(PlateWatchConfig(openai_api_key=None))
        assert not client.is_initialized

        with pytest.raises(ConfigurationError):
            asyncio.run(client.extract_plates(sample_image))
        with pytest.raises(ConfigurationError):
            asyncio.run(client.classify_violations(sample_image))

    def test_client_construction_failure(self, config):
        with patch("openai.AsyncOpenAI", side_effect=RuntimeError("bad key")):
            client = InferenceClient(config)
        assert not client.is_initialized

    def test_constructs_async_openai_client(self, config):
        with patch("openai.AsyncOpenAI") as async_openai:
            client = InferenceClient(config)
        async_openai.assert_called_once_with(api_key="test-key")
        assert client.is_initialized
