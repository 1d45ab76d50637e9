"""
PlateWatch Configuration

Inference, storage and server settings, read from the environment.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _env_number(name: str, default, cast):
    """Read a numeric env var, falling back to the default if it is malformed"""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        print(f"Warning: Invalid value for {name} ({raw!r}), using default {default}")
        return default


@dataclass
class PlateWatchConfig:
    """Configuration for the PlateWatch operator service"""

    # Inference settings
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = 300
    openai_temperature: float = 0.0
    image_detail: str = "high"  # "low", "high" or "auto"

    # Storage
    data_dir: str = "platewatch/data"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    max_upload_bytes: int = 20 * 1024 * 1024  # 20MB

    @property
    def storage_file(self) -> str:
        """Path of the key-value file that holds both logs"""
        return os.path.join(self.data_dir, "platewatch_storage.json")

    @classmethod
    def from_env(cls) -> "PlateWatchConfig":
        """Create config from environment variables (and .env, if present)"""
        load_dotenv()
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("PLATEWATCH_OPENAI_MODEL", "gpt-4o-mini"),
            openai_max_tokens=_env_number("PLATEWATCH_OPENAI_MAX_TOKENS", 300, int),
            openai_temperature=_env_number("PLATEWATCH_OPENAI_TEMPERATURE", 0.0, float),
            image_detail=os.getenv("PLATEWATCH_IMAGE_DETAIL", "high"),
            data_dir=os.getenv("PLATEWATCH_DATA_DIR", "platewatch/data"),
            api_host=os.getenv("PLATEWATCH_API_HOST", "0.0.0.0"),
            api_port=_env_number("PLATEWATCH_API_PORT", 8000, int),
            max_upload_bytes=_env_number("PLATEWATCH_MAX_UPLOAD_BYTES", 20 * 1024 * 1024, int),
        )
