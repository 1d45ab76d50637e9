"""
Tests for environment configuration
"""

from platewatch.config import PlateWatchConfig


class TestFromEnv:
    """Test reading settings from the environment"""

    def test_numeric_values_parsed(self, monkeypatch):
        monkeypatch.setenv("PLATEWATCH_API_PORT", "9000")
        monkeypatch.setenv("PLATEWATCH_OPENAI_TEMPERATURE", "0.5")
        monkeypatch.setenv("PLATEWATCH_MAX_UPLOAD_BYTES", "2048")

        config = PlateWatchConfig.from_env()
        assert config.api_port == 9000
        assert config.openai_temperature == 0.5
        assert config.max_upload_bytes == 2048

    def test_malformed_number_falls_back_to_default(self, monkeypatch, capsys):
        monkeypatch.setenv("PLATEWATCH_API_PORT", "abc")
        monkeypatch.setenv("PLATEWATCH_OPENAI_MAX_TOKENS", "3.5")

        config = PlateWatchConfig.from_env()

        assert config.api_port == 8000
        assert config.openai_max_tokens == 300
        out = capsys.readouterr().out
        assert "Invalid value for PLATEWATCH_API_PORT" in out
        assert "Invalid value for PLATEWATCH_OPENAI_MAX_TOKENS" in out

    def test_empty_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("PLATEWATCH_OPENAI_TEMPERATURE", "  ")
        assert PlateWatchConfig.from_env().openai_temperature == 0.0
