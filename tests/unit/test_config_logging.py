"""
Unit Tests for Configuration and Logging

Tests environment-driven settings and the colored log formatter.
"""

import io
import logging
import pytest
import sys
import os
from pathlib import Path

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "sparck_tutor", "src"))

from sparck_tutor.config import TutorSettings, DEFAULT_TYPING_DELAY_MS
from sparck_tutor.logger import ColoredFormatter, get_logger, setup_logging


class TestTutorSettings:
    """Test suite for TutorSettings."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ["SPARCK_STATE_DIR", "SPARCK_STORAGE_KEY", "SPARCK_TYPING_DELAY_MS", "SPARCK_LOG_LEVEL"]:
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        settings = TutorSettings.from_env()
        assert settings.storage_key == "ai_sparck_state_v1"
        assert settings.typing_delay_ms == 450
        assert settings.typing_delay == pytest.approx(0.45)
        assert settings.log_level_number == logging.INFO

    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SPARCK_STATE_DIR", str(tmp_path))
        monkeypatch.setenv("SPARCK_STORAGE_KEY", "other_slot")
        monkeypatch.setenv("SPARCK_TYPING_DELAY_MS", "0")
        monkeypatch.setenv("SPARCK_LOG_LEVEL", "debug")

        settings = TutorSettings.from_env()
        assert settings.state_dir == Path(tmp_path)
        assert settings.storage_key == "other_slot"
        assert settings.typing_delay == 0
        assert settings.log_level_number == logging.DEBUG

    @pytest.mark.parametrize("raw", ["fast", "-5", "1.5"])
    def test_bad_delay_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("SPARCK_TYPING_DELAY_MS", raw)
        assert TutorSettings.from_env().typing_delay_ms == DEFAULT_TYPING_DELAY_MS

    def test_unknown_log_level(self):
        assert TutorSettings(log_level="chatty").log_level_number == logging.INFO


class TestLogging:
    """Test suite for the logging setup."""

    @pytest.fixture
    def stream(self):
        buffer = io.StringIO()
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        setup_logging(level=logging.DEBUG, stream=buffer)
        yield buffer
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in saved[0]:
            root.addHandler(handler)
        root.setLevel(saved[1])

    def test_plain_output_without_tty(self, stream):
        logging.getLogger("sparck_tutor.streak").info("streak=2")
        line = stream.getvalue()
        assert "\033[" not in line
        assert "🔥" in line
        assert "sparck_tutor.streak | streak=2" in line

    def test_structured_data_appended(self, stream):
        get_logger("sparck_tutor.chat_session").success("Logged 2 correction(s)", data={"categories": ["Spelling"]})
        output = stream.getvalue()
        assert "✅ Logged 2 correction(s)" in output
        assert "categories:" in output
        assert "Spelling" in output

    def test_json_message_pretty_printed(self):
        formatter = ColoredFormatter(use_colors=False)
        record = logging.LogRecord("x", logging.INFO, __file__, 1, '{"streak": 1}', None, None)
        assert "{'streak': 1}" in formatter.format(record)

    def test_error_includes_exception(self, stream):
        try:
            raise OSError("disk full")
        except OSError as e:
            get_logger("sparck_tutor.state_store").error("Save failed", error=e)
        output = stream.getvalue()
        assert "OSError: disk full" in output
        assert "Traceback" in output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
