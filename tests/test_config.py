from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from interview_coach import check_env
from interview_coach.config import OPTIONAL_VARS, REQUIRED_VARS, load_settings
from interview_coach.errors import ConfigurationError
from interview_coach.logging_setup import setup_logging
from interview_coach.main import create_app


@pytest.fixture
def clean_env(monkeypatch):
    for var in list(REQUIRED_VARS) + list(OPTIONAL_VARS):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("interview_coach.config.load_dotenv", lambda *a, **k: None)
    monkeypatch.setattr("interview_coach.check_env.load_dotenv", lambda *a, **k: None)
    return monkeypatch


class TestLoadSettings:
    def test_missing_api_key_is_fatal(self, clean_env):
        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            load_settings()

    def test_create_app_refuses_to_start_without_key(self, clean_env):
        with pytest.raises(ConfigurationError):
            create_app()

    def test_defaults(self, clean_env):
        clean_env.setenv("GEMINI_API_KEY", "secret")
        settings = load_settings()
        assert settings.gemini_api_key == "secret"
        assert settings.gemini_model == "gemini-2.0-flash"
        assert settings.allowed_origin == "http://localhost:3000"
        assert settings.upload_dir == Path("uploads")
        assert settings.poll_interval == 10.0
        assert settings.poll_max_attempts == 30
        assert settings.port == 5001

    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("GEMINI_API_KEY", "secret")
        clean_env.setenv("ALLOWED_ORIGIN", "https://coach.example.com")
        clean_env.setenv("UPLOAD_DIR", str(tmp_path / "up"))
        clean_env.setenv("POLL_INTERVAL_SECONDS", "2.5")
        clean_env.setenv("POLL_MAX_ATTEMPTS", "4")
        clean_env.setenv("LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.allowed_origin == "https://coach.example.com"
        assert settings.upload_dir == tmp_path / "up"
        assert settings.poll_interval == 2.5
        assert settings.poll_max_attempts == 4
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["ten", "0", "-3"])
    def test_bad_numbers(self, clean_env, value):
        clean_env.setenv("GEMINI_API_KEY", "secret")
        clean_env.setenv("POLL_MAX_ATTEMPTS", value)
        with pytest.raises(ConfigurationError, match="POLL_MAX_ATTEMPTS"):
            load_settings()


class TestCheckEnvironment:
    def test_reports_missing(self, clean_env, capsys):
        assert check_env.check_environment() is False
        out = capsys.readouterr().out
        assert "GEMINI_API_KEY" in out
        assert "NOT SET" in out

    def test_hides_secret(self, clean_env, capsys):
        clean_env.setenv("GEMINI_API_KEY", "very-secret-value")
        assert check_env.check_environment() is True
        out = capsys.readouterr().out
        assert "very-secret-value" not in out
        assert "***HIDDEN***" in out


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root = logging.getLogger()
        handlers, level, hook = list(root.handlers), root.level, sys.excepthook
        yield
        for handler in list(root.handlers):
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)
        sys.excepthook = hook

    def test_writes_backend_and_exception_logs(self, tmp_path):
        log_file, error_file = setup_logging(tmp_path / "logs", "INFO")

        logging.getLogger("interview_coach.test").info("operational event")
        logging.getLogger("interview_coach.test").error("something broke")

        assert "operational event" in log_file.read_text()
        errors = error_file.read_text()
        assert "something broke" in errors
        assert "operational event" not in errors

    def test_uncaught_exceptions_are_logged(self, tmp_path):
        _, error_file = setup_logging(tmp_path / "logs")
        try:
            raise RuntimeError("nobody caught me")
        except RuntimeError:
            sys.excepthook(*sys.exc_info())
        assert "nobody caught me" in error_file.read_text()
