"""
Tests for environment-driven configuration and logging setup.
"""

import pytest
import structlog
from structlog.testing import capture_logs
from pydantic import ValidationError

from api.config import APIConfig
from utilities.config import LibraryConfig
from utilities.logger import AuditLogger, setup_logging


class TestLibraryConfig:
    """Test cases for LibraryConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LIBRARY_SEED_DEMO_BOOKS", raising=False)
        config = LibraryConfig(_env_file=None)
        assert config.max_books == 25
        assert config.seed_demo_books is True
        assert config.demo_owner_id == "demo123"
        assert config.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LIBRARY_MAX_BOOKS", "50")
        monkeypatch.setenv("LIBRARY_LOG_LEVEL", "debug")
        monkeypatch.setenv("LIBRARY_LOG_FORMAT", "CONSOLE")
        config = LibraryConfig(_env_file=None)
        assert config.max_books == 50
        assert config.log_level == "DEBUG"
        assert config.log_format == "console"

    @pytest.mark.parametrize("field, value", [
        ("max_books", 0),
        ("max_books", 10001),
        ("log_level", "LOUD"),
        ("log_format", "xml"),
        ("demo_owner_id", "  "),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            LibraryConfig(_env_file=None, **{field: value})

    def test_log_file_path(self, tmp_path):
        config = LibraryConfig(_env_file=None, log_file=str(tmp_path / "app.log"))
        assert config.get_log_file_path() == tmp_path / "app.log"


class TestAPIConfig:
    """Test cases for APIConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("API_BCRYPT_ROUNDS", raising=False)
        config = APIConfig(_env_file=None)
        assert config.token_issuer == "BookTracker"
        assert config.token_audience == "BookTrackerUsers"
        assert config.access_token_expire_minutes == 7 * 24 * 60
        assert config.bcrypt_rounds == 12
        assert config.allow_anonymous is False
        assert config.max_page_size == 100

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("API_PORT", "9000")
        monkeypatch.setenv("API_ALLOW_ANONYMOUS", "true")
        config = APIConfig(_env_file=None)
        assert config.port == 9000
        assert config.allow_anonymous is True


class TestLogging:
    """Test cases for structured logging."""

    def test_setup_logging_writes_file(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(log_level="INFO", log_format="json", log_file=log_file)
        structlog.get_logger("tests").info("hello", owner_id="A")
        assert log_file.exists()

    def test_audit_logger_binds_context(self):
        audit = AuditLogger().bind_context(request_id="r-1")
        assert audit.context == {"request_id": "r-1"}

        with capture_logs() as logs:
            audit.log_book_added("b-1", "A", "Dune", 1)
            audit.log_book_removed("b-1", "A", removed=False)

        assert logs[0]["event"] == "Book added"
        assert logs[0]["request_id"] == "r-1"
        assert logs[1]["event"] == "Book removal found nothing"
        assert audit.clear_context().context == {}
