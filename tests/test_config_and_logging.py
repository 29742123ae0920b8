"""
Tests for configuration loading and logging setup.
"""

import json
import logging
import threading
from pathlib import Path

import pytest

from lifecare.utils.config_loader import AppConfig, load_config
from lifecare.utils.logging_config import JSONFormatter, LogContext, setup_logging


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for key in ("LIFECARE_CONFIG", "LIFECARE_DATA_DIR", "ADMIN_EMAIL", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        config = load_config(tmp_path / "missing.yaml")

        assert isinstance(config, AppConfig)
        assert config.server.port == 5001
        assert config.paths.data_dir == "data"
        assert config.rate_limit.booking_rpm == 10

    def test_parses_yaml(self, tmp_path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "paths:\n"
            "  data_dir: /srv/lifecare\n"
            "server:\n"
            "  port: 8080\n"
            "  cors_origins: ['https://lifecarenursing.in']\n"
            "bookings:\n"
            "  max_page_size: 50\n"
            "notifications:\n"
            "  enabled: false\n"
            "  business_name: Test Nursing\n",
            encoding="utf-8",
        )

        config = load_config(config_file)

        assert config.paths.data_dir == "/srv/lifecare"
        assert config.server.port == 8080
        assert config.server.cors_origins == ["https://lifecarenursing.in"]
        assert config.bookings.max_page_size == 50
        assert config.bookings.default_page_size == 10
        assert config.notifications.enabled is False
        assert config.notifications.business_name == "Test Nursing"
        assert config.notifications.outbox_file == "outbox.jsonl"

    def test_empty_yaml(self, tmp_path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("", encoding="utf-8")

        assert load_config(config_file).logging.level == "INFO"

    def test_env_overrides(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("LIFECARE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("ADMIN_EMAIL", "ops@lifecarenursing.in")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FORMAT", "json")

        config = load_config(tmp_path / "missing.yaml")

        assert config.paths.data_dir == str(tmp_path)
        assert config.notifications.admin_email == "ops@lifecarenursing.in"
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"

    def test_config_path_from_env(self, tmp_path, monkeypatch) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("server:\n  port: 9000\n", encoding="utf-8")
        monkeypatch.setenv("LIFECARE_CONFIG", str(config_file))

        assert load_config().server.port == 9000

    def test_repository_config_loads(self) -> None:
        config_file = Path(__file__).resolve().parent.parent / "config" / "config.yaml"

        config = load_config(config_file)

        assert config.server.port == 5001
        assert config.notifications.business_name == "Life Care Home Nursing"


class TestLogging:
    """Tests for logging setup and formatters."""

    @pytest.fixture
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield root
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def _record(self, message: str = "Booking created") -> logging.LogRecord:
        return logging.getLogger("lifecare.test").makeRecord(
            "lifecare.test", logging.INFO, __file__, 10, message, (), None, func="create"
        )

    def test_json_formatter(self) -> None:
        formatter = JSONFormatter("%(timestamp)s %(level)s %(name)s %(message)s")

        data = json.loads(formatter.format(self._record()))

        assert data["message"] == "Booking created"
        assert data["level"] == "INFO"
        assert data["logger"] == "lifecare.test"
        assert data["app"] == "lifecare"
        assert data["source"] == "test_config_and_logging:create:10"

    def test_json_formatter_includes_context_fields(self) -> None:
        formatter = JSONFormatter("%(message)s")
        logger = logging.getLogger("lifecare.test")

        with LogContext(logger, booking_id="abc123"):
            record = self._record()

        data = json.loads(formatter.format(record))
        assert data["booking_id"] == "abc123"

    def test_nested_context_fields_merge(self) -> None:
        logger = logging.getLogger("lifecare.test")

        with LogContext(logger, booking_id="abc123", step="outer"):
            with LogContext(logger, step="notify"):
                record = self._record()
            after_inner = self._record()

        assert record.context == {"booking_id": "abc123", "step": "notify"}
        assert after_inner.context == {"booking_id": "abc123", "step": "outer"}
        assert not hasattr(self._record(), "context")

    def test_contexts_exited_out_of_order_leave_no_fields(self) -> None:
        logger = logging.getLogger("lifecare.test")
        first = LogContext(logger, booking_id="A")
        second = LogContext(logger, booking_id="B", step="notify")

        first.__enter__()
        second.__enter__()
        first.__exit__(None, None, None)
        during = self._record()
        second.__exit__(None, None, None)

        assert during.context == {"booking_id": "B", "step": "notify"}
        assert not hasattr(self._record(), "context")

    def test_context_fields_stay_in_their_thread(self) -> None:
        logger = logging.getLogger("lifecare.test")
        context_open = threading.Event()
        records = []

        def log_from_other_thread():
            context_open.wait(timeout=5)
            records.append(self._record())

        worker = threading.Thread(target=log_from_other_thread)
        worker.start()
        with LogContext(logger, booking_id="A"):
            context_open.set()
            worker.join(timeout=5)
            own = self._record()

        assert own.context == {"booking_id": "A"}
        assert len(records) == 1
        assert not hasattr(records[0], "context")

    def test_setup_logging_json_to_file(self, tmp_path, restore_root_logger) -> None:
        log_file = tmp_path / "logs" / "app.log"

        setup_logging(level="DEBUG", log_format="json", log_file=log_file)
        logging.getLogger("lifecare.test").info("Quote served")
        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        messages = [json.loads(line)["message"] for line in lines]
        assert "Quote served" in messages
        assert restore_root_logger.level == logging.DEBUG
