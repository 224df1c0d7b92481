"""
Tests for configuration, structured logging and command-line parsing
"""

import json
import logging
import sys

import pytest

from bank_demo.config import BankDemoConfig, get_config, reload_config
from bank_demo.logging_config import JSONFormatter, setup_logging, log_action
from run import main, parse_args


class TestBankDemoConfig:
    """Test settings loading"""

    def test_defaults(self, monkeypatch):
        """Test default values"""
        for name in ("STORAGE_BACKEND", "DATABASE_PATH", "API_HOST", "API_PORT", "LOG_LEVEL", "LOG_FORMAT"):
            monkeypatch.delenv(f"BANK_DEMO_{name}", raising=False)

        config = BankDemoConfig(_env_file=None)
        assert config.storage_backend == "memory"
        assert config.database_path == "bank_demo.db"
        assert config.api_port == 8080
        assert config.log_format == "json"

    def test_environment_overrides(self, monkeypatch):
        """Test BANK_DEMO_* environment variables"""
        monkeypatch.setenv("BANK_DEMO_STORAGE_BACKEND", "sqlite")
        monkeypatch.setenv("BANK_DEMO_DATABASE_PATH", "/tmp/bank.db")
        monkeypatch.setenv("BANK_DEMO_API_PORT", "9090")

        config = BankDemoConfig(_env_file=None)
        assert config.storage_backend == "sqlite"
        assert config.database_path == "/tmp/bank.db"
        assert config.api_port == 9090

    def test_reload_config(self, monkeypatch):
        """Test that reload picks up a changed environment"""
        monkeypatch.setenv("BANK_DEMO_LOG_LEVEL", "DEBUG")
        try:
            assert reload_config().log_level == "DEBUG"
            assert get_config().log_level == "DEBUG"
        finally:
            monkeypatch.delenv("BANK_DEMO_LOG_LEVEL")
            reload_config()


class TestLogging:
    """Test structured log output"""

    def make_record(self, message="hello", **fields):
        record = logging.LogRecord("bank_demo.test", logging.INFO, __file__, 1, message, (), None)
        for key, value in fields.items():
            setattr(record, key, value)
        return record

    def test_json_formatter(self):
        """Test that structured fields are emitted and empty ones dropped"""
        record = self.make_record(action="deposit", resource="account:A1")
        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["module"] == "bank_demo.test"
        assert entry["message"] == "hello"
        assert entry["action"] == "deposit"
        assert entry["resource"] == "account:A1"
        assert "correlation_id" not in entry
        assert "timestamp" in entry

    def test_json_formatter_exception(self):
        """Test that exception text is included"""
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "bank_demo.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        entry = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]

    def test_setup_logging(self):
        """Test handler setup for both formats"""
        logger = setup_logging("DEBUG", "json", logger_name="bank_demo.setup_test")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

        logger = setup_logging("WARNING", "text", logger_name="bank_demo.setup_test")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_logging_invalid_level(self):
        """Test that an unknown level is refused clearly"""
        with pytest.raises(ValueError, match="Invalid log level: LOUD"):
            setup_logging("LOUD", logger_name="bank_demo.setup_test")

    def test_log_action(self, caplog):
        """Test that log_action attaches structured fields"""
        logger = logging.getLogger("bank_demo.action_test")
        logger.propagate = True

        with caplog.at_level(logging.INFO, logger="bank_demo.action_test"):
            log_action(logger, "info", "Deposit recorded", action="deposit",
                       resource="account:A1", extra={"amount": "10"})

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.getMessage() == "Deposit recorded"
        assert record.action == "deposit"
        assert record.extra == {"amount": "10"}

    def test_log_action_respects_level(self, caplog):
        """Test that disabled levels are skipped"""
        logger = logging.getLogger("bank_demo.quiet_test")
        logger.propagate = True

        with caplog.at_level(logging.WARNING, logger="bank_demo.quiet_test"):
            log_action(logger, "info", "not shown")

        assert caplog.records == []


class TestCommandLine:
    """Test run.py argument parsing"""

    def test_defaults(self):
        """Test no flags"""
        args = parse_args([])
        assert not args.in_memory
        assert args.sqlite is None
        assert args.port is None

    def test_sqlite_flag(self):
        """Test selecting the SQLite backend"""
        args = parse_args(["--sqlite", "bank.db", "--port", "9000", "--log-level", "DEBUG"])
        assert args.sqlite == "bank.db"
        assert args.port == 9000
        assert args.log_level == "DEBUG"

    def test_backends_are_exclusive(self):
        """Test that --in-memory and --sqlite cannot be combined"""
        with pytest.raises(SystemExit):
            parse_args(["--in-memory", "--sqlite", "bank.db"])


class TestMain:
    """Test run.main wiring without starting a server"""

    @pytest.fixture(autouse=True)
    def isolated(self, monkeypatch):
        """Fresh configuration, a fake server, and the app logger restored afterwards"""
        self.config = BankDemoConfig(_env_file=None, log_level="INFO")
        self.served = {}
        monkeypatch.setattr("run.get_config", lambda: self.config)
        monkeypatch.setattr("run.uvicorn.run", lambda app, **kwargs: self.served.update(kwargs, app=app))

        logger = logging.getLogger("bank_demo")
        saved = (logger.handlers[:], logger.level, logger.propagate)
        yield
        logger.handlers[:], logger.level, logger.propagate = saved

    def test_log_level_reaches_server(self):
        """Test that --log-level is passed on to uvicorn"""
        assert main(["--in-memory", "--port", "9001", "--log-level", "debug"]) == 0

        assert self.served["port"] == 9001
        assert self.served["log_level"] == "debug"
        assert self.config.log_level == "debug"

    def test_invalid_log_level(self):
        """Test that an unknown level stops startup with exit code 1"""
        assert main(["--log-level", "LOUD"]) == 1
        assert self.served == {}

    def test_unknown_backend(self):
        """Test that an unknown storage backend stops startup"""
        self.config.storage_backend = "mongo"
        assert main([]) == 1
        assert self.served == {}
