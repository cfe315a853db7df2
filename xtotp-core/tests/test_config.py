"""
Unit Tests for Configuration and Logging
========================================
"""

import logging

import pytest
import structlog

from xtotp_core.board import CodeBoard
from xtotp_core.config import XtotpConfig, create_backend, open_board, open_store
from xtotp_core.exceptions import ValidationError
from xtotp_core.log import REDACTED, redact_secrets, setup_logging
from xtotp_core.otp import FixedClock
from xtotp_core.store import DirectoryBackend, InMemoryBackend, VaultBackend


@pytest.fixture(autouse=True)
def restore_logging():
    """open_store and setup_logging reconfigure the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestConfig:
    """Tests for environment-driven settings."""
    
    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XTOTP_BACKEND", "Directory")
        monkeypatch.setenv("XTOTP_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("XTOTP_NAMESPACE", "test.entries")
        monkeypatch.setenv("XTOTP_LOG_JSON", "true")
        monkeypatch.setenv("XTOTP_RETRY_ATTEMPTS", "5")
        
        config = XtotpConfig.from_env()
        
        assert config.backend == "directory"
        assert config.data_dir == str(tmp_path)
        assert config.namespace == "test.entries"
        assert config.log_json is True
        assert config.retry_policy.max_attempts == 5
    
    def test_vault_settings(self, monkeypatch):
        monkeypatch.setenv("XTOTP_BACKEND", "vault")
        monkeypatch.setenv("VAULT_ADDR", "https://vault.internal:8200")
        monkeypatch.setenv("VAULT_TOKEN", "s.token")
        monkeypatch.setenv("XTOTP_VAULT_MOUNT", "kv")
        
        backend = create_backend(XtotpConfig.from_env())
        
        assert isinstance(backend, VaultBackend)
        assert backend.url == "https://vault.internal:8200"
        assert backend.mount_point == "kv"
    
    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            XtotpConfig(backend="floppy")
    
    def test_invalid_retry_attempts(self):
        with pytest.raises(ValidationError):
            XtotpConfig(retry_attempts=0)
    
    def test_open_store_memory(self):
        store = open_store(XtotpConfig(backend="memory", namespace="ns"))
        
        assert isinstance(store.backend, InMemoryBackend)
        assert store.namespace == "ns"
        assert store.list() == []
    
    def test_open_store_directory(self, tmp_path):
        store = open_store(XtotpConfig(backend="directory", data_dir=str(tmp_path)))
        
        assert isinstance(store.backend, DirectoryBackend)
    
    @pytest.mark.parametrize("variable, field", [
        ("XTOTP_VAULT_TIMEOUT", "vault_timeout"),
        ("XTOTP_RETRY_ATTEMPTS", "retry_attempts"),
    ])
    def test_non_numeric_env(self, monkeypatch, variable, field):
        """Bad numbers in the environment are ValidationErrors naming the field."""
        monkeypatch.setenv(variable, "soon")
        
        with pytest.raises(ValidationError) as exc_info:
            XtotpConfig.from_env()
        
        assert exc_info.value.field == field
    
    def test_open_store_applies_log_settings(self):
        """open_store should configure logging from log_level and log_json."""
        open_store(XtotpConfig(backend="memory", log_level="WARNING", log_json=True))
        
        assert logging.getLogger().level == logging.WARNING
    
    def test_open_store_can_skip_logging(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        
        open_store(XtotpConfig(backend="memory", log_level="ERROR"), configure_logging=False)
        
        assert root.handlers == handlers
    
    def test_open_board_uses_retry_attempts(self, monkeypatch):
        """XTOTP_RETRY_ATTEMPTS should reach the board's retry policy."""
        monkeypatch.setenv("XTOTP_BACKEND", "memory")
        monkeypatch.setenv("XTOTP_RETRY_ATTEMPTS", "7")
        
        board = open_board(clock=FixedClock(59))
        
        assert isinstance(board, CodeBoard)
        assert board.retry_policy.max_attempts == 7
        assert board.clock.now() == 59
        assert board.refresh() == []


class TestLogging:
    """Tests for structlog setup."""
    
    def test_redact_secrets(self):
        event = {"event": "stored", "entry": "Work", "shared_secret": b"k", "uri": "otpauth://..."}
        
        result = redact_secrets(None, "info", event)
        
        assert result["shared_secret"] == REDACTED
        assert result["uri"] == REDACTED
        assert result["entry"] == "Work"
    
    def test_json_output(self, capsys):
        setup_logging(level="DEBUG", json_output=True, service_name="xtotp-test")
        
        structlog.get_logger("xtotp_core.test").info("Entry loaded", entry="Work", secret="abc")
        
        out = capsys.readouterr().out
        assert '"event": "Entry loaded"' in out
        assert '"service": "xtotp-test"' in out
        assert "abc" not in out
    
    def test_level_filtering(self, capsys):
        setup_logging(level="WARNING")
        
        structlog.get_logger("xtotp_core.test").info("hidden event")
        
        assert "hidden event" not in capsys.readouterr().out
