"""
Xtotp Configuration
===================
Environment-driven settings and the store / board factories.
"""

import os
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

from .board import CodeBoard
from .exceptions import ValidationError
from .log import setup_logging
from .otp.clock import Clock
from .retry import RetryPolicy
from .store import (
    CredentialStore,
    DEFAULT_NAMESPACE,
    DirectoryBackend,
    InMemoryBackend,
    SecureBackend,
    VaultBackend,
)

BACKENDS = ("memory", "directory", "vault")

N = TypeVar("N", int, float)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: N, cast: Callable[[str], N], field_name: str) -> N:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}", field=field_name) from None


@dataclass
class XtotpConfig:
    """Settings for the credential store and ambient services."""
    backend: str = "directory"
    namespace: str = DEFAULT_NAMESPACE
    data_dir: str = field(default_factory=lambda: os.path.expanduser("~/.local/share/xtotp"))
    vault_url: Optional[str] = None
    vault_token: Optional[str] = None
    vault_mount: str = "secret"
    vault_timeout: float = 10.0
    log_level: str = "INFO"
    log_json: bool = False
    retry_attempts: int = 3

    def __post_init__(self):
        self.backend = self.backend.strip().lower()
        if self.backend not in BACKENDS:
            raise ValidationError(
                f"Unknown backend {self.backend!r}; expected one of {', '.join(BACKENDS)}",
                field="backend",
            )
        if not self.namespace:
            raise ValidationError("Namespace must not be empty", field="namespace")
        if self.retry_attempts < 1:
            raise ValidationError("retry_attempts must be at least 1", field="retry_attempts")
        if self.vault_timeout <= 0:
            raise ValidationError("vault_timeout must be positive", field="vault_timeout")

    @classmethod
    def from_env(cls) -> "XtotpConfig":
        """Build a config from XTOTP_* and VAULT_* environment variables."""
        defaults = cls()
        return cls(
            backend=os.environ.get("XTOTP_BACKEND", defaults.backend),
            namespace=os.environ.get("XTOTP_NAMESPACE", defaults.namespace),
            data_dir=os.environ.get("XTOTP_DATA_DIR", defaults.data_dir),
            vault_url=os.environ.get("VAULT_ADDR"),
            vault_token=os.environ.get("VAULT_TOKEN"),
            vault_mount=os.environ.get("XTOTP_VAULT_MOUNT", defaults.vault_mount),
            vault_timeout=_env_number(
                "XTOTP_VAULT_TIMEOUT", defaults.vault_timeout, float, "vault_timeout"
            ),
            log_level=os.environ.get("XTOTP_LOG_LEVEL", defaults.log_level),
            log_json=_env_bool("XTOTP_LOG_JSON", defaults.log_json),
            retry_attempts=_env_number(
                "XTOTP_RETRY_ATTEMPTS", defaults.retry_attempts, int, "retry_attempts"
            ),
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.retry_attempts)


def create_backend(config: XtotpConfig) -> SecureBackend:
    if config.backend == "memory":
        return InMemoryBackend()
    if config.backend == "vault":
        return VaultBackend(
            url=config.vault_url,
            token=config.vault_token,
            mount_point=config.vault_mount,
            timeout=config.vault_timeout,
        )
    return DirectoryBackend(config.data_dir)


def open_store(
    config: Optional[XtotpConfig] = None,
    configure_logging: bool = True,
) -> CredentialStore:
    """
    Open the credential store described by config.

    Args:
        config: Settings; read from the environment when omitted
        configure_logging: Apply config.log_level / config.log_json via setup_logging
    """
    config = config or XtotpConfig.from_env()
    if configure_logging:
        setup_logging(level=config.log_level, json_output=config.log_json)
    return CredentialStore(create_backend(config), namespace=config.namespace)


def open_board(
    config: Optional[XtotpConfig] = None,
    clock: Optional[Clock] = None,
    configure_logging: bool = True,
) -> CodeBoard:
    """
    Open the store and wrap it in a CodeBoard using config.retry_policy.

    Args:
        config: Settings; read from the environment when omitted
        clock: Time source; the system clock when omitted
        configure_logging: Passed through to open_store
    """
    config = config or XtotpConfig.from_env()
    store = open_store(config, configure_logging=configure_logging)
    return CodeBoard(store, clock=clock, retry_policy=config.retry_policy)
