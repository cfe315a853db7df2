"""
Logging Setup
=============
structlog configuration shared by every xtotp-core module.

Usage:
    from xtotp_core.log import setup_logging
    
    setup_logging(level="INFO", json_output=True)
"""

import logging
import sys
from typing import Any, Dict

import structlog

# Keys that must never reach a log sink
SECRET_KEYS = frozenset({"shared_secret", "secret", "secret_b32", "uri", "token"})

REDACTED = "[REDACTED]"


def redact_secrets(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor replacing secret-bearing values."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    service_name: str = "xtotp",
) -> logging.Logger:
    """
    Configure structlog on top of stdlib logging.
    
    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines instead of console output
        service_name: Bound to every event as "service"
        
    Returns:
        Configured root logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=service_name)
    
    structlog.get_logger(__name__).info("Logging configured", level=level.upper(), json=json_output)
    return root_logger
