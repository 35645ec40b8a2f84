"""
Structured logging and correlation IDs.

- structlog configuration with JSON/console rendering
- user_id binding via contextvars
- sensitive data redaction
"""
from __future__ import annotations

import hashlib
import logging
import os
from typing import Any, Dict

import structlog

SCHEMA_VERSION = "1.0"

_SENSITIVE_KEYS = {"token", "password", "secret", "authorization", "cookie", "set-cookie"}


def _redact_sensitive(logger, method, event_dict: Dict[str, Any]):
    try:
        for key in list(event_dict.keys()):
            try:
                if any(s in key.lower() for s in _SENSITIVE_KEYS):
                    event_dict[key] = "[REDACTED]"
            except Exception:
                continue
    except Exception:
        return event_dict
    return event_dict


def _add_schema_version(logger, method, event_dict: Dict[str, Any]):
    event_dict.setdefault("schema_version", SCHEMA_VERSION)
    return event_dict


def _hash_identifier(raw: Any) -> str:
    try:
        if raw is None:
            return ""
        text = str(raw).strip()
    except Exception:
        text = ""
    if not text:
        return ""
    digest = hashlib.sha256(text.encode("utf-8", "ignore")).hexdigest()
    return digest[:16]


def _choose_renderer(fmt: str | None = None):
    debug = str(os.getenv("DEBUG", "")).lower() in {"1", "true", "yes"}
    fmt = (fmt or os.getenv("LOG_FORMAT") or "").lower().strip()
    if debug or fmt == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_structlog_logging(min_level: str | int = "INFO", fmt: str | None = None) -> None:
    level = logging.getLevelName(min_level) if isinstance(min_level, str) else int(min_level)

    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, handlers=[logging.StreamHandler()])
    else:
        logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _redact_sensitive,
            _add_schema_version,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _choose_renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_observability_context() -> Dict[str, str]:
    try:
        ctx = structlog.contextvars.get_contextvars()
    except Exception:
        return {}
    if not isinstance(ctx, dict):
        return {}
    result: Dict[str, str] = {}
    for key in ("request_id", "user_id"):
        val = ctx.get(key)
        if val:
            result[str(key)] = str(val)
    return result


def bind_user_context(*, user_id: Any | None = None) -> None:
    """Bind a hashed user id so raw owner ids never reach the log stream."""
    user_hash = _hash_identifier(user_id)
    if user_hash:
        structlog.contextvars.bind_contextvars(user_id=user_hash)


def clear_user_context() -> None:
    structlog.contextvars.unbind_contextvars("user_id")


def emit_event(event: str, severity: str = "info", **fields: Any) -> None:
    logger = structlog.get_logger()
    fields.setdefault("event", event)
    if "user_id" in fields:
        fields["user_id"] = _hash_identifier(fields.get("user_id"))

    if severity in {"error", "critical"}:
        ctx = get_observability_context()
        request_id = str(fields.get("request_id") or ctx.get("request_id") or "").strip()
        if request_id:
            fields["request_id"] = request_id
        logger.error(**fields)
    elif severity in {"warn", "warning"}:
        logger.warning(**fields)
    else:
        logger.info(**fields)
