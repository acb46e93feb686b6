"""Structured logging with per-request ID tracking.

Uses contextvars to propagate a request_id through async call chains,
injecting it into every log record via a custom filter. Detached tasks
created with asyncio copy the current context, so submission-log failures
are tagged with the request that spawned them.
"""

import logging
import os
import uuid
from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    rid = request_id_ctx.get()
    if not rid:
        rid = uuid.uuid4().hex[:12]
        request_id_ctx.set(rid)
    return rid


def bind_request_id(rid: str | None = None) -> str:
    """Use the caller-supplied id if there is one, otherwise mint a new one."""
    request_id_ctx.set(rid or "")
    return get_request_id()


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get("") or "-"
        return True


def setup_logging() -> logging.Logger:
    logger = logging.getLogger("rubric_validator")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s: %(message)s"
        )
        handler.setFormatter(formatter)
        handler.addFilter(RequestIdFilter())
        logger.addHandler(handler)
        level = os.environ.get("RUBRIC_LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, level, logging.INFO))
    return logger


logger = setup_logging()


SENSITIVE_KEYS = ("auth", "token", "key", "secret", "pass")


def _mask_value(key: str, value: Any) -> str:
    key_lower = key.lower()
    if any(fragment in key_lower for fragment in SENSITIVE_KEYS):
        return "*" * max(6, len(str(value)))
    return str(value)


def print_settings(obj: object) -> None:
    """Log every setting at startup, masking values whose key looks secret."""
    if not obj:
        return

    data: Mapping[str, Any]
    if hasattr(obj, "model_dump"):
        data = obj.model_dump()  # type: ignore[attr-defined]
    else:
        data = vars(obj)

    logger.info("=== Settings ===")
    for key, value in data.items():
        logger.info(f"{key}: {_mask_value(key, value)}")
