"""Invocation-scoped correlation context and stage logging."""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
call_sid_var: ContextVar[Optional[str]] = ContextVar("call_sid", default=None)
stage_var: ContextVar[Optional[str]] = ContextVar("stage", default=None)


def set_request_context(request_id: str | None = None, call_sid: str | None = None) -> None:
    """Set correlation identifiers for the current invocation.

    Only the identifiers that are passed are updated.

    Args:
        request_id: Webhook delivery / request identifier
        call_sid: Provider call identifier
    """
    if request_id is not None:
        request_id_var.set(request_id)
    if call_sid is not None:
        call_sid_var.set(call_sid)


def get_request_id() -> str | None:
    """Get the current request ID."""
    return request_id_var.get()


def get_call_sid() -> str | None:
    """Get the call SID being processed by the current invocation."""
    return call_sid_var.get()


def get_stage() -> str | None:
    """Get the pipeline stage currently executing."""
    return stage_var.get()


def clear_request_context() -> None:
    """Clear all correlation identifiers."""
    request_id_var.set(None)
    call_sid_var.set(None)
    stage_var.set(None)


def safe_preview(value: Any, limit: int = 160) -> str:
    """Truncate a value for log output."""
    if not value:
        return ""
    text = str(value)
    return text[:limit] + "…" if len(text) > limit else text


@contextmanager
def log_stage(logger: logging.Logger, stage: str, **fields: Any) -> Iterator[dict[str, Any]]:
    """Log start/ok/error events around a pipeline stage.

    The yielded dict can be filled with result fields that are attached to the
    ``<stage>:ok`` event. Exceptions are logged and re-raised; the caller
    decides whether they are fatal.

    Usage:
        with log_stage(logger, "transcribe", url=preview) as result:
            transcript = await gateway.transcribe(url)
            result["transcript_chars"] = len(transcript.text)
    """
    token = stage_var.set(stage)
    started = time.perf_counter()
    result: dict[str, Any] = {}
    logger.info(f"{stage}:start", extra=fields)
    try:
        yield result
    except Exception as e:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        logger.warning(
            f"{stage}:error",
            extra={**fields, "ms": elapsed_ms, "error_type": type(e).__name__, "error_message": str(e)},
        )
        raise
    else:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        logger.info(f"{stage}:ok", extra={**fields, **result, "ms": elapsed_ms})
    finally:
        stage_var.reset(token)
