"""Tracing and metric helpers on top of Opik; both are no-ops when Opik is off."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from lunite.observability.client import get_opik_client

logger = logging.getLogger(__name__)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional[Any]]:
    """Wrap a block of work in an Opik trace, attaching the error message if it raises."""
    client = get_opik_client()
    opik_trace = None

    if client:
        trace_metadata = {key: value for key, value in (metadata or {}).items() if value is not None}
        if user_id:
            trace_metadata.setdefault("user_id", str(user_id))
        if request_id:
            trace_metadata.setdefault("request_id", request_id)
        try:
            opik_trace = client.trace(name=name, metadata=trace_metadata or None)
        except Exception as exc:  # pragma: no cover - depends on the Opik backend
            logger.debug("Unable to start trace %s: %s", name, exc)

    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace is not None:
            try:
                opik_trace.update(error_info={"message": str(exc)})
            except Exception:  # pragma: no cover
                logger.debug("Unable to attach error to trace %s", name, exc_info=True)
        raise
    finally:
        if opik_trace is not None:
            try:
                opik_trace.end()
            except Exception:  # pragma: no cover
                logger.debug("Unable to close trace %s", name, exc_info=True)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a single metric value as a short-lived trace."""
    payload: Dict[str, Any] = dict(metadata or {})
    payload["value"] = value
    with trace(f"metric:{name}", metadata=payload):
        pass
