"""Structured access logging and in-process counters.

Events are JSON lines on the ``patron`` logger. The request id bound by the
HTTP middleware is attached to every event logged while that request runs,
so denials, degraded role lookups and blocked writes can be traced to a call.
"""
from __future__ import annotations

import json
import logging
from collections import Counter
from contextvars import ContextVar, Token
from threading import Lock
from typing import Any


logger = logging.getLogger("patron")

_request_id: ContextVar[str | None] = ContextVar("patron_request_id", default=None)

_counter_lock = Lock()
_counters: Counter[str] = Counter()


def bind_request_id(request_id: str | None) -> Token:
    return _request_id.set(request_id)


def unbind_request_id(token: Token) -> None:
    _request_id.reset(token)


def current_request_id() -> str | None:
    return _request_id.get()


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v) for v in value]
    return str(value)


def metric_key(name: str, **labels: Any) -> str:
    """``name|k1=v1,k2=v2`` with labels sorted; bare ``name`` when unlabeled."""
    if not labels:
        return name
    return name + "|" + ",".join(f"{key}={labels[key]}" for key in sorted(labels))


def incr_metric(name: str, value: int = 1, **labels: Any) -> None:
    key = metric_key(name, **{k: _jsonable(v) for k, v in labels.items()})
    with _counter_lock:
        _counters[key] += value


def metrics_snapshot() -> dict[str, int]:
    with _counter_lock:
        return dict(_counters)


def reset_metrics() -> None:
    with _counter_lock:
        _counters.clear()


def log_event(
    event: str,
    *,
    level: int = logging.INFO,
    request_id: str | None = None,
    **fields: Any,
) -> None:
    payload: dict[str, Any] = {"event": event}
    request_id = request_id or current_request_id()
    if request_id:
        payload["request_id"] = request_id
    payload.update({key: _jsonable(value) for key, value in fields.items()})
    logger.log(level, json.dumps(payload, sort_keys=True))
