"""
I/O context tagging for tracing.

A thread-local context records which logical workload the current thread's
reads belong to, so external tracing can attribute kernel I/O. Observers may
subscribe to page-read notifications. None of this affects scan results:
observer failures are logged and dropped.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from enum import IntEnum
from typing import Callable, Dict, Iterator, List

from .utils.logging import get_logger

logger = get_logger(__name__)


class IoContext(IntEnum):
    """Logical workload an I/O is attributed to."""
    SEARCH = 0
    PREFETCH = 1
    INSERT = 2
    COMPACTION = 3
    OTHER = 4


# Short labels, 15 visible chars max
CONTEXT_LABELS: Dict[IoContext, str] = {
    IoContext.SEARCH: "pa:search",
    IoContext.PREFETCH: "pa:prefetch",
    IoContext.INSERT: "pa:insert",
    IoContext.COMPACTION: "pa:compact",
    IoContext.OTHER: "pa:other",
}

# Observer signature: (event name, fields)
Observer = Callable[[str, Dict[str, int]], None]

_state = threading.local()
_observers: List[Observer] = []
_observers_lock = threading.Lock()


def get_io_context() -> IoContext:
    """Current thread's I/O context (OTHER if never set)."""
    return getattr(_state, "context", IoContext.OTHER)


def set_io_context(ctx: IoContext) -> None:
    """Set the current thread's I/O context and notify observers."""
    _state.context = IoContext(ctx)
    notify("io_context", context=int(ctx))


def context_label(ctx: IoContext) -> str:
    return CONTEXT_LABELS.get(ctx, CONTEXT_LABELS[IoContext.OTHER])


@contextmanager
def io_context(ctx: IoContext) -> Iterator[IoContext]:
    """Temporarily switch the I/O context, restoring the previous one."""
    previous = get_io_context()
    set_io_context(ctx)
    try:
        yield ctx
    finally:
        set_io_context(previous)


def add_observer(observer: Observer) -> None:
    with _observers_lock:
        _observers.append(observer)


def remove_observer(observer: Observer) -> None:
    with _observers_lock:
        if observer in _observers:
            _observers.remove(observer)


def notify(event: str, **fields: int) -> None:
    """Send an event to every observer."""
    with _observers_lock:
        observers = list(_observers)
    for observer in observers:
        try:
            observer(event, fields)
        except Exception as e:
            logger.warning(f"Observer {observer!r} failed on {event}: {e}")
