# site_mirror/crawler/cancel.py
"""
Cooperative cancellation for the crawl engine.

The token is set at most once. The engine only reads it between rounds and
before taking a concurrency slot; running fetches are never interrupted.
"""
from __future__ import annotations

import asyncio
import signal
import threading
from typing import Iterable, Optional

from site_mirror.logger import logger

__all__ = ("CancellationToken", "install_signal_handlers", "remove_signal_handlers")

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class CancellationToken:
    """Single-shot stop flag, safe to set from a signal handler or another thread."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> bool:
        """Set the token. Return True for the first call only."""
        with self._lock:
            if self._event.is_set():
                return False
            self.reason = reason
            self._event.set()
            return True

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def _on_signal(token: CancellationToken, signum: int) -> None:
    name = signal.Signals(signum).name
    if token.cancel(f"received {name}"):
        logger.warning("Received %s, stopping crawler flow after in-flight pages", name)
    else:
        logger.debug("Ignoring repeated %s", name)


def install_signal_handlers(
    token: CancellationToken,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    signals: Iterable[signal.Signals] = STOP_SIGNALS,
) -> list[signal.Signals]:
    """
    Route SIGINT/SIGTERM to *token*. Returns the signals actually hooked.

    Falls back to :func:`signal.signal` where the loop does not support
    ``add_signal_handler`` (Windows).
    """
    loop = loop or asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in signals:
        try:
            loop.add_signal_handler(sig, _on_signal, token, sig)
        except NotImplementedError:
            signal.signal(sig, lambda signum, _frame: _on_signal(token, signum))
        except (RuntimeError, ValueError) as exc:
            # not in the main thread: nothing to hook
            logger.debug("Cannot install handler for %s: %s", sig.name, exc)
            continue
        installed.append(sig)
    return installed


def remove_signal_handlers(
    signals: Iterable[signal.Signals],
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> None:
    loop = loop or asyncio.get_running_loop()
    for sig in signals:
        try:
            loop.remove_signal_handler(sig)
        except NotImplementedError:
            signal.signal(sig, signal.default_int_handler if sig == signal.SIGINT else signal.SIG_DFL)
