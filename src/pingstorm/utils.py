import asyncio
import logging
import signal
import time

logger = logging.getLogger(__name__)

# ────────────────────────────────
# Time Helpers
# ────────────────────────────────


def now() -> float:
    return time.perf_counter()


# ────────────────────────────────
# Signal Handling
# ────────────────────────────────


class GracefulKiller:
    """Raises the run's stop event on SIGINT/SIGTERM so the run ends early but still reports."""

    SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self, stop: asyncio.Event, loop: asyncio.AbstractEventLoop | None = None):
        self.kill_now = False
        self._stop = stop
        self._loop = loop or asyncio.get_running_loop()
        self._previous = {}
        for sig in self.SIGNALS:
            self._previous[sig] = signal.signal(sig, self.exit_gracefully)

    def exit_gracefully(self, signum, frame):
        logger.warning(f"Received signal {signum}, stopping probes...")
        self.kill_now = True
        self._loop.call_soon_threadsafe(self._stop.set)

    def restore(self) -> None:
        for sig, handler in self._previous.items():
            # None means the old handler was not installed from Python
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()
