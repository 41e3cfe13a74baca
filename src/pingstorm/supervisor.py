import asyncio
import logging

from .errors import TerminationError
from .launcher import ProbeLauncher, ProbeProcess
from .models import WorkerStats
from .parser import consume_markers, drain_diagnostics
from .store import StatsStore
from .utils import now

logger = logging.getLogger(__name__)


class WorkerSupervisor:
    """
    Runs one probe for at most ``duration_s`` seconds and leaves exactly one
    finalized row in the store.

    The child is killed and reaped on every exit path once it was launched.
    Finalize runs only after both stream readers have been joined, so no
    increment can land after it.
    """

    def __init__(
        self,
        index: int,
        launcher: ProbeLauncher,
        target: str,
        duration_s: float,
        stop: asyncio.Event,
        store: StatsStore,
    ) -> None:
        self.index = index
        self.launcher = launcher
        self.target = target
        self.duration_s = duration_s
        self.stop = stop
        self.store = store
        self._label = f"[W{index}] "
        self._done = asyncio.Event()

    def _should_stop(self) -> bool:
        return self.stop.is_set() or self._done.is_set()

    def _log_stderr(self, line: str) -> None:
        logger.warning(f"{self._label}probe: {line}")

    async def run(self) -> WorkerStats:
        logger.info(f"{self._label}Starting probe against {self.target}")
        probe = await self.launcher.launch(self.target)
        start = now()
        row = self.store.slot(self.index)

        readers = [
            asyncio.create_task(
                consume_markers(probe.stdout, row.add_markers, self._should_stop, self._label)
            ),
            asyncio.create_task(
                drain_diagnostics(probe.stderr, self._log_stderr, self._should_stop, self._label)
            ),
        ]
        try:
            await self._wait_until_done(start)
        finally:
            self._done.set()
            await self._shutdown(probe, readers)

        row.finalize(round((now() - start) * 1000))
        logger.info(
            f"{self._label}Finished: transmitted={row.transmitted}, received={row.received}, "
            f"bytes={row.bytes_transferred}, elapsed={row.elapsed_ms}ms"
        )
        return row

    async def _wait_until_done(self, start: float) -> None:
        remaining = self.duration_s - (now() - start)
        if remaining <= 0:
            return
        try:
            await asyncio.wait_for(self.stop.wait(), timeout=remaining)
            logger.debug(f"{self._label}Stop signal received")
        except TimeoutError:
            logger.debug(f"{self._label}Run duration elapsed")

    async def _shutdown(self, probe: ProbeProcess, readers: list[asyncio.Task]) -> None:
        try:
            probe.terminate()
        except TerminationError as e:
            logger.warning(f"{self._label}Kill not delivered, reaping anyway: {e}")

        status = await probe.wait()
        logger.debug(f"{self._label}Probe pid={probe.pid} reaped (status={status})")

        results = await asyncio.gather(*readers, return_exceptions=True)
        for r in results:
            if isinstance(r, BaseException) and not isinstance(r, asyncio.CancelledError):
                logger.error(f"{self._label}Stream reader failed: {r}")
                raise r
