import asyncio
import logging

from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from .config import RunConfig
from .errors import LaunchError
from .launcher import PingLauncher, ProbeLauncher
from .metrics import build_report
from .models import MetricsCallback, RunReport
from .store import StatsStore
from .supervisor import WorkerSupervisor
from .utils import GracefulKiller

logger = logging.getLogger(__name__)


class StressRun:
    def __init__(
        self,
        config: RunConfig,
        launcher: ProbeLauncher | None = None,
        use_progress_bar: bool = True,
        handle_signals: bool = True,
        metrics_callback: MetricsCallback | None = None,
    ) -> None:
        self.config = config
        self.launcher = launcher or PingLauncher()
        self.use_progress_bar = use_progress_bar
        self.handle_signals = handle_signals
        self.metrics_callback = metrics_callback

        # Runtime state
        self.stop: asyncio.Event | None = None
        self.store = StatsStore(config.worker_count)

        logger.info(
            f"Initialized run against {config.target} for {config.duration_s}s "
            f"with {config.worker_count} workers"
        )

    async def run(self) -> RunReport:
        self.stop = asyncio.Event()
        killer = GracefulKiller(self.stop) if self.handle_signals else None

        supervisors = [
            WorkerSupervisor(
                i, self.launcher, self.config.target, self.config.duration_s, self.stop, self.store
            )
            for i in range(self.config.worker_count)
        ]
        workers = [asyncio.create_task(s.run(), name=f"worker-{s.index}") for s in supervisors]

        progress = None
        if self.use_progress_bar:
            progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                TimeElapsedColumn(),
            )
            progress.start()
            progress.add_task(
                f"[cyan]Flooding {self.config.target} ({self.config.duration_s}s)...", total=None
            )

        try:
            # Wakes early if a worker fails or every worker is already done.
            await asyncio.wait(
                workers, timeout=self.config.duration_s, return_when=asyncio.FIRST_EXCEPTION
            )
        finally:
            self.stop.set()
            results = await asyncio.gather(*workers, return_exceptions=True)
            if progress:
                progress.stop()
            if killer:
                killer.restore()

        logger.info("All workers finished.")

        for i, r in enumerate(results):
            if isinstance(r, LaunchError):
                logger.error(f"[W{i}] Probe could not be launched: {r}")
                raise r
        for i, r in enumerate(results):
            if isinstance(r, BaseException):
                logger.error(f"[W{i}] Worker failed: {r!r}")
                raise r

        return build_report(self.config, self.store, self.metrics_callback)
