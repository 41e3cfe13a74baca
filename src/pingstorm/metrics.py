import logging
from dataclasses import asdict

from .config import RunConfig
from .errors import IncompleteRunError
from .models import AggregateStats, LinkMetrics, MetricsCallback, RunReport, WorkerStats
from .store import StatsStore

logger = logging.getLogger(__name__)


def loss(transmitted: int, received: int) -> tuple[int, float]:
    packets_lost = max(transmitted - received, 0)
    if transmitted <= 0:
        return packets_lost, 0.0
    return packets_lost, packets_lost / transmitted * 100.0


def bandwidth_mbps(bytes_transferred: int, elapsed_ms: int) -> float:
    if elapsed_ms <= 0:
        return 0.0
    return bytes_transferred * 8 / elapsed_ms / 1000.0


def derive(transmitted: int, received: int, bytes_transferred: int, elapsed_ms: int) -> LinkMetrics:
    packets_lost, loss_percentage = loss(transmitted, received)
    return LinkMetrics(
        transmitted=transmitted,
        received=received,
        packets_lost=packets_lost,
        loss_percentage=loss_percentage,
        bytes_transferred=bytes_transferred,
        megabytes=bytes_transferred / 1_000_000,
        elapsed_ms=elapsed_ms,
        bandwidth_mbps=bandwidth_mbps(bytes_transferred, elapsed_ms),
    )


def aggregate(rows: list[WorkerStats]) -> AggregateStats:
    """Sum the counters; elapsed is the slowest worker since they all ran concurrently."""
    total = AggregateStats()
    for row in rows:
        total.transmitted += row.transmitted
        total.received += row.received
        total.bytes_transferred += row.bytes_transferred
        total.elapsed_ms = max(total.elapsed_ms, row.elapsed_ms)
    return total


def build_report(
    config: RunConfig,
    store: StatsStore,
    metrics_callback: MetricsCallback | None = None,
) -> RunReport:
    missing = store.missing()
    if missing:
        raise IncompleteRunError(missing)

    rows = store.rows()
    logger.debug(f"Computing report over {len(rows)} workers")

    workers = [
        derive(r.transmitted, r.received, r.bytes_transferred, r.elapsed_ms) for r in rows
    ]
    total = aggregate(rows)
    report = RunReport(
        target=config.target,
        duration_s=config.duration_s,
        workers=workers,
        total=derive(total.transmitted, total.received, total.bytes_transferred, total.elapsed_ms),
    )

    if metrics_callback:
        metrics_callback(asdict(report))

    logger.info(
        f"Report computed: received={report.total.received}, "
        f"loss={report.total.loss_percentage:.2f}%, "
        f"bandwidth={report.total.bandwidth_mbps:.2f} Mbps"
    )
    return report
