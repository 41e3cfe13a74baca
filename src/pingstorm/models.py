from dataclasses import dataclass, field
from typing import Any
from collections.abc import Callable


# Each "." in ping's flood output stands for one packet of this size.
PAYLOAD_SIZE = 1024


@dataclass
class WorkerStats:
    """Raw counters of one worker.

    ``transmitted`` is not measured: in flood mode every observed marker is
    taken as both a send and a reply, so finalize copies ``received`` into it.
    Reported loss is therefore zero unless counters are read mid-run.
    """

    received: int = 0
    transmitted: int = 0
    elapsed_ms: int = 0
    finalized: bool = field(default=False, compare=False)

    @property
    def bytes_transferred(self) -> int:
        return self.received * PAYLOAD_SIZE

    def add_markers(self, count: int) -> None:
        if self.finalized:
            raise RuntimeError("cannot count markers on a finalized row")
        if count < 0:
            raise ValueError(f"marker count must be non-negative, got {count}")
        self.received += count

    def finalize(self, elapsed_ms: int) -> None:
        if self.finalized:
            raise RuntimeError("row already finalized")
        self.transmitted = self.received
        self.elapsed_ms = max(0, int(elapsed_ms))
        self.finalized = True


@dataclass
class AggregateStats:
    transmitted: int = 0
    received: int = 0
    bytes_transferred: int = 0
    elapsed_ms: int = 0


@dataclass
class LinkMetrics:
    transmitted: int
    received: int
    packets_lost: int
    loss_percentage: float
    bytes_transferred: int
    megabytes: float
    elapsed_ms: int
    bandwidth_mbps: float


@dataclass
class RunReport:
    target: str
    duration_s: int
    workers: list[LinkMetrics]
    total: LinkMetrics


# Metrics callback: callable accepting the report as a dict
MetricsCallback = Callable[[dict[str, Any]], None]
