import logging

from .models import WorkerStats

logger = logging.getLogger(__name__)


class StatsStore:
    """
    Fixed table of WorkerStats, one slot per worker index.

    Worker ``i`` is the only writer of slot ``i``. Every worker runs on the
    same event loop, so slot ownership is enough and no lock is taken.
    Readers must wait until all workers have finished.
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"store needs at least one slot, got {size}")
        self._rows = [WorkerStats() for _ in range(size)]
        logger.debug(f"Allocated statistics store with {size} slots")

    def __len__(self) -> int:
        return len(self._rows)

    def slot(self, index: int) -> WorkerStats:
        return self._rows[index]

    def rows(self) -> list[WorkerStats]:
        return list(self._rows)

    def missing(self) -> list[int]:
        return [i for i, row in enumerate(self._rows) if not row.finalized]
