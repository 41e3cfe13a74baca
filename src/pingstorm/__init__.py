__all__ = [
    "StressRun",
    "RunConfig",
    "PingLauncher",
    "ProbeOptions",
    "StatsStore",
    "WorkerSupervisor",
    "build_report",
    "render_report",
]


from .config import RunConfig
from .core import StressRun
from .launcher import PingLauncher, ProbeOptions
from .metrics import build_report
from .rendering import render_report
from .store import StatsStore
from .supervisor import WorkerSupervisor
