"""
Quick sanity run: flood the loopback interface with two workers for a few seconds.
Run: sudo uv run examples/flood_localhost.py
(ping -f with a sub-200ms interval needs root.)
"""
import asyncio
import os

from pingstorm import PingLauncher, ProbeOptions, RunConfig, StressRun, render_report
from pingstorm.logging_config import setup_logging


async def main():
    setup_logging(level=os.getenv("PINGSTORM_LOG_LEVEL", "INFO"))

    config = RunConfig.create(
        target=os.getenv("PINGSTORM_TARGET", "127.0.0.1"),
        duration_s=int(os.getenv("PINGSTORM_DURATION_S", "3")),
        worker_count=2,
    )
    launcher = PingLauncher(ProbeOptions(interval_s=0.002))

    report = await StressRun(config, launcher=launcher).run()
    print(render_report(report))


if __name__ == "__main__":
    asyncio.run(main())
