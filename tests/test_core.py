import logging
import asyncio
import signal
import time

import pytest

from conftest import FakeLauncher
from pingstorm.config import RunConfig
from pingstorm.core import StressRun
from pingstorm.errors import LaunchError
from pingstorm.utils import GracefulKiller


def _stress(launcher, workers=3, duration_s=1, **kwargs):
    config = RunConfig.create("example.org", duration_s, worker_count=workers)
    return StressRun(config, launcher=launcher, use_progress_bar=False, handle_signals=False, **kwargs)


def test_run_merges_all_workers():
    launcher = FakeLauncher(outputs=[[b"..\n"], [b"....\n"], [b"......\n"]])
    report = asyncio.run(_stress(launcher).run())

    assert [w.received for w in report.workers] == [2, 4, 6]
    assert report.total.received == 12
    assert report.total.transmitted == 12
    assert report.total.bytes_transferred == 12 * 1024
    assert report.total.elapsed_ms == max(w.elapsed_ms for w in report.workers)
    assert report.total.loss_percentage == 0.0
    assert all(p.reaped for p in launcher.probes)
    assert launcher.targets == ["example.org"] * 3


def test_unreachable_host_still_reports():
    launcher = FakeLauncher(stderr=[[b"From 192.0.2.1 icmp_seq=1 Destination Host Unreachable\n"]])
    report = asyncio.run(_stress(launcher, workers=2).run())

    assert report.total.received == 0
    assert report.total.transmitted == 0
    assert report.total.bytes_transferred == 0
    assert report.total.loss_percentage == 0.0
    assert report.total.bandwidth_mbps == 0.0
    assert len(report.workers) == 2


def test_launch_failure_aborts_run_after_reaping_others():
    launcher = FakeLauncher(outputs=[[b"..\n"], [], [b"..\n"]], fail_on={1})
    stress = _stress(launcher, duration_s=30)

    t0 = time.perf_counter()
    with pytest.raises(LaunchError):
        asyncio.run(stress.run())

    assert time.perf_counter() - t0 < 5
    assert len(launcher.probes) == 2
    assert all(p.killed and p.reaped for p in launcher.probes)
    assert stress.store.missing() == [1]


def test_metrics_callback_receives_report():
    captured = []
    launcher = FakeLauncher(outputs=[[b".\n"]])
    asyncio.run(_stress(launcher, workers=1, metrics_callback=captured.append).run())
    assert captured[0]["total"]["received"] == 1


def test_graceful_killer_raises_stop_event(caplog, capsys):
    async def go():
        stop = asyncio.Event()
        killer = GracefulKiller(stop)
        try:
            killer.exit_gracefully(signal.SIGINT, None)
            await asyncio.sleep(0)
            return stop.is_set(), killer.kill_now
        finally:
            killer.restore()

    previous = signal.getsignal(signal.SIGINT)
    with caplog.at_level(logging.WARNING, logger="pingstorm.utils"):
        result = asyncio.run(go())
    assert result == (True, True)
    assert signal.getsignal(signal.SIGINT) is previous
    assert "stopping probes" in caplog.text
    assert capsys.readouterr().out == ""
