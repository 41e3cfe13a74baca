import logging
import sys

import pytest

from conftest import FakeLauncher
from pingstorm import cli


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_invalid_duration_is_a_config_error(capsys):
    assert cli.main(["example.org", "-d", "soon", "--no-progress"]) == cli.EXIT_CONFIG
    assert "duration" in capsys.readouterr().err


def test_prompts_for_missing_values(monkeypatch, capsys):
    answers = iter(["example.org", "0"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
    assert cli.main(["--no-progress"]) == cli.EXIT_CONFIG


def test_missing_ping_binary_fails_the_run(capsys):
    code = cli.main(["example.org", "-d", "1", "--no-progress", "--ping-bin", "/nonexistent/ping"])
    assert code == cli.EXIT_RUN_FAILED
    captured = capsys.readouterr()
    assert "Total statistics" not in captured.out


def test_full_run_prints_report(monkeypatch, capsys):
    monkeypatch.setattr("pingstorm.config.default_worker_count", lambda: 2)
    fake = FakeLauncher(outputs=[[b"...\n"], [b".\n"]])
    monkeypatch.setattr(cli, "PingLauncher", lambda options: fake)

    assert cli.main(["example.org", "-d", "1", "--no-progress"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "Worker 1 statistics:" in out
    assert "Total statistics:" in out
    assert "Transmitted = 4, Received = 4, Lost = 0 (0.00% loss)" in out


def test_one_worker_per_cpu(monkeypatch, capsys):
    monkeypatch.setattr("pingstorm.config.default_worker_count", lambda: 3)
    fake = FakeLauncher()
    monkeypatch.setattr(cli, "PingLauncher", lambda options: fake)

    assert cli.main(["example.org", "-d", "1", "--no-progress"]) == cli.EXIT_OK
    assert len(fake.probes) == 3


def test_worker_count_is_not_a_flag(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["example.org", "-d", "1", "-w", "7", "--no-progress"])
    assert exc.value.code == 2
