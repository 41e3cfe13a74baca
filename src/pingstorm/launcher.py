import asyncio
import logging
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .errors import LaunchError, TerminationError
from .models import PAYLOAD_SIZE

logger = logging.getLogger(__name__)

DEFAULT_PING_BIN = shutil.which("ping") or "/bin/ping"


class ProbeProcess(ABC):
    """Handle on one running probe: two output streams, kill and reap."""

    stdout: asyncio.StreamReader
    stderr: asyncio.StreamReader

    @property
    @abstractmethod
    def pid(self) -> int | None:
        raise NotImplementedError

    @abstractmethod
    def terminate(self) -> None:
        """Forcibly stop the probe. Raises TerminationError if it is already gone."""
        raise NotImplementedError

    @abstractmethod
    async def wait(self) -> int | None:
        """Block until the probe has exited and return its exit status."""
        raise NotImplementedError


class ProbeLauncher(ABC):
    @abstractmethod
    async def launch(self, target: str) -> ProbeProcess:
        """Start exactly one probe against target. Raises LaunchError on failure."""
        raise NotImplementedError


class SubprocessProbe(ProbeProcess):
    def __init__(self, proc: asyncio.subprocess.Process):
        self._proc = proc
        self.stdout = proc.stdout
        self.stderr = proc.stderr

    @property
    def pid(self) -> int | None:
        return self._proc.pid

    def terminate(self) -> None:
        if self._proc.returncode is not None:
            raise TerminationError(
                f"process {self._proc.pid} already exited with status {self._proc.returncode}"
            )
        try:
            self._proc.kill()
        except ProcessLookupError as e:
            raise TerminationError(f"process {self._proc.pid} is gone: {e}") from e

    async def wait(self) -> int | None:
        return await self._proc.wait()


@dataclass
class ProbeOptions:
    ping_bin: str = DEFAULT_PING_BIN
    interval_s: float = 0.002
    ipv6: bool = False


class PingLauncher(ProbeLauncher):
    """
    Starts ``ping`` in flood mode. Packets are always PAYLOAD_SIZE bytes, the
    size byte counts are computed with. The probe's own summary is never
    parsed; only the progress dots on stdout are counted.
    """

    def __init__(self, options: ProbeOptions | None = None):
        self.options = options or ProbeOptions()

    def build_command(self, target: str) -> list[str]:
        o = self.options
        cmd = [o.ping_bin]
        if o.ipv6:
            cmd.append("-6")
        cmd += ["-f", "-i", str(o.interval_s), "-s", str(PAYLOAD_SIZE), target]
        return cmd

    async def launch(self, target: str) -> ProbeProcess:
        cmd = self.build_command(target)
        logger.debug(f"Launching probe: {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise LaunchError(f"probe executable not found: {cmd[0]}") from e
        except PermissionError as e:
            raise LaunchError(f"permission denied running {cmd[0]}: {e}") from e
        except OSError as e:
            raise LaunchError(f"failed to start {cmd[0]}: {e}") from e
        logger.debug(f"Probe started with pid {proc.pid}")
        return SubprocessProbe(proc)
