import asyncio

from pingstorm.errors import LaunchError, TerminationError
from pingstorm.launcher import ProbeLauncher, ProbeProcess


class FakeProbe(ProbeProcess):
    """
    Replays canned stdout/stderr chunks through real StreamReaders.
    The streams hit EOF when the probe is killed or exits on its own.
    """

    def __init__(self, stdout=(), stderr=(), exited=False, pid=4242):
        self.stdout = asyncio.StreamReader()
        self.stderr = asyncio.StreamReader()
        for chunk in stdout:
            self.stdout.feed_data(chunk)
        for chunk in stderr:
            self.stderr.feed_data(chunk)
        self._pid = pid
        self._exited = asyncio.Event()
        self.returncode = None
        self.kill_attempts = 0
        self.killed = False
        self.reaped = False
        if exited:
            self._exit(0)

    @property
    def pid(self):
        return self._pid

    def _exit(self, code):
        self.returncode = code
        self.stdout.feed_eof()
        self.stderr.feed_eof()
        self._exited.set()

    def terminate(self):
        self.kill_attempts += 1
        if self.returncode is not None:
            raise TerminationError(f"fake process {self._pid} already exited")
        self.killed = True
        self._exit(-9)

    async def wait(self):
        await self._exited.wait()
        self.reaped = True
        return self.returncode


class FakeLauncher(ProbeLauncher):
    """
    outputs[i] is the list of stdout chunks replayed by the i-th launched probe;
    launches listed in fail_on raise LaunchError instead.
    """

    def __init__(self, outputs=None, stderr=None, fail_on=(), exited=False):
        self.outputs = outputs or []
        self.stderr = stderr or []
        self.fail_on = set(fail_on)
        self.exited = exited
        self.targets = []
        self.probes = []

    async def launch(self, target):
        n = len(self.targets)
        self.targets.append(target)
        if n in self.fail_on:
            raise LaunchError(f"fake launch {n} refused")
        probe = FakeProbe(
            stdout=self.outputs[n] if n < len(self.outputs) else (),
            stderr=self.stderr[n] if n < len(self.stderr) else (),
            exited=self.exited,
            pid=1000 + n,
        )
        self.probes.append(probe)
        return probe
