class PingstormError(Exception):
    """Base class for every error raised by pingstorm."""


class ConfigError(PingstormError):
    """Invalid run configuration (bad duration, empty target, ...)."""


class LaunchError(PingstormError):
    """The probe child process could not be created."""


class TerminationError(PingstormError):
    """A kill could not be delivered, usually because the probe already exited."""


class StreamDecodeError(PingstormError):
    """A line of probe output could not be decoded."""


class IncompleteRunError(PingstormError):
    """At least one worker never finalized its statistics row."""

    def __init__(self, missing: list[int]):
        self.missing = missing
        super().__init__(f"workers without final statistics: {missing}")
