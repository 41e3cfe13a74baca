import logging
import os

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)


def default_worker_count() -> int:
    return os.cpu_count() or 1


def parse_duration(raw: str) -> int:
    """Parse a user-supplied duration in whole seconds."""
    text = (raw or "").strip()
    # int() alone would also take "1_0", "+5" and non-ASCII digits
    if not (text.isascii() and text.isdigit()):
        raise ConfigError(f"duration must be a whole number of seconds, got {raw!r}")
    value = int(text)
    if value <= 0:
        raise ConfigError(f"duration must be positive, got {value}")
    return value


class RunConfig(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    target: str = Field(min_length=1)
    duration_s: PositiveInt
    worker_count: PositiveInt = Field(default_factory=lambda: default_worker_count())

    @field_validator("target")
    @classmethod
    def _plain_host(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("target must not be empty")
        if "://" in v:
            raise ValueError("target must be a host name or address, without a scheme")
        if any(c.isspace() for c in v):
            raise ValueError("target must not contain whitespace")
        return v

    @classmethod
    def create(cls, target: str, duration_s: int, worker_count: int | None = None) -> "RunConfig":
        """Build a config, turning validation failures into ConfigError."""
        kwargs = {
            "target": target,
            "duration_s": duration_s,
            "worker_count": worker_count if worker_count is not None else default_worker_count(),
        }
        try:
            config = cls(**kwargs)
        except ValidationError as e:
            raise ConfigError(f"invalid run configuration: {e}") from e
        logger.debug(f"Run config: {config}")
        return config
