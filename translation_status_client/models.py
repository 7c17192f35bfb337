import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    error = "error"


TERMINAL_STATUSES = frozenset({JobStatus.completed.value, JobStatus.error.value})


def _as_number(value: Any) -> float:
    """Coerce a status field to a float, falling back to 0.

    Integers too large for a float become signed infinity so they clamp like
    any other out-of-range value.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


class StatusSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: str
    progress: float = 0.0
    expected_time: float = Field(default=0.0, alias="expectedTime")

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if isinstance(value, JobStatus):
            return value.value
        if value is None:
            return value
        return str(value)

    @field_validator("progress", mode="before")
    @classmethod
    def _clamp_progress(cls, value: Any) -> float:
        return min(max(_as_number(value), 0.0), 100.0)

    @field_validator("expected_time", mode="before")
    @classmethod
    def _clamp_expected_time(cls, value: Any) -> float:
        number = _as_number(value)
        if not math.isfinite(number):
            return 0.0
        return max(number, 0.0)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @classmethod
    def error_snapshot(cls) -> "StatusSnapshot":
        """The degraded snapshot a status source reports when it cannot reach the job"""
        return cls(status=JobStatus.error, progress=0, expected_time=0)


class PollAttempt(BaseModel):
    model_config = ConfigDict(frozen=True)

    attempt_index: int = Field(ge=0)
    snapshot: StatusSnapshot
    wait_duration: Optional[float] = None  # ms, None once terminal
    elapsed_time: float = 0.0


class AdaptivePollingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    transition_progress: float = Field(default=60.0, ge=0.0, le=100.0)
    max_interval_divisor: float = Field(default=3.5, gt=0.0)
    base_interval_divisor: float = Field(default=30.0, gt=0.0)
    decay_rate: float = Field(default=2.5, ge=0.0)


class ClientConfig(BaseModel):
    status_path: str = "/status"
    request_timeout: float = Field(default=10.0, gt=0.0)
    timeout: Optional[float] = Field(default=None, gt=0.0)  # no deadline by default
    polling: AdaptivePollingConfig = Field(default_factory=AdaptivePollingConfig)
