import math
from typing import Optional

from translation_status_client.models import AdaptivePollingConfig

# 2**64 dwarfs any max/base ratio, so larger exponents only saturate
_MAX_BACKOFF_EXPONENT = 64


class AdaptivePollingStrategy:
    """Chooses the wait before the next status request.

    Early in a job the wait grows exponentially with the attempt count. Once
    progress reaches ``transition_progress`` the wait decays toward the base
    interval as the job nears 100%. Both bounds scale with the job's own
    expected duration, so all results are in milliseconds.
    """

    def __init__(self, config: Optional[AdaptivePollingConfig] = None):
        self.config = config or AdaptivePollingConfig()

    @property
    def transition_progress(self) -> float:
        return self.config.transition_progress

    def max_interval(self, expected_time: float) -> float:
        return _clamp_duration(expected_time) / self.config.max_interval_divisor

    def base_interval(self, expected_time: float) -> float:
        return _clamp_duration(expected_time) / self.config.base_interval_divisor

    def compute_interval(
        self, attempt: int, progress: float, expected_time: float
    ) -> float:
        """Returns the wait in milliseconds for the given attempt and job status"""
        exponent = _clamp_attempt(attempt)
        progress = _clamp_progress(progress)
        max_interval = self.max_interval(expected_time)
        base_interval = self.base_interval(expected_time)

        if self._in_backoff_phase(progress):
            return min(base_interval * (2**exponent), max_interval)

        transition = self.transition_progress
        progress_factor = (progress - transition) / (100.0 - transition)
        progress_factor = min(max(progress_factor, 0.0), 1.0)
        decay_interval = base_interval + (max_interval - base_interval) * math.exp(
            -self.config.decay_rate * progress_factor
        )
        return max(base_interval, min(decay_interval, max_interval))

    def _in_backoff_phase(self, progress: float) -> bool:
        # A transition at 100% leaves no room for decay
        if self.transition_progress >= 100.0:
            return True
        return progress < self.transition_progress


def _to_float(value: float) -> float:
    """Converts to float, mapping integers too large for a float to infinity"""
    if value is None:
        return math.nan
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _clamp_attempt(attempt: int) -> int:
    attempt = _to_float(attempt)
    if math.isnan(attempt) or attempt < 0:
        return 0
    return int(min(attempt, _MAX_BACKOFF_EXPONENT))


def _clamp_progress(progress: float) -> float:
    progress = _to_float(progress)
    if math.isnan(progress):
        return 0.0
    return min(max(progress, 0.0), 100.0)


def _clamp_duration(duration: float) -> float:
    duration = _to_float(duration)
    if not math.isfinite(duration) or duration < 0:
        return 0.0
    return duration
