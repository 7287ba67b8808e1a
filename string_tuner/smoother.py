"""
Temporal smoothing for pitch offset readings.

The pitch estimator reports a new frequency tens of times per second and
consecutive readings jitter by a few cents. This module provides a
single-pole exponential filter that turns the raw per-sample offset into a
value that is stable enough to drive a needle display and the in-tune gate.
"""

from dataclasses import dataclass

from .constants import SMOOTHING_ALPHA


@dataclass(frozen=True)
class SmootherState:
    """Snapshot of an exponential smoother."""
    alpha: float
    last_value: float | None = None  # None until the first update


class ExponentialSmoother:
    """
    Exponential moving average over a stream of cents values.

    The first value after construction or reset is passed through unchanged,
    so there is no warm-up transient from an implicit zero start. Every
    following value is blended as:

        value = alpha * new_value + (1 - alpha) * value

    Larger alpha reacts faster, smaller alpha is steadier.
    """

    def __init__(self, alpha: float = SMOOTHING_ALPHA):
        """
        Initialize smoother.

        Args:
            alpha: Weight of the newest value, in (0, 1]

        Raises:
            ValueError: If alpha is outside (0, 1]
        """
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self._value: float | None = None

    def update(self, new_value: float) -> float:
        """Blend a new value into the average and return the result."""
        if self._value is None:
            self._value = float(new_value)
        else:
            self._value = self.alpha * new_value + (1.0 - self.alpha) * self._value
        return self._value

    def reset(self):
        """Forget history so the next update is treated as the first."""
        self._value = None

    @property
    def value(self) -> float | None:
        """Current smoothed value, or None before the first update."""
        return self._value

    @property
    def state(self) -> SmootherState:
        return SmootherState(alpha=self.alpha, last_value=self._value)
