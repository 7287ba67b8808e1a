"""
Tuner settings.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any

from .constants import (
    A4_REFERENCE,
    DISPLAY_LIMIT_CENTS,
    DRIFT_DURATION,
    DRIFT_THRESHOLD_CENTS,
    IN_TUNE_DURATION,
    IN_TUNE_THRESHOLD_CENTS,
    MIN_CONFIDENCE,
    SMOOTHING_ALPHA,
)


@dataclass(frozen=True)
class TunerConfig:
    """
    Tunable parameters of a tuning session.

    Attributes:
        smoothing_alpha: Weight of the newest reading in the cents smoother
        in_tune_threshold_cents: Half-width of the in-tune window
        in_tune_duration: Seconds a reading must stay in the window
        drift_threshold_cents: Distance from the locked string that counts as drift
        drift_duration: Seconds drift must persist before switching strings
        display_limit_cents: Range the display value is clamped to
        min_confidence: Samples below this confidence are treated as silence
        reference: Frequency of A4, used for note-name-only tuning files
    """
    smoothing_alpha: float = SMOOTHING_ALPHA
    in_tune_threshold_cents: float = IN_TUNE_THRESHOLD_CENTS
    in_tune_duration: float = IN_TUNE_DURATION
    drift_threshold_cents: float = DRIFT_THRESHOLD_CENTS
    drift_duration: float = DRIFT_DURATION
    display_limit_cents: float = DISPLAY_LIMIT_CENTS
    min_confidence: float = MIN_CONFIDENCE
    reference: float = A4_REFERENCE

    def __post_init__(self):
        if not 0.0 < self.smoothing_alpha <= 1.0:
            raise ValueError(f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha}")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be in [0, 1], got {self.min_confidence}")
        if self.display_limit_cents <= 0:
            raise ValueError(f"display_limit_cents must be > 0, got {self.display_limit_cents}")
        if self.reference <= 0:
            raise ValueError(f"reference must be > 0, got {self.reference}")
        for name in (
            "in_tune_threshold_cents",
            "in_tune_duration",
            "drift_threshold_cents",
            "drift_duration",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, values: dict[str, Any]) -> "TunerConfig":
        """Build a config from a settings mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in values.items() if k in known})

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


DEFAULTS = TunerConfig().to_dict()
