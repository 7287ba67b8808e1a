"""
Automatic target (string) selection with hysteresis.

In auto mode the tuner decides which string the player is sounding. Picking
the nearest target on every sample makes the display flicker whenever the
pitch sits between two strings or a single noisy estimate lands near another
string. The selector instead locks onto a target and only moves the lock when
the detected pitch has drifted well away from it for a sustained period.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from .cents import offset_cents
from .constants import DRIFT_DURATION, DRIFT_THRESHOLD_CENTS
from .tunings import Target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectorState:
    """Lock state of a target selector."""
    locked_target: Target | None = None
    drift_started_at: float | None = None  # Timestamp drift was first seen


def nearest_target(frequency_hz: float, targets: Iterable[Target]) -> Target:
    """
    Find the target closest to a frequency in cents.

    Ties go to the target that comes first in the sequence.

    Raises:
        ValueError: If targets is empty
    """
    best: Target | None = None
    best_abs_cents = 0.0
    for target in targets:
        abs_cents = abs(offset_cents(frequency_hz, target.frequency_hz))
        if best is None or abs_cents < best_abs_cents:
            best = target
            best_abs_cents = abs_cents

    if best is None:
        raise ValueError("Cannot pick nearest target from an empty tuning")
    return best


def advance_selection(
    state: SelectorState,
    detected_frequency_hz: float,
    targets: Iterable[Target],
    user_chosen_target: Target,
    auto_mode_enabled: bool,
    now: float,
    drift_threshold_cents: float = DRIFT_THRESHOLD_CENTS,
    drift_duration: float = DRIFT_DURATION,
) -> tuple[SelectorState, Target]:
    """
    Compute the next selector state for one pitch sample.

    Args:
        state: Current selector state
        detected_frequency_hz: Raw detected frequency (<= 0 for no signal)
        targets: Candidate targets in tuning order
        user_chosen_target: Target picked by the user, used outside auto mode
        auto_mode_enabled: Whether automatic selection is on
        now: Monotonic timestamp of the sample in seconds
        drift_threshold_cents: Deviation from the lock that counts as drift
        drift_duration: How long drift must persist before relocking

    Returns:
        Tuple of (new state, resolved target)
    """
    targets = tuple(targets)
    if not auto_mode_enabled or not targets:
        return state, user_chosen_target

    locked = state.locked_target

    if not detected_frequency_hz > 0:
        return state, locked if locked is not None else user_chosen_target

    candidate = nearest_target(detected_frequency_hz, targets)

    if locked is None:
        logger.debug("Locked onto %s at %.2f Hz", candidate.name, detected_frequency_hz)
        return SelectorState(locked_target=candidate), candidate

    if candidate == locked:
        return SelectorState(locked_target=locked), locked

    locked_cents = offset_cents(detected_frequency_hz, locked.frequency_hz)
    if abs(locked_cents) <= drift_threshold_cents:
        # Close enough to the lock to be noise
        return SelectorState(locked_target=locked), locked

    if state.drift_started_at is None:
        logger.debug("Drifting from %s towards %s (%.1f cents)",
                     locked.name, candidate.name, locked_cents)
        return SelectorState(locked_target=locked, drift_started_at=now), locked

    if now - state.drift_started_at >= drift_duration:
        logger.debug("Switched lock %s -> %s", locked.name, candidate.name)
        return SelectorState(locked_target=candidate), candidate

    return state, locked


class TargetSelector:
    """
    Sticky target selector for auto-detect mode.

    Two tiers of hysteresis keep the lock stable:
    - A candidate that differs from the lock is ignored while the detected
      pitch is still within drift_threshold_cents of the locked target.
    - Beyond that threshold the drift must persist for drift_duration
      seconds before the lock moves to the candidate.
    """

    def __init__(
        self,
        drift_threshold_cents: float = DRIFT_THRESHOLD_CENTS,
        drift_duration: float = DRIFT_DURATION,
    ):
        """
        Initialize selector.

        Args:
            drift_threshold_cents: Cents away from the lock before drift counts
            drift_duration: Seconds drift must be sustained to relock

        Raises:
            ValueError: If either value is negative
        """
        if drift_threshold_cents < 0:
            raise ValueError(f"drift_threshold_cents must be >= 0, got {drift_threshold_cents}")
        if drift_duration < 0:
            raise ValueError(f"drift_duration must be >= 0, got {drift_duration}")
        self.drift_threshold_cents = drift_threshold_cents
        self.drift_duration = drift_duration
        self._state = SelectorState()

    def select(
        self,
        detected_frequency_hz: float,
        target_set: Iterable[Target],
        user_chosen_target: Target,
        auto_mode_enabled: bool,
        now: float,
    ) -> Target:
        """
        Resolve which target the current sample should be measured against.

        Outside auto mode, or with an empty tuning, the user's target is
        returned unchanged and the lock is left untouched.
        """
        self._state, target = advance_selection(
            self._state,
            detected_frequency_hz,
            target_set,
            user_chosen_target,
            auto_mode_enabled,
            now,
            drift_threshold_cents=self.drift_threshold_cents,
            drift_duration=self.drift_duration,
        )
        return target

    def reset(self):
        """Clear the lock and the drift timer."""
        self._state = SelectorState()

    @property
    def state(self) -> SelectorState:
        return self._state

    @property
    def locked_target(self) -> Target | None:
        """Currently locked target, or None if nothing is locked."""
        return self._state.locked_target

    @property
    def drift_started_at(self) -> float | None:
        """Timestamp at which the current drift began, or None."""
        return self._state.drift_started_at
