"""
Debounced in-tune detection.

A smoothed reading can pass through the in-tune window for a moment while the
player is still turning the peg. The gate only reports "in tune" once the
reading has stayed inside the window for a minimum dwell time, and emits a
single trigger on that transition for success feedback.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from .constants import IN_TUNE_DURATION, IN_TUNE_THRESHOLD_CENTS

logger = logging.getLogger(__name__)


class GatePhase(Enum):
    """Phase of the in-tune state machine."""

    OUT_OF_RANGE = "out_of_range"
    ENTERING = "entering"  # In range, dwell time not yet reached
    IN_TUNE = "in_tune"


@dataclass(frozen=True)
class GateState:
    """State of an in-tune gate."""
    phase: GatePhase = GatePhase.OUT_OF_RANGE
    range_entered_at: float | None = None  # Set only while ENTERING

    @property
    def is_in_tune(self) -> bool:
        return self.phase is GatePhase.IN_TUNE


class InTuneUpdate(NamedTuple):
    """Result of feeding one reading to the gate."""
    is_in_tune: bool
    did_trigger: bool  # True only on the sample that entered IN_TUNE


_OUT_OF_RANGE = GateState()
_IN_TUNE = GateState(phase=GatePhase.IN_TUNE)


def advance_gate(
    state: GateState,
    smoothed_cents: float,
    now: float,
    threshold_cents: float = IN_TUNE_THRESHOLD_CENTS,
    required_duration: float = IN_TUNE_DURATION,
) -> tuple[GateState, InTuneUpdate]:
    """
    Compute the next gate state for one smoothed reading.

    Leaving the window drops straight back to OUT_OF_RANGE; there is no exit
    hysteresis.

    Returns:
        Tuple of (new state, update)
    """
    if not abs(smoothed_cents) <= threshold_cents:
        return _OUT_OF_RANGE, InTuneUpdate(False, False)

    if state.phase is GatePhase.IN_TUNE:
        return state, InTuneUpdate(True, False)

    if state.phase is GatePhase.OUT_OF_RANGE or state.range_entered_at is None:
        return GateState(GatePhase.ENTERING, now), InTuneUpdate(False, False)

    if now - state.range_entered_at >= required_duration:
        return _IN_TUNE, InTuneUpdate(True, True)

    return state, InTuneUpdate(False, False)


class InTuneGate:
    """
    Duration-gated in-tune detector.

    States: OUT_OF_RANGE -> ENTERING(entered_at) -> IN_TUNE. A reading within
    threshold_cents moves OUT_OF_RANGE to ENTERING; staying in range for
    required_duration moves ENTERING to IN_TUNE and triggers once. Any reading
    outside the threshold returns to OUT_OF_RANGE.
    """

    def __init__(
        self,
        threshold_cents: float = IN_TUNE_THRESHOLD_CENTS,
        required_duration: float = IN_TUNE_DURATION,
    ):
        """
        Initialize gate.

        Args:
            threshold_cents: Half-width of the in-tune window in cents
            required_duration: Seconds a reading must stay in the window

        Raises:
            ValueError: If either value is negative
        """
        if threshold_cents < 0:
            raise ValueError(f"threshold_cents must be >= 0, got {threshold_cents}")
        if required_duration < 0:
            raise ValueError(f"required_duration must be >= 0, got {required_duration}")
        self.threshold_cents = threshold_cents
        self.required_duration = required_duration
        self._state = _OUT_OF_RANGE

    def update(self, smoothed_cents: float, now: float) -> InTuneUpdate:
        """Feed one smoothed cents reading taken at timestamp now."""
        self._state, result = advance_gate(
            self._state,
            smoothed_cents,
            now,
            threshold_cents=self.threshold_cents,
            required_duration=self.required_duration,
        )
        if result.did_trigger:
            logger.debug("In tune at %.2f cents", smoothed_cents)
        return result

    def reset(self):
        """Force the gate back to OUT_OF_RANGE."""
        self._state = _OUT_OF_RANGE

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_in_tune(self) -> bool:
        return self._state.is_in_tune

    @property
    def range_entered_at(self) -> float | None:
        return self._state.range_entered_at
