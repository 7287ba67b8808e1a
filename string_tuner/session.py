"""
Tuning session: drives the pitch-offset pipeline once per detector sample.

The session is the single owner of the smoother, target selector and in-tune
gate. Each sample flows through them in order:

    sample -> TargetSelector -> offset_cents -> ExponentialSmoother -> InTuneGate

Components are never reset implicitly. The session calls reset() on them
whenever the tuning, the selection mode or the selected target changes.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .cents import clamp_for_display, offset_cents
from .config import TunerConfig
from .in_tune_gate import InTuneGate
from .smoother import ExponentialSmoother
from .target_selector import TargetSelector
from .tunings import STANDARD, Sample, Target, TargetSet

logger = logging.getLogger(__name__)


@dataclass
class TunerReading:
    """What the display should show after one sample."""

    valid: bool = False  # False when the sample carried no usable pitch
    frequency_hz: float = 0.0
    confidence: float = 0.0
    target: Target | None = None  # Target the offset is measured against
    cents: float = 0.0  # Smoothed offset clamped for display
    raw_cents: float = 0.0  # Unsmoothed offset of this sample
    smoothed_cents: float = 0.0  # Smoothed offset before clamping
    in_tune: bool = False
    did_trigger: bool = False  # Fire success feedback on this sample
    success_count: int = 0  # Number of triggers so far in this session


class TunerSession:
    """
    Orchestrates target selection, smoothing and in-tune gating.

    Not thread-safe: samples produced on an audio thread must be handed to
    process() on one thread, in arrival order.
    """

    def __init__(
        self,
        target_set: TargetSet = STANDARD,
        config: TunerConfig | None = None,
        auto_mode: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize session.

        Args:
            target_set: Active tuning
            config: Tuner parameters (defaults if None)
            auto_mode: Whether to detect the string automatically
            clock: Monotonic time source in seconds, used when process()
                is called without an explicit timestamp
        """
        self.config = config or TunerConfig()
        self._clock = clock

        self._target_set = target_set
        self._selected_target = target_set.targets[0]
        self._auto_mode = auto_mode

        self._smoother = ExponentialSmoother(self.config.smoothing_alpha)
        self._selector = TargetSelector(
            drift_threshold_cents=self.config.drift_threshold_cents,
            drift_duration=self.config.drift_duration,
        )
        self._gate = InTuneGate(
            threshold_cents=self.config.in_tune_threshold_cents,
            required_duration=self.config.in_tune_duration,
        )

        self._success_count = 0
        self._last_reading = TunerReading(target=self._selected_target)

    def process(self, sample: Sample, now: float | None = None) -> TunerReading:
        """
        Run one detector sample through the pipeline.

        Args:
            sample: Frequency/confidence estimate from the pitch detector
            now: Monotonic timestamp of the sample; read from the clock if None

        Returns:
            TunerReading for the presentation layer
        """
        if not self._is_signal(sample):
            return self._clear_pitch_values()

        if now is None:
            now = self._clock()

        resolved = self._selector.select(
            sample.frequency_hz,
            self._target_set,
            self._selected_target,
            self._auto_mode,
            now,
        )
        if resolved != self._selected_target:
            logger.debug("Auto-selected %s (was %s)", resolved.name, self._selected_target.name)
            self._selected_target = resolved
            self._reset_measurement()

        raw_cents = offset_cents(sample.frequency_hz, resolved.frequency_hz)
        smoothed_cents = self._smoother.update(raw_cents)
        update = self._gate.update(smoothed_cents, now)
        if update.did_trigger:
            self._success_count += 1
            logger.info("%s in tune (%.1f cents)", resolved.name, smoothed_cents)

        self._last_reading = TunerReading(
            valid=True,
            frequency_hz=sample.frequency_hz,
            confidence=sample.confidence,
            target=resolved,
            cents=clamp_for_display(smoothed_cents, self.config.display_limit_cents),
            raw_cents=raw_cents,
            smoothed_cents=smoothed_cents,
            in_tune=update.is_in_tune,
            did_trigger=update.did_trigger,
            success_count=self._success_count,
        )
        return self._last_reading

    def set_target_set(self, target_set: TargetSet):
        """
        Switch to another tuning.

        The selected target is kept if the new tuning has a target with the
        same name, otherwise the first target is selected.

        Passing a tuning equal to the active one is a no-op and keeps the
        current lock and in-tune state.
        """
        if target_set == self._target_set:
            return

        logger.debug("Tuning changed to %s", target_set.display_name)
        self._target_set = target_set
        self._selected_target = (
            target_set.find(self._selected_target.name) or target_set.targets[0]
        )
        self._reset_all()

    def set_auto_mode(self, enabled: bool):
        """Turn automatic string detection on or off."""
        if enabled == self._auto_mode:
            return

        logger.debug("Auto mode %s", "enabled" if enabled else "disabled")
        self._auto_mode = enabled
        self._reset_all()

    def select_target(self, target: Target | str):
        """
        Manually select the target to tune against.

        Args:
            target: Target or target name from the active tuning

        Raises:
            KeyError: If the target is not part of the active tuning
        """
        name = target if isinstance(target, str) else target.name
        found = self._target_set.find(name)
        if found is None:
            raise KeyError(f"{name!r} is not in tuning {self._target_set.display_name!r}")
        if found == self._selected_target:
            return

        logger.debug("Selected %s", found.name)
        self._selected_target = found
        self._reset_all()

    def stop(self) -> TunerReading:
        """Stop listening: clear the displayed pitch and the measurement state."""
        return self._clear_pitch_values()

    def reset(self):
        """
        Reset lock, smoothing and in-tune state.

        The success counter is left unchanged; it never decreases.
        """
        self._reset_all()
        self._last_reading = TunerReading(
            target=self._selected_target,
            success_count=self._success_count,
        )

    def _is_signal(self, sample: Sample) -> bool:
        return (
            bool(np.isfinite(sample.frequency_hz))
            and sample.frequency_hz > 0
            and sample.confidence >= self.config.min_confidence
        )

    def _clear_pitch_values(self) -> TunerReading:
        self._reset_measurement()
        self._last_reading = TunerReading(
            target=self._selected_target,
            success_count=self._success_count,
        )
        return self._last_reading

    def _reset_measurement(self):
        self._smoother.reset()
        self._gate.reset()

    def _reset_all(self):
        self._selector.reset()
        self._reset_measurement()

    @property
    def target_set(self) -> TargetSet:
        return self._target_set

    @property
    def selected_target(self) -> Target:
        return self._selected_target

    @property
    def auto_mode(self) -> bool:
        return self._auto_mode

    @property
    def success_count(self) -> int:
        return self._success_count

    @property
    def last_reading(self) -> TunerReading:
        return self._last_reading

    @property
    def locked_target(self) -> Target | None:
        """Target the selector is locked onto in auto mode."""
        return self._selector.locked_target

    @property
    def in_tune(self) -> bool:
        return self._gate.is_in_tune
