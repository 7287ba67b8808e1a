"""Tests for the in-tune gate."""

import pytest

from string_tuner.in_tune_gate import (
    GatePhase,
    GateState,
    InTuneGate,
    InTuneUpdate,
    advance_gate,
)


class TestInTuneGate:
    """Tests for InTuneGate."""

    def setup_method(self):
        """Create a gate with default settings."""
        self.gate = InTuneGate()

    def test_initial_state(self):
        """Gate starts out of range."""
        assert self.gate.state == GateState()
        assert self.gate.state.phase is GatePhase.OUT_OF_RANGE
        assert not self.gate.is_in_tune

    def test_dwell_then_trigger(self):
        """In tune only after staying in range for 0.3 s, triggering once."""
        first = self.gate.update(2.0, now=0.0)
        second = self.gate.update(2.0, now=0.1)
        third = self.gate.update(2.0, now=0.31)

        assert first == InTuneUpdate(is_in_tune=False, did_trigger=False)
        assert second == InTuneUpdate(is_in_tune=False, did_trigger=False)
        assert third == InTuneUpdate(is_in_tune=True, did_trigger=True)

    def test_no_retrigger_while_in_tune(self):
        """Staying in tune does not trigger again."""
        for t in (0.0, 0.1, 0.31):
            self.gate.update(2.0, now=t)

        assert self.gate.update(2.0, now=0.4) == InTuneUpdate(True, False)
        assert self.gate.update(-4.9, now=5.0) == InTuneUpdate(True, False)

    def test_out_of_range_resets_immediately(self):
        """Leaving the window drops straight to OUT_OF_RANGE."""
        for t in (0.0, 0.1, 0.31):
            self.gate.update(2.0, now=t)

        assert self.gate.update(8.0, now=0.4) == InTuneUpdate(False, False)
        assert self.gate.state.phase is GatePhase.OUT_OF_RANGE
        assert not self.gate.is_in_tune

    def test_reentry_requires_new_dwell(self):
        """After leaving, the dwell starts over and can trigger again."""
        for t in (0.0, 0.1, 0.31):
            self.gate.update(2.0, now=t)
        self.gate.update(-20.0, now=0.4)

        assert self.gate.update(1.0, now=0.5) == InTuneUpdate(False, False)
        assert self.gate.range_entered_at == 0.5
        assert self.gate.update(1.0, now=0.7) == InTuneUpdate(False, False)
        assert self.gate.update(1.0, now=0.8) == InTuneUpdate(True, True)

    def test_brief_excursion_restarts_dwell(self):
        """A single out-of-range reading while entering restarts the timer."""
        self.gate.update(0.0, now=0.0)
        self.gate.update(0.0, now=0.2)
        self.gate.update(6.0, now=0.25)

        assert self.gate.update(0.0, now=0.35) == InTuneUpdate(False, False)
        assert self.gate.range_entered_at == 0.35

    def test_entering_state(self):
        """First in-range reading records the entry time."""
        self.gate.update(3.0, now=1.5)
        assert self.gate.state == GateState(GatePhase.ENTERING, 1.5)

    @pytest.mark.parametrize("cents", [5.0, -5.0])
    def test_threshold_inclusive(self, cents):
        """Exactly ±5 cents counts as in range."""
        self.gate.update(cents, now=0.0)
        assert self.gate.state.phase is GatePhase.ENTERING

    @pytest.mark.parametrize("cents", [5.01, -5.01, float("nan")])
    def test_outside_threshold(self, cents):
        """Anything past ±5 cents, or NaN, is out of range."""
        assert self.gate.update(cents, now=0.0) == InTuneUpdate(False, False)
        assert self.gate.state.phase is GatePhase.OUT_OF_RANGE

    def test_exact_duration_triggers(self):
        """Dwell equal to the required duration is enough."""
        gate = InTuneGate(required_duration=0.5)
        gate.update(0.0, now=1.0)
        assert gate.update(0.0, now=1.5) == InTuneUpdate(True, True)

    def test_zero_duration_triggers_on_second_reading(self):
        """With no dwell the gate still needs one reading to enter."""
        gate = InTuneGate(required_duration=0.0)
        assert gate.update(0.0, now=0.0) == InTuneUpdate(False, False)
        assert gate.update(0.0, now=0.0) == InTuneUpdate(True, True)

    def test_custom_threshold(self):
        """Threshold is configurable."""
        gate = InTuneGate(threshold_cents=10.0)
        gate.update(9.0, now=0.0)
        assert gate.state.phase is GatePhase.ENTERING

    def test_reset(self):
        """Reset forces OUT_OF_RANGE from any state."""
        for t in (0.0, 0.1, 0.31):
            self.gate.update(2.0, now=t)
        assert self.gate.is_in_tune

        self.gate.reset()
        assert self.gate.state == GateState()
        assert self.gate.update(2.0, now=0.4) == InTuneUpdate(False, False)

    @pytest.mark.parametrize("kwargs", [
        {"threshold_cents": -1.0},
        {"required_duration": -0.3},
    ])
    def test_invalid_config(self, kwargs):
        """Negative settings are rejected."""
        with pytest.raises(ValueError):
            InTuneGate(**kwargs)


class TestAdvanceGate:
    """The pure transition function."""

    def test_returns_new_state(self):
        """Input state is not modified."""
        state = GateState()
        new_state, update = advance_gate(state, 0.0, now=2.0)
        assert state == GateState()
        assert new_state == GateState(GatePhase.ENTERING, 2.0)
        assert update == InTuneUpdate(False, False)

    def test_trigger_from_entering(self):
        """ENTERING moves to IN_TUNE once the dwell has elapsed."""
        state = GateState(GatePhase.ENTERING, 0.0)
        new_state, update = advance_gate(state, 1.0, now=0.3)
        assert new_state.is_in_tune
        assert new_state.range_entered_at is None
        assert update.did_trigger

    def test_exported_from_package(self):
        """The transition function is available from the package root."""
        import string_tuner

        assert string_tuner.advance_gate is advance_gate
