"""Tests for pitch offset arithmetic."""

import numpy as np
import pytest

from string_tuner.cents import clamp_for_display, note_frequency, offset_cents


class TestOffsetCents:
    """Tests for offset_cents."""

    @pytest.mark.parametrize("freq", [27.5, 82.41, 110.0, 440.0, 4186.0])
    def test_same_frequency_is_zero(self, freq):
        """A frequency is zero cents from itself."""
        assert offset_cents(freq, freq) == 0.0

    def test_octave_is_1200(self):
        """Doubling the frequency is exactly one octave."""
        assert offset_cents(220.0, 110.0) == pytest.approx(1200.0)
        assert offset_cents(55.0, 110.0) == pytest.approx(-1200.0)

    def test_semitone_is_100(self):
        """One equal-tempered semitone is 100 cents."""
        semitone_up = 440.0 * 2 ** (1 / 12)
        assert offset_cents(semitone_up, 440.0) == pytest.approx(100.0)

    def test_sign(self):
        """Sharp is positive, flat is negative."""
        assert offset_cents(441.0, 440.0) > 0
        assert offset_cents(439.0, 440.0) < 0

    def test_increasing_in_frequency(self):
        """Offset grows strictly with the measured frequency."""
        freqs = np.linspace(50.0, 500.0, 200)
        offsets = [offset_cents(f, 110.0) for f in freqs]
        assert all(b > a for a, b in zip(offsets, offsets[1:]))

    def test_decreasing_in_target(self):
        """Offset shrinks strictly as the target rises."""
        targets = np.linspace(50.0, 500.0, 200)
        offsets = [offset_cents(110.0, t) for t in targets]
        assert all(b < a for a, b in zip(offsets, offsets[1:]))

    @pytest.mark.parametrize("freq,target", [
        (0.0, 110.0),
        (110.0, 0.0),
        (-5.0, 110.0),
        (110.0, -1.0),
        (0.0, 0.0),
    ])
    def test_non_positive_returns_zero(self, freq, target):
        """Non-positive inputs fall back to zero instead of raising."""
        assert offset_cents(freq, target) == 0.0

    def test_nan_returns_zero(self):
        """NaN frequency is treated like no signal."""
        assert offset_cents(float("nan"), 110.0) == 0.0

    def test_returns_python_float(self):
        """Result is a plain float, not a numpy scalar."""
        assert type(offset_cents(110.5, 110.0)) is float


class TestClampForDisplay:
    """Tests for clamp_for_display."""

    def test_values_inside_range_unchanged(self):
        """Values within ±50 pass through."""
        assert clamp_for_display(-35.0) == -35.0
        assert clamp_for_display(40.0) == 40.0
        assert clamp_for_display(0.0) == 0.0

    def test_values_outside_range_clamped(self):
        """Values beyond ±50 are clamped to the limit."""
        assert clamp_for_display(-80.0) == -50.0
        assert clamp_for_display(1200.0) == 50.0

    def test_boundaries(self):
        """The limits themselves are kept."""
        assert clamp_for_display(50.0) == 50.0
        assert clamp_for_display(-50.0) == -50.0

    def test_idempotent(self):
        """Clamping twice gives the same result as clamping once."""
        for value in np.linspace(-300.0, 300.0, 61):
            once = clamp_for_display(value)
            assert clamp_for_display(once) == once
            assert -50.0 <= once <= 50.0

    def test_custom_limit(self):
        """Limit can be configured."""
        assert clamp_for_display(30.0, limit=25.0) == 25.0
        assert clamp_for_display(-30.0, limit=25.0) == -25.0


class TestNoteFrequency:
    """Tests for note_frequency."""

    def test_a4(self):
        """A4 is the reference."""
        assert note_frequency("A4") == pytest.approx(440.0)

    @pytest.mark.parametrize("name,expected", [
        ("E2", 82.41),
        ("A2", 110.00),
        ("D3", 146.83),
        ("G3", 196.00),
        ("B3", 246.94),
        ("E4", 329.63),
    ])
    def test_standard_guitar_strings(self, name, expected):
        """Standard tuning strings match the published frequencies."""
        assert note_frequency(name) == pytest.approx(expected, abs=0.01)

    def test_flats_and_sharps(self):
        """Enharmonic spellings give the same frequency."""
        assert note_frequency("Bb3") == pytest.approx(note_frequency("A#3"))
        assert note_frequency("Eb2") == pytest.approx(77.78, abs=0.01)

    def test_accidentals_cross_octave(self):
        """Cb4 is B3 and B#3 is C4."""
        assert note_frequency("Cb4") == pytest.approx(note_frequency("B3"))
        assert note_frequency("B#3") == pytest.approx(note_frequency("C4"))

    def test_lowercase_letter(self):
        """Lowercase note letters are accepted."""
        assert note_frequency("e2") == pytest.approx(note_frequency("E2"))

    def test_custom_reference(self):
        """Reference pitch scales every note."""
        assert note_frequency("A3", reference=442.0) == pytest.approx(221.0)

    @pytest.mark.parametrize("name", ["", "H2", "E", "E#b2", "low E"])
    def test_invalid_name(self, name):
        """Unparsable names raise ValueError."""
        with pytest.raises(ValueError):
            note_frequency(name)
