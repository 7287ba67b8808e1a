"""
Pitch offset arithmetic.

Cents are a logarithmic measure of pitch distance: 100 cents is one
equal-tempered semitone and 1200 cents is one octave.
"""

import re

import numpy as np

from .constants import (
    A4_MIDI,
    A4_REFERENCE,
    CENTS_PER_OCTAVE,
    DISPLAY_LIMIT_CENTS,
    NOTE_NAMES,
    OCTAVE,
)

# Note names like "E2", "F#3", "Bb4"
_NOTE_PATTERN = re.compile(r'^([A-Ga-g])([#b]?)(\d+)$')


def offset_cents(frequency_hz: float, target_hz: float) -> float:
    """
    Signed distance in cents from target_hz to frequency_hz.

    Positive means sharp, negative means flat. Returns 0.0 when either
    frequency is not strictly positive so callers can treat it as
    "no reliable offset" without checking first.
    """
    if not (frequency_hz > 0 and target_hz > 0):
        return 0.0
    return float(CENTS_PER_OCTAVE * np.log2(frequency_hz / target_hz))


def clamp_for_display(cents: float, limit: float = DISPLAY_LIMIT_CENTS) -> float:
    """Clamp a cents value to the [-limit, +limit] range of the indicator."""
    return float(min(limit, max(-limit, cents)))


def note_frequency(note_name: str, reference: float = A4_REFERENCE) -> float:
    """
    Equal-tempered frequency of a note in scientific pitch notation.

    Args:
        note_name: Note with octave, e.g. "E2", "F#3", "Bb3"
        reference: Frequency of A4 in Hz

    Returns:
        Frequency in Hz

    Raises:
        ValueError: If the note name cannot be parsed
    """
    match = _NOTE_PATTERN.match(note_name.strip())
    if not match:
        raise ValueError(f"Invalid note name: {note_name!r}")

    letter = match.group(1).upper()
    accidental = {"#": 1, "b": -1}.get(match.group(2), 0)
    octave = int(match.group(3))

    # Accidentals may cross the octave boundary (Cb4 is B3, B#3 is C4)
    note = (octave + 1) * OCTAVE + NOTE_NAMES.index(letter) + accidental

    semitones_from_a4 = note - A4_MIDI
    return float(reference * (2 ** (semitones_from_a4 / OCTAVE)))
