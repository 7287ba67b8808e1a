"""
Default values shared by the tuning pipeline.
"""

# Reference pitch
A4_REFERENCE = 440.0  # Hz
A4_MIDI = 69
OCTAVE = 12
CENTS_PER_OCTAVE = 1200.0

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Smoothing
SMOOTHING_ALPHA = 0.25

# In-tune detection
IN_TUNE_THRESHOLD_CENTS = 5.0
IN_TUNE_DURATION = 0.3  # seconds

# Automatic string selection
DRIFT_THRESHOLD_CENTS = 120.0
DRIFT_DURATION = 0.5  # seconds

# Display
DISPLAY_LIMIT_CENTS = 50.0

# Samples below this confidence are treated as silence (0 = accept all)
MIN_CONFIDENCE = 0.0
