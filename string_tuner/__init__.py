"""
string_tuner - Tuning-signal conditioning for instrument tuners
"""

from .cents import clamp_for_display, note_frequency, offset_cents
from .config import DEFAULTS, TunerConfig
from .constants import A4_REFERENCE, NOTE_NAMES
from .in_tune_gate import GatePhase, GateState, InTuneGate, InTuneUpdate, advance_gate
from .session import TunerReading, TunerSession
from .smoother import ExponentialSmoother, SmootherState
from .target_selector import SelectorState, TargetSelector, advance_selection, nearest_target
from .tunings import (
    STANDARD,
    TUNINGS,
    Sample,
    Target,
    TargetSet,
    get_tuning,
    load_tuning,
)

__version__ = "0.1.0"
__all__ = [
    "offset_cents",
    "clamp_for_display",
    "note_frequency",
    "ExponentialSmoother",
    "SmootherState",
    "TargetSelector",
    "SelectorState",
    "nearest_target",
    "advance_selection",
    "InTuneGate",
    "InTuneUpdate",
    "GatePhase",
    "GateState",
    "advance_gate",
    "TunerSession",
    "TunerReading",
    "TunerConfig",
    "DEFAULTS",
    "Sample",
    "Target",
    "TargetSet",
    "STANDARD",
    "TUNINGS",
    "get_tuning",
    "load_tuning",
    "A4_REFERENCE",
    "NOTE_NAMES",
]
