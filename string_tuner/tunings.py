"""
Target pitches and instrument tunings.

A tuning is an ordered set of named target pitches (usually one per string).
This module provides the value types the tuning pipeline consumes, the
built-in guitar tunings, and loading of custom tunings from CSV/TSV files.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, NamedTuple

from .cents import note_frequency
from .constants import A4_REFERENCE

logger = logging.getLogger(__name__)

# Columns may be separated by commas, tabs or runs of spaces, per row
_ROW_SPLIT = re.compile(r"\s*[,\t]\s*|\s+")


class Sample(NamedTuple):
    """Single pitch estimate from the detector."""
    frequency_hz: float  # <= 0 means no signal
    confidence: float  # 0.0 to 1.0


@dataclass(frozen=True)
class Target:
    """A named reference pitch, e.g. one guitar string."""
    name: str
    frequency_hz: float


@dataclass(frozen=True)
class TargetSet:
    """
    An ordered collection of targets defining one tuning.

    Attributes:
        display_name: Name shown to the user (e.g., "Drop D")
        targets: Targets in string order; order breaks ties in selection
    """
    display_name: str
    targets: tuple[Target, ...]

    def __post_init__(self):
        # Frozen, so assign through object.__setattr__
        object.__setattr__(self, "targets", tuple(self.targets))
        if not self.targets:
            raise ValueError(f"Tuning {self.display_name!r} has no targets")

        seen = set()
        for target in self.targets:
            if target.name in seen:
                raise ValueError(
                    f"Duplicate target {target.name!r} in tuning {self.display_name!r}"
                )
            if not target.frequency_hz > 0:
                raise ValueError(
                    f"Target {target.name!r} must have a positive frequency, "
                    f"got {target.frequency_hz}"
                )
            seen.add(target.name)

    def __len__(self) -> int:
        return len(self.targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(self.targets)

    @property
    def names(self) -> list[str]:
        return [t.name for t in self.targets]

    def find(self, name: str) -> Target | None:
        """Get the target with the given name, or None if not in this tuning."""
        for target in self.targets:
            if target.name == name:
                return target
        return None


def _tuning(display_name: str, *strings: tuple[str, float]) -> TargetSet:
    return TargetSet(display_name, tuple(Target(n, f) for n, f in strings))


STANDARD = _tuning(
    "Standard",
    ("E2", 82.41), ("A2", 110.00), ("D3", 146.83),
    ("G3", 196.00), ("B3", 246.94), ("E4", 329.63),
)
DROP_D = _tuning(
    "Drop D",
    ("D2", 73.42), ("A2", 110.00), ("D3", 146.83),
    ("G3", 196.00), ("B3", 246.94), ("E4", 329.63),
)
HALF_STEP_DOWN = _tuning(
    "Half-step down",
    ("Eb2", 77.78), ("Ab2", 103.83), ("Db3", 138.59),
    ("Gb3", 185.00), ("Bb3", 233.08), ("Eb4", 311.13),
)
FULL_STEP_DOWN = _tuning(
    "Full-step down",
    ("D2", 73.42), ("G2", 98.00), ("C3", 130.81),
    ("F3", 174.61), ("A3", 220.00), ("D4", 293.66),
)
DROP_C = _tuning(
    "Drop C",
    ("C2", 65.41), ("G2", 98.00), ("C3", 130.81),
    ("F3", 174.61), ("A3", 220.00), ("D4", 293.66),
)
OPEN_G = _tuning(
    "Open G",
    ("D2", 73.42), ("G2", 98.00), ("D3", 146.83),
    ("G3", 196.00), ("B3", 246.94), ("D4", 293.66),
)
OPEN_D = _tuning(
    "Open D",
    ("D2", 73.42), ("A2", 110.00), ("D3", 146.83),
    ("F#3", 185.00), ("A3", 220.00), ("D4", 293.66),
)
DADGAD = _tuning(
    "DADGAD",
    ("D2", 73.42), ("A2", 110.00), ("D3", 146.83),
    ("G3", 196.00), ("A3", 220.00), ("D4", 293.66),
)

# Display name -> tuning, in menu order
TUNINGS: dict[str, TargetSet] = {
    t.display_name: t
    for t in (
        STANDARD,
        DROP_D,
        HALF_STEP_DOWN,
        FULL_STEP_DOWN,
        DROP_C,
        OPEN_G,
        OPEN_D,
        DADGAD,
    )
}


def get_tuning(display_name: str) -> TargetSet:
    """
    Look up a built-in tuning by display name.

    Raises:
        KeyError: If no built-in tuning has that name
    """
    try:
        return TUNINGS[display_name]
    except KeyError:
        raise KeyError(
            f"Unknown tuning {display_name!r}; available: {', '.join(TUNINGS)}"
        ) from None


def load_tuning(path: str, reference: float = A4_REFERENCE) -> TargetSet:
    """
    Load a custom tuning from a CSV or TSV file.

    File format: one target per line, name then optional frequency in Hz,
    separated by a tab, comma or whitespace. When the frequency is omitted the
    name must be a note (e.g. "F#3") and its equal-tempered frequency is used.
    Lines starting with # are treated as comments. Row order is string order.

    Example:
        # Open C
        C2    65.41
        G2,98.0
        C3

    Args:
        path: Path to the tuning file
        reference: Frequency of A4 used for rows without a frequency

    Returns:
        TargetSet named after the file (without extension)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file contains no valid targets
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Tuning file not found: {path}")

    targets: list[Target] = []
    names: set[str] = set()

    with open(file_path, 'r', encoding='utf-8') as f:
        for line_num, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            row = [cell for cell in _ROW_SPLIT.split(line) if cell]
            name = row[0]
            freq_str = row[1] if len(row) > 1 else ""

            try:
                if freq_str:
                    frequency = float(freq_str)
                else:
                    frequency = round(note_frequency(name, reference), 2)
            except ValueError:
                logger.warning("%s:%d: skipping invalid row %r", file_path.name, line_num, row)
                continue

            if not frequency > 0:
                logger.warning("%s:%d: skipping non-positive frequency for %s",
                               file_path.name, line_num, name)
                continue
            if name in names:
                logger.warning("%s:%d: skipping duplicate target %s",
                               file_path.name, line_num, name)
                continue

            names.add(name)
            targets.append(Target(name, frequency))

    if not targets:
        raise ValueError(f"No valid targets found in tuning file: {path}")

    logger.debug("Loaded tuning %s with %d targets", file_path.stem, len(targets))
    return TargetSet(file_path.stem, tuple(targets))
