"""Type definitions for the Euphonium Coach project."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, TypeAlias

# A valve combination is always stored canonically: "0" (open) or an
# ascending, duplicate-free digit string such as "13" or "123".
ValveCombination: TypeAlias = str


class PitchClass(IntEnum):
    """The 12 semitone classes, valued by their offset from C."""

    C = 0
    C_SHARP = 1
    D = 2
    D_SHARP = 3
    E = 4
    F = 5
    F_SHARP = 6
    G = 7
    G_SHARP = 8
    A = 9
    A_SHARP = 10
    B = 11

    @property
    def label(self) -> str:
        """Sharp spelling of the class (e.g. 'C#')."""
        return self.name.replace("_SHARP", "#")

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class WrittenNote:
    """A note as written on the page: pitch class plus a single-digit octave."""

    pitch_class: PitchClass
    octave: int

    def __post_init__(self):
        if not isinstance(self.octave, int) or not 0 <= self.octave <= 9:
            raise ValueError(f"Octave must be a single digit 0-9, got {self.octave!r}")

    @property
    def pitch_index(self) -> int:
        """MIDI-compatible pitch index (C4 == 60)."""
        return (self.octave + 1) * 12 + int(self.pitch_class)

    def __str__(self) -> str:
        return f"{self.pitch_class.label}{self.octave}"


class NoPitchReason(Enum):
    """Why an audio window produced no pitch."""

    SILENCE = "silence"  # RMS under the noise gate
    TOO_SHORT = "too_short"  # fewer samples than the algorithm needs
    NO_PERIOD = "no_period"  # no usable periodicity found
    OUT_OF_RANGE = "out_of_range"  # estimate outside the instrument range


@dataclass(frozen=True)
class PitchEstimate:
    """Result of analysing one audio window.

    ``frequency`` is None when no pitch was detected; ``reason`` then says why.
    """

    frequency: Optional[float]
    rms: float
    algorithm: str
    reason: Optional[NoPitchReason] = None

    @property
    def detected(self) -> bool:
        return self.frequency is not None


@dataclass(frozen=True)
class PitchFeedback:
    """A detected frequency judged against a written target note."""

    target: WrittenNote
    target_frequency: float
    detected_frequency: Optional[float] = None
    cents: Optional[int] = None  # unclamped
    display_cents: Optional[int] = None  # clamped for a +/-100 meter
    in_tune: bool = False
    heard: Optional[WrittenNote] = None  # nearest written note to what was played


class FingeringFeedback(Enum):
    """Outcome of comparing pressed valves with the expected fingering."""

    CORRECT = "correct"
    PARTIAL = "partial"  # on the way to the primary fingering
    WRONG = "wrong"
