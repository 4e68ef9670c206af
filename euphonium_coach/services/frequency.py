"""Conversions between pitch indices, frequencies and cents."""

import numpy as np
from typing import ClassVar, TypeAlias

from ..errors import ConfigurationError
from ..logger import get_logger
from ..note_types import WrittenNote
from ..note_utils import note_from_pitch_index

logger = get_logger(__name__)

DEFAULT_REFERENCE_A4 = 440.0
A4_PITCH_INDEX = 69


def _check_frequency(frequency: float) -> float:
    if not isinstance(frequency, (int, float, np.floating)) or not np.isfinite(frequency):
        raise ValueError(f"Invalid frequency value: {frequency}")
    if frequency <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")
    return float(frequency)


class FrequencyConverter:
    """Equal-tempered conversions against a configurable A4 reference."""

    # Type aliases
    Frequency: TypeAlias = float
    PitchIndex: TypeAlias = int
    Cents: TypeAlias = int

    CENTS_PER_OCTAVE: ClassVar[int] = 1200
    DISPLAY_CENTS_LIMIT: ClassVar[int] = 100

    def __init__(self, reference_a4: float = DEFAULT_REFERENCE_A4) -> None:
        if not np.isfinite(reference_a4) or reference_a4 <= 0:
            raise ConfigurationError(
                f"Reference A4 must be a positive frequency, got {reference_a4}"
            )
        self.reference_a4 = float(reference_a4)

    def to_frequency(self, pitch_index: int) -> Frequency:
        """Frequency in Hz of a pitch index (69 -> reference A4)."""
        return self.reference_a4 * 2.0 ** ((pitch_index - A4_PITCH_INDEX) / 12.0)

    def from_frequency(self, frequency: float) -> PitchIndex:
        """Nearest pitch index for a frequency.

        Raises:
            ValueError: If frequency is not a positive finite number
        """
        frequency = _check_frequency(frequency)
        half_steps = float(12 * np.log2(frequency / self.reference_a4))
        return int(round(half_steps)) + A4_PITCH_INDEX

    def cents_offset(self, detected: float, target: float) -> Cents:
        """Signed cents from target to detected, rounded to an integer."""
        detected = _check_frequency(detected)
        target = _check_frequency(target)
        return int(round(float(self.CENTS_PER_OCTAVE * np.log2(detected / target))))

    def cents_from_pitch_index(self, detected: float, target_pitch_index: int) -> Cents:
        """Signed cents between a detected frequency and a target pitch index."""
        return self.cents_offset(detected, self.to_frequency(target_pitch_index))

    def frequency_to_note(self, frequency: float) -> WrittenNote:
        """Nearest note (in sharp spelling) for a frequency.

        Raises:
            ValueError: If the frequency is invalid or outside octaves 0-9
        """
        return note_from_pitch_index(self.from_frequency(frequency))

    @classmethod
    def clamp_cents(cls, cents: int, limit: int = DISPLAY_CENTS_LIMIT) -> Cents:
        """Clamp a cents value into [-limit, limit] for display."""
        return max(-limit, min(limit, int(cents)))


_default_converter = FrequencyConverter()


def to_frequency(pitch_index: int, reference_a4: float = DEFAULT_REFERENCE_A4) -> float:
    if reference_a4 == DEFAULT_REFERENCE_A4:
        return _default_converter.to_frequency(pitch_index)
    return FrequencyConverter(reference_a4).to_frequency(pitch_index)


def from_frequency(frequency: float, reference_a4: float = DEFAULT_REFERENCE_A4) -> int:
    if reference_a4 == DEFAULT_REFERENCE_A4:
        return _default_converter.from_frequency(frequency)
    return FrequencyConverter(reference_a4).from_frequency(frequency)


def cents_offset(detected: float, target: float) -> int:
    return _default_converter.cents_offset(detected, target)


def cents_from_pitch_index(
    detected: float, target_pitch_index: int, reference_a4: float = DEFAULT_REFERENCE_A4
) -> int:
    return FrequencyConverter(reference_a4).cents_from_pitch_index(
        detected, target_pitch_index
    )
