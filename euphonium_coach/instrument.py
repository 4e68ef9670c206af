"""Written <-> sounding pitch conversion for a transposing instrument.

This is the only module that applies the transposition offset. Anything
that compares a microphone frequency with a written note must go through
``TransposingInstrument``.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .errors import ConfigurationError
from .logger import get_logger
from .note_types import WrittenNote
from .note_utils import as_written_note, note_from_pitch_index
from .services.frequency import DEFAULT_REFERENCE_A4, FrequencyConverter

logger = get_logger(__name__)

# Semitones the sounding pitch lies below the written pitch
INSTRUMENT_PRESETS: Dict[str, int] = {
    "C": 0,
    "Bb": 2,
    "Bb treble euphonium": 14,
}
DEFAULT_INSTRUMENT = "Bb"


@dataclass(frozen=True)
class TransposingInstrument:
    """An instrument that sounds a fixed interval below its written pitch."""

    name: str
    transposition_semitones: int

    def __post_init__(self):
        if not isinstance(self.transposition_semitones, int):
            raise ConfigurationError(
                f"Transposition must be a whole number of semitones, "
                f"got {self.transposition_semitones!r}"
            )

    @classmethod
    def preset(cls, name: str = DEFAULT_INSTRUMENT) -> "TransposingInstrument":
        """Build one of the INSTRUMENT_PRESETS by name."""
        if name not in INSTRUMENT_PRESETS:
            raise ConfigurationError(
                f"Unknown instrument preset: {name!r} "
                f"(choose from {', '.join(INSTRUMENT_PRESETS)})"
            )
        return cls(name, INSTRUMENT_PRESETS[name])

    def written_to_sounding_pitch_index(self, pitch_index: int) -> int:
        return pitch_index - self.transposition_semitones

    def sounding_to_written_pitch_index(self, pitch_index: int) -> int:
        return pitch_index + self.transposition_semitones

    def target_frequency(
        self, note, reference_a4: float = DEFAULT_REFERENCE_A4
    ) -> float:
        """Sounding frequency the microphone should hear for a written note."""
        written = as_written_note(note)
        sounding = self.written_to_sounding_pitch_index(written.pitch_index)
        return FrequencyConverter(reference_a4).to_frequency(sounding)

    def written_note_heard(
        self, frequency: float, reference_a4: float = DEFAULT_REFERENCE_A4
    ) -> Optional[WrittenNote]:
        """Written note the player would read for a detected sounding frequency.

        Returns None when the result cannot be written with a single-digit octave.
        """
        sounding = FrequencyConverter(reference_a4).from_frequency(frequency)
        try:
            return note_from_pitch_index(self.sounding_to_written_pitch_index(sounding))
        except ValueError:
            logger.debug(f"{frequency:.1f}Hz is outside the writable range")
            return None
