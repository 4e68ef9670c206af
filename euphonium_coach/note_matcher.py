from typing import Optional

from .instrument import TransposingInstrument
from .logger import get_logger
from .note_types import PitchFeedback
from .note_utils import as_written_note
from .services.frequency import DEFAULT_REFERENCE_A4, FrequencyConverter

# Get logger for this module
logger = get_logger(__name__)

DEFAULT_IN_TUNE_CENTS = 25


class NoteMatcher:
    """
    Encapsulates logic for comparing detected pitches to written target notes,
    including transposition and enharmonic equivalence.
    """

    def __init__(
        self,
        instrument: Optional[TransposingInstrument] = None,
        reference_a4: float = DEFAULT_REFERENCE_A4,
        in_tune_cents: int = DEFAULT_IN_TUNE_CENTS,
    ) -> None:
        self.instrument = instrument or TransposingInstrument.preset()
        self.converter = FrequencyConverter(reference_a4)
        if in_tune_cents < 0:
            raise ValueError("in_tune_cents must be >= 0")
        self.in_tune_cents = in_tune_cents

    @property
    def reference_a4(self) -> float:
        return self.converter.reference_a4

    @staticmethod
    def match(target, played) -> bool:
        """
        Check if two written notes are the same pitch.

        Args:
            target: The target note (e.g., 'Bb4' or a WrittenNote)
            played: The played note (e.g., 'A#4' or a WrittenNote)
        Returns:
            bool: True for the same pitch in any enharmonic spelling
        """
        return as_written_note(target) == as_written_note(played)

    def target_frequency(self, target) -> float:
        return self.instrument.target_frequency(target, self.reference_a4)

    def evaluate(self, detected_frequency: Optional[float], target) -> PitchFeedback:
        """Judge a detected sounding frequency against a written target.

        Args:
            detected_frequency: Frequency from the estimator, or None for no pitch
            target: The written target note

        Returns:
            PitchFeedback; cents fields are None when nothing was detected
        """
        written = as_written_note(target)
        target_freq = self.target_frequency(written)

        if detected_frequency is None:
            return PitchFeedback(target=written, target_frequency=target_freq)

        cents = self.converter.cents_offset(detected_frequency, target_freq)
        feedback = PitchFeedback(
            target=written,
            target_frequency=target_freq,
            detected_frequency=detected_frequency,
            cents=cents,
            display_cents=FrequencyConverter.clamp_cents(cents),
            in_tune=abs(cents) <= self.in_tune_cents,
            heard=self.instrument.written_note_heard(
                detected_frequency, self.reference_a4
            ),
        )
        logger.debug(
            f"Target {written} ({target_freq:.1f}Hz) | detected "
            f"{detected_frequency:.1f}Hz | {cents:+d} cents"
        )
        return feedback
