"""Function-level entry points for callers that drive their own UI loop.

Each function is a thin, stateless wrapper over the component classes, so a
caller can pass audio windows and target notes straight in and render the
results.
"""

from typing import List, Mapping, Optional, Union

from .audio.pitch_estimator import PitchEstimator, PitchEstimatorConfig, Samples
from .fingering import FingeringTable, PressedValves
from .instrument import TransposingInstrument
from .note_types import PitchClass, ValveCombination, WrittenNote
from .scales import build_scale as _build_scale
from .services.frequency import DEFAULT_REFERENCE_A4, FrequencyConverter

_default_table = FingeringTable()


def estimate_pitch(
    samples: Samples,
    sample_rate: float,
    config: Union[PitchEstimatorConfig, Mapping, None] = None,
) -> Optional[float]:
    """Fundamental frequency of a window in Hz, or None when no pitch is detected.

    ``config`` may be a PitchEstimatorConfig or a mapping of its fields
    (e.g. ``{"noise_gate": 0.01, "algorithm": "yin"}``).
    """
    if isinstance(config, PitchEstimatorConfig) or config is None:
        estimator = PitchEstimator(config)
    else:
        estimator = PitchEstimator(**dict(config))
    return estimator.estimate_frequency(samples, sample_rate)


def written_note_to_target_frequency(
    note: Union[WrittenNote, str],
    instrument: TransposingInstrument,
    reference_a4: float = DEFAULT_REFERENCE_A4,
) -> float:
    """Sounding frequency expected when ``note`` is played on ``instrument``."""
    return instrument.target_frequency(note, reference_a4)


def cents_offset(detected: float, target: float) -> int:
    """Signed cents from the target frequency to the detected one."""
    return FrequencyConverter().cents_offset(detected, target)


def expected_fingerings(
    note: Union[WrittenNote, str], table: Optional[FingeringTable] = None
) -> List[ValveCombination]:
    return (_default_table if table is None else table).expected_for(note)


def is_fingering_correct(
    pressed: PressedValves,
    note: Union[WrittenNote, str],
    table: Optional[FingeringTable] = None,
) -> bool:
    return (_default_table if table is None else table).is_acceptable(pressed, note)


def build_scale(
    tonic: Union[PitchClass, str], start_octave: int, max_pitch_index: Optional[int]
) -> List[WrittenNote]:
    return _build_scale(tonic, start_octave, max_pitch_index)
