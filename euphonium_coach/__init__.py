"""Euphonium Coach: pitch and valve-fingering practice for 3-valve brass."""

from .api import (
    build_scale,
    cents_offset,
    estimate_pitch,
    expected_fingerings,
    is_fingering_correct,
    written_note_to_target_frequency,
)
from .audio.pitch_estimator import PitchEstimator, PitchEstimatorConfig
from .errors import ConfigurationError, EuphoniumCoachError, ParseError
from .fingering import FingeringTable, normalize_valves
from .instrument import TransposingInstrument
from .note_types import (
    FingeringFeedback,
    NoPitchReason,
    PitchClass,
    PitchEstimate,
    PitchFeedback,
    WrittenNote,
)
from .note_utils import format_note, normalize_to_sharp, parse_note
from .services.frequency import FrequencyConverter

__version__ = "0.1.0"

__all__ = [
    "build_scale",
    "cents_offset",
    "estimate_pitch",
    "expected_fingerings",
    "is_fingering_correct",
    "written_note_to_target_frequency",
    "PitchEstimator",
    "PitchEstimatorConfig",
    "ConfigurationError",
    "EuphoniumCoachError",
    "ParseError",
    "FingeringTable",
    "normalize_valves",
    "TransposingInstrument",
    "FingeringFeedback",
    "NoPitchReason",
    "PitchClass",
    "PitchEstimate",
    "PitchFeedback",
    "WrittenNote",
    "format_note",
    "normalize_to_sharp",
    "parse_note",
    "FrequencyConverter",
]
