"""Utility functions for parsing, normalising and formatting written notes."""

import re
from typing import Dict, List

from .errors import ParseError
from .logger import get_logger
from .note_types import PitchClass, WrittenNote

# Get logger for this module
logger = get_logger(__name__)

SHARP_NOTES: List[str] = [pc.label for pc in PitchClass]

# Fixed one-way table; every other name passes through unchanged.
FLAT_TO_SHARP: Dict[str, str] = {
    "Ab": "G#",
    "Bb": "A#",
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
}

# Compile regex to extract note name and octave
# Matched against the whole text, this pattern requires:
# - Note letter (A-G, uppercase only)
# - Optional accidental (# or b)
# - Exactly one octave digit
NOTE_PATTERN = re.compile(r"([A-G][#b]?)([0-9])")


def normalize_to_sharp(name: str) -> str:
    """Return the sharp spelling of a flat pitch-class name.

    Examples:
        >>> normalize_to_sharp('Bb')
        'A#'
        >>> normalize_to_sharp('F#')
        'F#'
    """
    return FLAT_TO_SHARP.get(name, name)


def pitch_class_from_name(name: str) -> PitchClass:
    """Convert a pitch-class name (sharp or flat spelling) to a PitchClass.

    Raises:
        ParseError: If the name does not spell one of the 12 classes
    """
    if not isinstance(name, str):
        raise ParseError(f"Pitch class name must be a string, got {type(name).__name__}")
    sharp = normalize_to_sharp(name)
    if sharp not in SHARP_NOTES:
        raise ParseError(f"Unknown pitch class: {name!r}")
    return PitchClass(SHARP_NOTES.index(sharp))


def parse_note(text: str) -> WrittenNote:
    """Parse note text such as 'C#4' or 'Bb4' into a WrittenNote.

    Flat spellings are normalised to sharps; the original spelling is not kept.

    Raises:
        ParseError: If the text is not <Letter>[#|b]<digit> or names no pitch class
    """
    if not isinstance(text, str):
        raise ParseError(f"Note must be a string, got {type(text).__name__}")
    match = NOTE_PATTERN.fullmatch(text)
    if not match:
        raise ParseError(f"Malformed note: {text!r}")
    name, octave = match.groups()
    return WrittenNote(pitch_class_from_name(name), int(octave))


def format_note(note: WrittenNote) -> str:
    """Format a WrittenNote in sharp spelling (e.g. 'A#4')."""
    return str(note)


def note_from_pitch_index(pitch_index: int) -> WrittenNote:
    """Build the WrittenNote for a MIDI-style pitch index (60 -> C4).

    Raises:
        ValueError: If the index falls outside octaves 0-9
    """
    octave, pc = divmod(int(pitch_index), 12)
    return WrittenNote(PitchClass(pc), octave - 1)


def as_written_note(note) -> WrittenNote:
    """Accept either a WrittenNote or note text and return a WrittenNote."""
    if isinstance(note, WrittenNote):
        return note
    return parse_note(note)
