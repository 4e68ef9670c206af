"""Valve fingerings for written notes on a 3-valve instrument."""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .errors import ConfigurationError
from .logger import get_logger
from .note_types import FingeringFeedback, ValveCombination, WrittenNote
from .note_utils import as_written_note, parse_note

logger = get_logger(__name__)

OPEN: ValveCombination = "0"
VALVES = ("1", "2", "3")

# Standard written fingerings, C4..B4. The first entry is the primary
# fingering; "3" is the usual alternative wherever "12" is primary.
DEFAULT_FINGERINGS: Dict[str, List[ValveCombination]] = {
    "C4": ["0"],
    "C#4": ["123"],
    "D4": ["13"],
    "D#4": ["23"],
    "E4": ["12", "3"],
    "F4": ["1"],
    "F#4": ["2"],
    "G4": ["0"],
    "G#4": ["23"],
    "A4": ["12", "3"],
    "A#4": ["1"],
    "B4": ["2"],
}

PressedValves = Union[str, Iterable[Union[int, str]]]


def normalize_valves(pressed: PressedValves) -> ValveCombination:
    """Canonical form of a set of pressed valves.

    Accepts a digit string ("21") or an iterable of ints/strings ({2, 1}).
    No valves (or only "0") gives the open sentinel "0"; otherwise the
    result is the sorted, duplicate-free digit string.

    Examples:
        >>> normalize_valves("")
        '0'
        >>> normalize_valves("2121")
        '12'

    Raises:
        ValueError: If any entry is not a valve number 0-3
    """
    digits = set()
    for valve in pressed:
        digit = str(valve)
        if digit == OPEN:
            continue
        if digit not in VALVES:
            raise ValueError(f"Not a valve: {valve!r}")
        digits.add(digit)
    if not digits:
        return OPEN
    return "".join(sorted(digits))


def toggle_valve(current: ValveCombination, valve: Union[int, str]) -> ValveCombination:
    """Press a valve if it is up, release it if it is down."""
    digit = str(valve)
    if digit not in VALVES:
        raise ValueError(f"Not a valve: {valve!r}")
    held = set(normalize_valves(current)) - {OPEN}
    held ^= {digit}
    return normalize_valves(held)


def is_partial_progress(
    pressed: ValveCombination, expected_primary: ValveCombination
) -> bool:
    """True when pressed is a non-empty proper subset of the primary fingering."""
    if pressed == OPEN or expected_primary == OPEN:
        return False
    pressed_set, expected_set = set(pressed), set(expected_primary)
    return pressed_set < expected_set


class FingeringTable:
    """Lookup of acceptable valve combinations per written note.

    The table is data: pass any note -> fingerings mapping, or load one from
    JSON, to replace the default. Keys may use flat spellings; they are
    normalised so enharmonic notes share one entry.
    """

    def __init__(
        self, mapping: Optional[Mapping[str, Sequence[PressedValves]]] = None
    ) -> None:
        source = DEFAULT_FINGERINGS if mapping is None else mapping
        self._table: Dict[WrittenNote, List[ValveCombination]] = {}

        for key, fingerings in source.items():
            note = parse_note(key)
            if isinstance(fingerings, str):
                fingerings = [fingerings]
            normalized: List[ValveCombination] = []
            for fingering in fingerings:
                combo = normalize_valves(fingering)
                if combo not in normalized:
                    normalized.append(combo)
            if not normalized:
                raise ConfigurationError(f"No fingerings given for {key}")

            existing = self._table.get(note)
            if existing is not None and existing != normalized:
                raise ConfigurationError(
                    f"Conflicting fingerings for {note}: {existing} vs {normalized} ({key})"
                )
            self._table[note] = normalized

        logger.info(f"Fingering table loaded with {len(self._table)} notes")

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "FingeringTable":
        """Load a table from a JSON object of note -> list of fingerings."""
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ConfigurationError(f"Fingering table in {path} must be a JSON object")
        logger.info(f"Loaded fingering table from {path}")
        return cls(data)

    def to_dict(self) -> Dict[str, List[ValveCombination]]:
        return {str(note): list(combos) for note, combos in self._table.items()}

    def __contains__(self, note) -> bool:
        return as_written_note(note) in self._table

    def __len__(self) -> int:
        return len(self._table)

    def expected_for(self, note) -> List[ValveCombination]:
        """Acceptable fingerings for a note, primary first.

        Notes missing from the table are treated as open and return ["0"].

        Raises:
            ParseError: If note text is malformed
        """
        written = as_written_note(note)
        combos = self._table.get(written)
        if combos is None:
            logger.debug(f"No fingering for {written}, assuming open")
            return [OPEN]
        return list(combos)

    def primary_for(self, note) -> ValveCombination:
        return self.expected_for(note)[0]

    def is_acceptable(self, pressed: PressedValves, note) -> bool:
        return normalize_valves(pressed) in self.expected_for(note)

    def classify(self, pressed: PressedValves, note) -> FingeringFeedback:
        """Grade the valves currently held for a target note."""
        combo = normalize_valves(pressed)
        expected = self.expected_for(note)

        if combo in expected:
            return FingeringFeedback.CORRECT
        if is_partial_progress(combo, expected[0]):
            return FingeringFeedback.PARTIAL
        return FingeringFeedback.WRONG
