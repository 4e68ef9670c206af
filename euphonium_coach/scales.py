"""Major-scale sequences of written notes and the practice traversal over them."""

from typing import List, Optional, Sequence, Tuple, Union

from .logger import get_logger
from .note_types import PitchClass, WrittenNote
from .note_utils import note_from_pitch_index, pitch_class_from_name

logger = get_logger(__name__)

MAJOR_SCALE_STEPS: List[int] = [2, 2, 1, 2, 2, 2, 1]

# Written keys offered for scale practice
WRITTEN_TONICS: List[str] = ["C", "G", "D", "F", "Bb", "A", "E", "Eb"]

DEFAULT_SCALE_OCTAVE = 4
DEFAULT_MAX_PITCH_INDEX = 71  # B4


def build_scale(
    tonic: Union[PitchClass, str],
    start_octave: int = DEFAULT_SCALE_OCTAVE,
    max_pitch_index: Optional[int] = None,
) -> List[WrittenNote]:
    """Build the ascending major scale from a tonic, tonic to octave.

    Args:
        tonic: Tonic pitch class, as a PitchClass or a name such as 'Bb'
        start_octave: Octave of the tonic
        max_pitch_index: If given, notes above this pitch index are dropped.
            The tonic is always kept, even when it is itself above the limit.

    Returns:
        Eight notes before clamping, at least one after.
    """
    if not isinstance(tonic, PitchClass):
        tonic = pitch_class_from_name(tonic)
    tonic_index = WrittenNote(tonic, start_octave).pitch_index

    indices = [tonic_index]
    for step in MAJOR_SCALE_STEPS:
        indices.append(indices[-1] + step)

    if max_pitch_index is not None:
        kept = [tonic_index] + [i for i in indices[1:] if i <= max_pitch_index]
        if len(kept) < len(indices):
            logger.debug(
                f"Clamped {tonic.label} major at pitch index {max_pitch_index}: "
                f"{len(indices)} -> {len(kept)} notes"
            )
        indices = kept

    return [note_from_pitch_index(i) for i in indices]


def next_scale_index(index: int, ascending: bool, length: int) -> Tuple[int, bool]:
    """Advance a ping-pong traversal over a sequence of ``length`` notes.

    The index moves up while ascending and down while descending. Direction
    flips on arrival at either end, so on three notes starting at 0
    ascending the indices run 1, 2, 1, 0, 1, ...

    Returns:
        The next index and the direction to use for the following step.
    """
    if length < 1:
        raise ValueError("Cannot traverse an empty scale")
    if length == 1:
        return 0, ascending

    last = length - 1
    index = max(0, min(last, index))

    if ascending:
        if index >= last:
            return last - 1, last - 1 == 0
        index += 1
        return index, index < last
    if index <= 0:
        return 1, 1 < last
    index -= 1
    return index, index == 0


class ScaleTraversal:
    """Holds the position of a driver stepping through a scale."""

    def __init__(self, notes: Sequence[WrittenNote]) -> None:
        if not notes:
            raise ValueError("Cannot traverse an empty scale")
        self.notes = list(notes)
        self.index = 0
        self.ascending = True

    @property
    def current(self) -> WrittenNote:
        return self.notes[self.index]

    def advance(self) -> WrittenNote:
        self.index, self.ascending = next_scale_index(
            self.index, self.ascending, len(self.notes)
        )
        return self.current

    def reset(self) -> None:
        self.index = 0
        self.ascending = True
