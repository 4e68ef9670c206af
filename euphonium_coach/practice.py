import random
from typing import Dict, List, Optional, Union

from .fingering import OPEN, FingeringTable, PressedValves, toggle_valve
from .logger import get_logger
from .note_matcher import NoteMatcher
from .note_types import FingeringFeedback, PitchClass, PitchFeedback, ValveCombination, WrittenNote
from .note_utils import note_from_pitch_index, pitch_class_from_name
from .scales import (
    DEFAULT_MAX_PITCH_INDEX,
    DEFAULT_SCALE_OCTAVE,
    ScaleTraversal,
    build_scale,
)

# Get logger for this module
logger = get_logger(__name__)

FLASHCARDS = "flashcards"
SCALES = "scales"


def practice_pool(low: int = 60, high: int = 71) -> List[WrittenNote]:
    """Chromatic written notes from pitch index ``low`` to ``high`` inclusive."""
    if low > high:
        raise ValueError(f"Empty practice pool: {low} > {high}")
    return [note_from_pitch_index(i) for i in range(low, high + 1)]


class PracticeSession:
    """Drives one practice run: picks targets and grades attempts.

    Flashcard mode draws random notes from the pool; scale mode walks the
    selected major scale up and down. Targets are written notes; the matcher
    handles transposition when pitches are graded.
    """

    MODES = (FLASHCARDS, SCALES)

    def __init__(
        self,
        fingering_table: Optional[FingeringTable] = None,
        matcher: Optional[NoteMatcher] = None,
        mode: str = FLASHCARDS,
        tonic: Union[PitchClass, str] = "C",
        pool: Optional[List[WrittenNote]] = None,
        scale_octave: int = DEFAULT_SCALE_OCTAVE,
        scale_max_pitch_index: Optional[int] = DEFAULT_MAX_PITCH_INDEX,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the session.

        Args:
            fingering_table: Table used to grade valves (default table if None)
            matcher: Matcher used to grade pitch (default Bb instrument if None)
            mode: 'flashcards' or 'scales'
            tonic: Written tonic for scale mode
            pool: Flashcard notes (C4..B4 if None)
            scale_octave: Octave the scale starts in
            scale_max_pitch_index: Highest pitch index a scale may reach
            rng: Random source for flashcards, injectable for tests
        """
        self.fingering_table = FingeringTable() if fingering_table is None else fingering_table
        self.matcher = matcher or NoteMatcher()
        self.pool = list(pool) if pool is not None else practice_pool()
        if not self.pool:
            raise ValueError("Practice pool is empty")
        self.scale_octave = scale_octave
        self.scale_max_pitch_index = scale_max_pitch_index
        self.rng = rng or random.Random()

        self.held_valves: ValveCombination = OPEN
        self.stats: Dict[str, int] = {
            "fingering_attempts": 0,
            "fingering_correct": 0,
            "pitch_attempts": 0,
            "pitch_in_tune": 0,
        }

        self.tonic = self._tonic(tonic)
        self.traversal = ScaleTraversal(self._build_scale())
        self.mode = FLASHCARDS
        self.current_target: WrittenNote = self.pool[0]
        self.set_mode(mode)

    @staticmethod
    def _tonic(tonic: Union[PitchClass, str]) -> PitchClass:
        return tonic if isinstance(tonic, PitchClass) else pitch_class_from_name(tonic)

    def _build_scale(self) -> List[WrittenNote]:
        return build_scale(self.tonic, self.scale_octave, self.scale_max_pitch_index)

    @property
    def scale(self) -> List[WrittenNote]:
        return list(self.traversal.notes)

    def set_mode(self, mode: str) -> None:
        if mode not in self.MODES:
            raise ValueError(f"Unknown practice mode: {mode!r}")
        self.mode = mode
        if mode == SCALES:
            self.traversal.reset()
            self._set_target(self.traversal.current)
        else:
            self.next_target()
        logger.info(f"Practice mode: {mode}, target {self.current_target}")

    def set_tonic(self, tonic: Union[PitchClass, str]) -> None:
        """Select a new scale; in scale mode the target returns to the tonic."""
        self.tonic = self._tonic(tonic)
        self.traversal = ScaleTraversal(self._build_scale())
        if self.mode == SCALES:
            self._set_target(self.traversal.current)
        logger.debug(f"Scale set to {self.tonic.label} major: {[str(n) for n in self.scale]}")

    def _set_target(self, note: WrittenNote) -> None:
        self.current_target = note
        self.held_valves = OPEN

    def next_target(self) -> WrittenNote:
        """Move on to the next target note for the current mode."""
        if self.mode == SCALES:
            note = self.traversal.advance()
        else:
            note = self.rng.choice(self.pool)
        self._set_target(note)
        return note

    def press_valve(self, valve: Union[int, str]) -> FingeringFeedback:
        """Toggle one valve and grade what is now held."""
        self.held_valves = toggle_valve(self.held_valves, valve)
        return self.fingering_table.classify(self.held_valves, self.current_target)

    def release_valves(self) -> FingeringFeedback:
        """Lift every valve (play open) and grade that."""
        self.held_valves = OPEN
        return self.fingering_table.classify(OPEN, self.current_target)

    def submit_fingering(self, pressed: Optional[PressedValves] = None) -> bool:
        """Grade a fingering for the current target and advance.

        Args:
            pressed: Valves to grade; the currently held valves if None
        """
        if pressed is None:
            pressed = self.held_valves
        target = self.current_target
        ok = self.fingering_table.is_acceptable(pressed, target)

        self.stats["fingering_attempts"] += 1
        if ok:
            self.stats["fingering_correct"] += 1
        logger.info(f"Fingering for {target}: {'correct' if ok else 'incorrect'}")

        self.next_target()
        return ok

    def submit_pitch(self, detected_frequency: Optional[float]) -> PitchFeedback:
        """Grade the pitch heard for the current target and advance."""
        feedback = self.matcher.evaluate(detected_frequency, self.current_target)

        self.stats["pitch_attempts"] += 1
        if feedback.in_tune:
            self.stats["pitch_in_tune"] += 1
        logger.info(
            f"Pitch for {feedback.target}: "
            f"{'in tune' if feedback.in_tune else 'out of tune'} ({feedback.cents} cents)"
        )

        self.next_target()
        return feedback
