import threading
from typing import Callable, Optional

import numpy as np

from ..audio.pitch_estimator import PitchEstimator
from ..core.events import EventEmitter, PitchEventType
from ..core.interfaces import IAudioProvider, IPitchDetectionService
from ..logger import get_logger
from ..note_matcher import NoteMatcher
from ..note_types import PitchEstimate, PitchFeedback, WrittenNote
from ..note_utils import as_written_note

logger = get_logger(__name__)


class PitchDetectionService(IPitchDetectionService):
    """Listens to an audio provider and grades each window against a target.

    Provider chunks are collected into a sliding window of the estimator's
    ``window_size``; once the window is full every new chunk triggers one
    estimate. Chunks from one provider are processed in arrival order.
    """

    def __init__(
        self,
        audio_provider: IAudioProvider,
        estimator: Optional[PitchEstimator] = None,
        matcher: Optional[NoteMatcher] = None,
        target="C4",
    ) -> None:
        self._audio_provider = audio_provider
        self._estimator = estimator or PitchEstimator()
        self._matcher = matcher or NoteMatcher()
        self._target: WrittenNote = as_written_note(target)
        self._window = np.zeros(0, dtype=np.float32)
        self._lock = threading.Lock()
        self._running = False
        self._on_feedback: Optional[Callable[[PitchFeedback], None]] = None
        self.events = EventEmitter()

    @property
    def target(self) -> WrittenNote:
        return self._target

    def set_target(self, note) -> None:
        """Change the written note that incoming audio is graded against."""
        written = as_written_note(note)
        with self._lock:
            self._target = written
        logger.debug(f"Target set to {written}")

    def start(self, on_feedback: Callable[[PitchFeedback], None]) -> None:
        """Start listening; ``on_feedback`` receives one PitchFeedback per window."""
        self._on_feedback = on_feedback
        self._window = np.zeros(0, dtype=np.float32)
        self._running = True
        self._audio_provider.start(self.process_chunk)
        logger.info(f"Pitch detection started (target {self._target})")

    def stop(self) -> None:
        self._audio_provider.stop()
        self._running = False
        logger.info("Pitch detection stopped")

    def is_running(self) -> bool:
        return self._running

    def process_chunk(self, chunk: np.ndarray) -> Optional[PitchFeedback]:
        """Add one chunk of mono audio and analyse the window if it is full."""
        window_size = self._estimator.config.window_size
        with self._lock:
            self._window = np.concatenate((self._window, np.asarray(chunk, dtype=np.float32)))
            if len(self._window) > window_size:
                self._window = self._window[-window_size:]
            if len(self._window) < window_size:
                return None
            window = self._window.copy()
            target = self._target

        estimate = self._estimator.estimate(window, self._audio_provider.sample_rate)
        feedback = self._matcher.evaluate(estimate.frequency, target)
        self._publish(estimate, feedback)
        return feedback

    def _publish(self, estimate: PitchEstimate, feedback: PitchFeedback) -> None:
        if estimate.detected:
            self.events.emit(PitchEventType.PITCH_DETECTED, feedback, estimate)
        else:
            self.events.emit(PitchEventType.NO_PITCH, estimate)

        if self._on_feedback:
            try:
                self._on_feedback(feedback)
            except Exception as e:
                logger.error(f"Error in pitch feedback callback: {e}", exc_info=True)
