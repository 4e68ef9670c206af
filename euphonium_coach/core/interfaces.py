"""Defines the core interfaces for the Euphonium Coach application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Callable

import numpy as np

from ..note_types import PitchFeedback


class IPitchStrategy(ABC):
    """Interface for period-finding algorithms used by the pitch estimator."""

    #: Registry name of the algorithm (e.g. 'yin')
    name: str = ""

    #: Fewest samples the algorithm can analyse
    min_samples: int = 2

    @abstractmethod
    def find_period(self, window: np.ndarray) -> Optional[float]:
        """Return the fundamental period in samples, or None if there is none."""
        pass


class IAudioProvider(ABC):
    """An abstract interface for audio providers."""

    @abstractmethod
    def start(self, on_data_callback: Callable[[np.ndarray], None]) -> None:
        """Starts the audio stream, calling the callback with mono float32 chunks."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stops the audio stream."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass

    @property
    @abstractmethod
    def channels(self) -> int:
        """The number of channels in the audio stream."""
        pass


class IPitchDetectionService(ABC):
    """Interface for the streaming pitch detection service."""

    @abstractmethod
    def start(self, on_feedback: Callable[[PitchFeedback], None]) -> None:
        """Start listening and report each analysed window."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop listening."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if the service is running."""
        pass
