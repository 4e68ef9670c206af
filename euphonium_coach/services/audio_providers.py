import soundfile as sf
import numpy as np
import threading
import time
from typing import Callable, Iterator, Optional, Tuple

from ..core.interfaces import IAudioProvider
from ..logger import get_logger

logger = get_logger(__name__)


def to_mono(data: np.ndarray) -> np.ndarray:
    """Average a (frames, channels) block down to one float32 channel."""
    data = np.asarray(data, dtype=np.float32)
    if data.ndim == 2:
        return data.mean(axis=1)
    return data


def read_wav_windows(
    file_path: str, window_size: int, hop_size: Optional[int] = None
) -> Tuple[int, Iterator[Tuple[float, np.ndarray]]]:
    """Read a sound file as successive mono analysis windows.

    Args:
        file_path: Path to any format libsndfile reads (WAV, FLAC, ...)
        window_size: Samples per window
        hop_size: Samples between window starts (defaults to window_size)

    Returns:
        The file's sample rate and an iterator of (start time in seconds, window)
    """
    hop_size = hop_size or window_size
    data, sample_rate = sf.read(file_path, dtype="float32", always_2d=True)
    audio = to_mono(data)

    def windows() -> Iterator[Tuple[float, np.ndarray]]:
        for start in range(0, max(len(audio) - window_size, 0) + 1, hop_size):
            window = audio[start : start + window_size]
            if window.size:
                yield start / sample_rate, window

    logger.info(f"Read {len(audio)} frames at {sample_rate}Hz from {file_path}")
    return sample_rate, windows()


class WavFileAudioProvider(IAudioProvider):
    """Provides audio data by reading from a WAV file."""

    def __init__(
        self,
        file_path: str,
        chunk_size: int,
        loop: bool = False,
        gain: float = 1.0,
        realtime: bool = True,
    ):
        self._file_path = file_path
        self._chunk_size = chunk_size
        self._loop = loop
        self._gain = gain
        self._realtime = realtime
        self._on_data_callback: Optional[Callable[[np.ndarray], None]] = None
        self._is_running = False
        self._thread: Optional[threading.Thread] = None

        with sf.SoundFile(self._file_path) as f:
            self._sample_rate = f.samplerate
            self._channels = f.channels

    def start(self, on_data_callback: Callable[[np.ndarray], None]) -> None:
        if self._is_running:
            return

        self._on_data_callback = on_data_callback
        self._is_running = True
        self._thread = threading.Thread(target=self._stream_data, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._is_running = False
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the file has been streamed (non-looping providers)."""
        if self._thread:
            self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        """Returns True if the provider is currently streaming data."""
        return self._is_running

    def _stream_data(self) -> None:
        try:
            while self._is_running:
                with sf.SoundFile(self._file_path) as f:
                    while self._is_running:
                        data = f.read(self._chunk_size, dtype="float32", always_2d=True)
                        if len(data) == 0:
                            break

                        # Apply gain if specified
                        if self._gain != 1.0:
                            data *= self._gain

                        if self._on_data_callback:
                            self._on_data_callback(to_mono(data))

                        # Simulate real-time playback speed
                        if self._realtime:
                            time.sleep(len(data) / self.sample_rate)

                if not self._loop:
                    break  # Exit outer loop if not looping
        except (OSError, RuntimeError) as e:
            logger.error(f"Error streaming {self._file_path}: {e}")
        finally:
            self._is_running = False  # Ensure flag is reset on exit

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels
