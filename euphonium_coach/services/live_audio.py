"""Microphone capture and input-device discovery via sounddevice."""

import sounddevice as sd
import numpy as np
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.interfaces import IAudioProvider
from ..logger import get_logger
from .audio_providers import to_mono

logger = get_logger(__name__)


def list_input_devices() -> List[Tuple[int, Dict[str, Any]]]:
    """All devices with at least one input channel, as (device_id, info) pairs."""
    devices = sd.query_devices()
    return [
        (device_id, device)
        for device_id, device in enumerate(devices)
        if device["max_input_channels"] > 0
    ]


def find_input_device(name_hint: str) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
    """Find the first input device whose name contains ``name_hint``.

    Returns:
        A tuple of (device_id, device_info) if found, (None, None) otherwise
    """
    for device_id, device in list_input_devices():
        if name_hint.lower() in device["name"].lower():
            return device_id, device
    return None, None


class LiveAudioProvider(IAudioProvider):
    """Provides live audio from an input device using sounddevice."""

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: int = 44100,
        channels: int = 1,
        chunk_size: int = 1024,
    ):
        self._device_id = device_id
        self._sample_rate = sample_rate
        self._channels = channels
        self._chunk_size = chunk_size
        self._stream: Optional[sd.InputStream] = None
        self._on_data_callback: Optional[Callable[[np.ndarray], None]] = None

    def start(self, on_data_callback: Callable[[np.ndarray], None]) -> None:
        self._on_data_callback = on_data_callback
        self._stream = sd.InputStream(
            device=self._device_id,
            channels=self._channels,
            samplerate=self._sample_rate,
            blocksize=self._chunk_size,
            callback=self._audio_callback,
            dtype="float32",
        )
        self._stream.start()
        logger.info(
            f"Listening on device {self._device_id} at {self._sample_rate}Hz "
            f"({self._chunk_size} frames per block)"
        )

    def stop(self) -> None:
        if self._stream:
            self._stream.stop()
            self._stream.close()
            self._stream = None
            logger.info("Stopped listening")

    def _audio_callback(
        self, indata: np.ndarray, _frames: int, _time_info, status
    ) -> None:
        if status:
            logger.warning(f"Audio stream status: {status}")
        if self._on_data_callback:
            self._on_data_callback(to_mono(indata.copy()))

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels
