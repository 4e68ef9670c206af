"""Fundamental-frequency estimation for monophonic brass audio."""

from __future__ import annotations
import numpy as np
from dataclasses import dataclass, replace
from typing import ClassVar, Dict, Optional, Sequence, Type, TypeAlias, Union

from ..errors import ConfigurationError
from ..logger import get_logger
from ..note_types import NoPitchReason, PitchEstimate
from ..core.interfaces import IPitchStrategy

logger = get_logger(__name__)

Samples: TypeAlias = Union[np.ndarray, Sequence[float]]


@dataclass(frozen=True)
class PitchEstimatorConfig:
    """Tunable settings for the pitch estimator.

    Attributes:
        noise_gate: Window RMS below which the window counts as silence
        algorithm: Registered strategy name ('autocorrelation' or 'yin')
        window_size: Samples analysed per call; longer buffers use their tail
        yin_threshold: Normalised-difference threshold for the YIN strategy
        clarity_threshold: Lowest autocorrelation peak, relative to lag 0,
            that the autocorrelation strategy accepts as periodic
        max_frequency: Estimates at or above this (Hz) are rejected
    """

    noise_gate: float = 0.003  # low enough that soft brass onsets register
    algorithm: str = "autocorrelation"
    window_size: int = 2048
    yin_threshold: float = 0.15
    clarity_threshold: float = 0.3
    max_frequency: float = 1500.0


class AutocorrelationStrategy(IPitchStrategy):
    """Plain time-domain autocorrelation, peak picked after the zero-lag lobe."""

    name = "autocorrelation"
    min_samples = 2

    def __init__(self, config: Optional[PitchEstimatorConfig] = None) -> None:
        config = config or PitchEstimatorConfig()
        self.clarity_threshold = config.clarity_threshold

    def find_period(self, window: np.ndarray) -> Optional[float]:
        n = len(window)
        # corr[lag] = sum(window[i] * window[i + lag]) for lag in [0, n)
        corr = np.correlate(window, window, mode="full")[n - 1 :]

        # Skip the descending run from lag 0 so the zero-lag peak is never picked
        rising = np.nonzero(np.diff(corr) >= 0)[0]
        if not rising.size or corr[0] <= 0:
            return None
        start = int(rising[0])

        peak = start + int(np.argmax(corr[start:]))
        if peak <= 0:
            return None
        # Noise and drift have no peak near the lag-0 energy
        if corr[peak] / corr[0] < self.clarity_threshold:
            return None
        return float(peak)


class YinStrategy(IPitchStrategy):
    """YIN: cumulative-mean-normalised difference with parabolic refinement."""

    name = "yin"
    min_samples = 6  # half-window must hold lags 1, 2 and a neighbour
    MIN_LAG: ClassVar[int] = 2

    def __init__(self, config: Optional[PitchEstimatorConfig] = None) -> None:
        config = config or PitchEstimatorConfig()
        self.threshold = config.yin_threshold

    def difference(self, window: np.ndarray) -> np.ndarray:
        """Squared difference d[tau] over half the window."""
        half = len(window) // 2
        diff = np.zeros(half)
        reference = window[:half]
        for tau in range(1, half):
            delta = reference - window[tau : tau + half]
            diff[tau] = np.dot(delta, delta)
        return diff

    @staticmethod
    def cumulative_mean_normalized(diff: np.ndarray) -> np.ndarray:
        cmnd = np.ones(len(diff))
        running = np.cumsum(diff[1:])
        taus = np.arange(1, len(diff))
        with np.errstate(divide="ignore", invalid="ignore"):
            normalized = diff[1:] * taus / running
        cmnd[1:] = np.where(running > 0, normalized, 1.0)
        return cmnd

    def find_period(self, window: np.ndarray) -> Optional[float]:
        cmnd = self.cumulative_mean_normalized(self.difference(window))
        size = len(cmnd)

        below = np.nonzero(cmnd[self.MIN_LAG :] < self.threshold)[0]
        if not below.size:
            return None
        tau = int(below[0]) + self.MIN_LAG

        # Keep going while the dip deepens; stopping early halves the frequency
        while tau + 1 < size and cmnd[tau + 1] < cmnd[tau]:
            tau += 1

        refined = float(tau)
        if 0 < tau < size - 1:
            alpha, beta, gamma = cmnd[tau - 1], cmnd[tau], cmnd[tau + 1]
            denominator = alpha - 2 * beta + gamma
            if abs(denominator) > 1e-12:
                shift = 0.5 * (alpha - gamma) / denominator
                if abs(shift) <= 1.0:
                    refined = tau + shift
        return refined


STRATEGIES: Dict[str, Type[IPitchStrategy]] = {
    AutocorrelationStrategy.name: AutocorrelationStrategy,
    YinStrategy.name: YinStrategy,
}


def validate_config(config: PitchEstimatorConfig) -> None:
    """Raise ConfigurationError if any setting is unusable."""
    if config.algorithm not in STRATEGIES:
        raise ConfigurationError(
            f"Unknown pitch algorithm: {config.algorithm!r} "
            f"(choose from {', '.join(STRATEGIES)})"
        )
    if not config.noise_gate >= 0:
        raise ConfigurationError(f"noise_gate must be >= 0, got {config.noise_gate}")
    if not config.max_frequency > 0:
        raise ConfigurationError(
            f"max_frequency must be positive, got {config.max_frequency}"
        )
    if not 0.0 < config.yin_threshold < 1.0:
        raise ConfigurationError(
            f"yin_threshold must be between 0 and 1, got {config.yin_threshold}"
        )
    if not 0.0 <= config.clarity_threshold < 1.0:
        raise ConfigurationError(
            f"clarity_threshold must be in [0, 1), got {config.clarity_threshold}"
        )
    minimum = STRATEGIES[config.algorithm].min_samples
    if not isinstance(config.window_size, int) or config.window_size < minimum:
        raise ConfigurationError(
            f"window_size must be an integer >= {minimum} for {config.algorithm}, "
            f"got {config.window_size!r}"
        )


class PitchEstimator:
    """Turns a window of samples into a fundamental-frequency estimate.

    The estimator holds no per-stream state; the same instance may be shared
    between threads. A window yields ``PitchEstimate(frequency=None, ...)``
    for silence, noise, short buffers and out-of-range results.
    """

    def __init__(self, config: Optional[PitchEstimatorConfig] = None, **kwargs) -> None:
        """Initialize the PitchEstimator.

        Args:
            config: Full configuration; defaults to PitchEstimatorConfig()
            **kwargs: Individual PitchEstimatorConfig fields overriding config
        """
        config = config or PitchEstimatorConfig()
        if kwargs:
            try:
                config = replace(config, **kwargs)
            except TypeError as e:
                raise ConfigurationError(f"Unknown estimator setting: {e}") from e
        validate_config(config)

        self._config = config
        self._strategy = STRATEGIES[config.algorithm](config)

        logger.debug(
            f"Pitch estimator initialized: algorithm={config.algorithm}, "
            f"window_size={config.window_size}, noise_gate={config.noise_gate}"
        )

    @property
    def config(self) -> PitchEstimatorConfig:
        return self._config

    @property
    def algorithm(self) -> str:
        return self._config.algorithm

    @property
    def noise_gate(self) -> float:
        """Get the RMS noise gate."""
        return self._config.noise_gate

    @noise_gate.setter
    def noise_gate(self, value: float) -> None:
        """Set the RMS noise gate, e.g. for a quieter microphone."""
        config = replace(self._config, noise_gate=value)
        validate_config(config)
        self._config = config

    def estimate(self, samples: Samples, sample_rate: float) -> PitchEstimate:
        """Estimate the fundamental frequency of one window.

        Args:
            samples: Mono samples; only the last ``window_size`` are analysed
            sample_rate: Sample rate in Hz

        Returns:
            A PitchEstimate whose frequency is None when no pitch is detected

        Raises:
            ConfigurationError: If sample_rate <= 0 or the buffer is empty
        """
        if not np.isfinite(sample_rate) or sample_rate <= 0:
            raise ConfigurationError(f"Sample rate must be positive, got {sample_rate}")

        audio = np.asarray(samples, dtype=np.float64)
        if audio.ndim != 1:
            raise ConfigurationError(f"Expected mono samples, got shape {audio.shape}")
        if audio.size == 0:
            raise ConfigurationError("Cannot estimate pitch of an empty buffer")
        if audio.size > self._config.window_size:
            audio = audio[-self._config.window_size :]

        name = self._strategy.name
        if not np.all(np.isfinite(audio)):
            logger.warning("Non-finite samples in window, skipping")
            return PitchEstimate(None, 0.0, name, NoPitchReason.NO_PERIOD)

        rms = float(np.sqrt(np.mean(audio**2)))

        if audio.size < self._strategy.min_samples:
            logger.debug(f"Window too short: {audio.size} < {self._strategy.min_samples}")
            return PitchEstimate(None, rms, name, NoPitchReason.TOO_SHORT)

        if rms < self._config.noise_gate:
            logger.debug(f"Signal too weak: rms={rms:.4f} < gate={self._config.noise_gate}")
            return PitchEstimate(None, rms, name, NoPitchReason.SILENCE)

        period = self._strategy.find_period(audio)
        if period is None or not np.isfinite(period) or period <= 0:
            logger.debug(f"No period found (rms={rms:.4f})")
            return PitchEstimate(None, rms, name, NoPitchReason.NO_PERIOD)

        frequency = float(sample_rate) / period
        if not np.isfinite(frequency) or frequency <= 0:
            return PitchEstimate(None, rms, name, NoPitchReason.NO_PERIOD)
        if frequency >= self._config.max_frequency:
            logger.debug(
                f"Rejected {frequency:.1f}Hz (>= {self._config.max_frequency:.0f}Hz)"
            )
            return PitchEstimate(None, rms, name, NoPitchReason.OUT_OF_RANGE)

        logger.debug(f"[{name}] {frequency:.1f}Hz (period={period:.2f}, rms={rms:.4f})")
        return PitchEstimate(frequency, rms, name)

    def estimate_frequency(self, samples: Samples, sample_rate: float) -> Optional[float]:
        """Like estimate() but returns only the frequency, or None for no pitch."""
        return self.estimate(samples, sample_rate).frequency
