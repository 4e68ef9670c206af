"""Pitch estimation for Euphonium Coach."""

from .pitch_estimator import (
    AutocorrelationStrategy,
    PitchEstimator,
    PitchEstimatorConfig,
    YinStrategy,
)

__all__ = [
    "AutocorrelationStrategy",
    "PitchEstimator",
    "PitchEstimatorConfig",
    "YinStrategy",
]
