"""Core components for the Euphonium Coach application."""

# Import interfaces for easier access
from .interfaces import (
    IPitchStrategy,
    IAudioProvider,
    IPitchDetectionService,
)

__all__ = ["IPitchStrategy", "IAudioProvider", "IPitchDetectionService"]
