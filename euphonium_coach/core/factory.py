"""Factory for creating Euphonium Coach components."""

from typing import Optional

from ..errors import ConfigurationError
from ..logger import get_logger
from ..audio.pitch_estimator import PitchEstimator, PitchEstimatorConfig
from ..fingering import FingeringTable
from ..instrument import TransposingInstrument
from ..note_matcher import NoteMatcher
from ..practice import PracticeSession, practice_pool
from .config import ConfigManager

logger = get_logger(__name__)


class ComponentFactory:
    """Factory for creating Euphonium Coach components from configuration."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

    def create_pitch_estimator(self, **kwargs) -> PitchEstimator:
        """Create a pitch estimator.

        Args:
            **kwargs: PitchEstimatorConfig fields overriding the stored configuration

        Returns:
            Pitch estimator instance

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        config = self.config_manager.get_config("pitch_estimator")
        config.update({k: v for k, v in kwargs.items() if v is not None})

        try:
            estimator_config = PitchEstimatorConfig(**config)
        except TypeError as e:
            raise ConfigurationError(f"Invalid pitch_estimator configuration: {e}") from e

        instance = PitchEstimator(estimator_config)
        logger.info(f"Created pitch estimator: {instance.algorithm}")
        return instance

    def create_instrument(self, name: Optional[str] = None) -> TransposingInstrument:
        """Create the transposing instrument.

        Args:
            name: Preset name overriding the configured instrument
        """
        if name is not None:
            return TransposingInstrument.preset(name)
        config = self.config_manager.get_config("instrument")
        return TransposingInstrument(config["name"], int(config["transposition_semitones"]))

    def create_fingering_table(self) -> FingeringTable:
        config = self.config_manager.get_config("fingering")
        table_path = config.get("table_path")
        if table_path:
            return FingeringTable.from_json(table_path)
        return FingeringTable()

    def create_note_matcher(
        self, instrument: Optional[TransposingInstrument] = None
    ) -> NoteMatcher:
        instrument_config = self.config_manager.get_config("instrument")
        practice_config = self.config_manager.get_config("practice")
        return NoteMatcher(
            instrument=instrument or self.create_instrument(),
            reference_a4=float(instrument_config["reference_a4"]),
            in_tune_cents=int(practice_config["in_tune_cents"]),
        )

    def create_practice_session(self, **kwargs) -> PracticeSession:
        """Create a practice session wired to the configured table and matcher.

        Args:
            **kwargs: PracticeSession arguments overriding the configured ones
        """
        config = self.config_manager.get_config("practice")
        kwargs.setdefault("fingering_table", self.create_fingering_table())
        kwargs.setdefault("matcher", self.create_note_matcher())
        kwargs.setdefault("pool", practice_pool(config["pool_low"], config["pool_high"]))
        kwargs.setdefault("scale_octave", config["scale_octave"])
        kwargs.setdefault("scale_max_pitch_index", config["scale_max_pitch_index"])

        instance = PracticeSession(**kwargs)
        logger.info(f"Created practice session: {instance.mode}")
        return instance
