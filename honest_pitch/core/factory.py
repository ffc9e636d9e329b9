"""Factory for creating Honest Pitch components."""

from typing import Optional, Dict, Type, Callable

from ..logger import get_logger
from ..detection.pitch_estimator import PitchEstimator
from ..history import PitchHistory
from ..transpose import Transposer
from ..session import PitchSession
from ..audio.file_input import WavFileInput
from .config import ConfigManager
from .interfaces import IPitchEstimator, IAudioInput

logger = get_logger(__name__)


def _sound_device_input(**kwargs) -> IAudioInput:
    # Imported here so that PortAudio is only needed for live capture
    from ..audio.audio_input import SoundDeviceInput

    return SoundDeviceInput(**kwargs)


def _wav_file_input(sample_rate=None, channels=None, **kwargs) -> IAudioInput:
    # The file decides its own sample rate and channel layout
    return WavFileInput(**kwargs)


class ComponentFactory:
    """Factory for creating Honest Pitch components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

        # Register default component implementations
        self.pitch_estimator_classes: Dict[str, Type[IPitchEstimator]] = {
            "default": PitchEstimator,
        }

        self.audio_input_builders: Dict[str, Callable[..., IAudioInput]] = {
            "default": _sound_device_input,
            "wav": _wav_file_input,
        }

    def create_pitch_estimator(
        self, implementation: str = "default", **kwargs
    ) -> IPitchEstimator:
        """Create a pitch estimator.

        Args:
            implementation: Name of the implementation to use
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Pitch estimator instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.pitch_estimator_classes:
            raise ValueError(f"Unknown pitch estimator implementation: {implementation}")

        # Get default configuration
        config = self.config_manager.get_config("pitch_estimator")

        # Override with provided parameters
        config.update(kwargs)

        # Create instance
        cls = self.pitch_estimator_classes[implementation]
        instance = cls(**config)

        logger.info(f"Created pitch estimator: {implementation}")
        return instance

    def create_audio_input(
        self, implementation: str = "default", **kwargs
    ) -> IAudioInput:
        """Create an audio input.

        Args:
            implementation: Name of the implementation to use ("default" for
                the microphone, "wav" for a sound file)
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Audio input instance

        Raises:
            ValueError: If the implementation is not registered
        """
        if implementation not in self.audio_input_builders:
            raise ValueError(f"Unknown audio input implementation: {implementation}")

        # Get default configuration
        config = self.config_manager.get_config("audio_input")

        # Override with provided parameters
        config.update(kwargs)

        # Create instance
        instance = self.audio_input_builders[implementation](**config)

        logger.info(f"Created audio input: {implementation}")
        return instance

    def create_history(self, **kwargs) -> PitchHistory:
        """Create a pitch history using the configured window."""
        config = self.config_manager.get_config("history")
        config.update(kwargs)
        return PitchHistory(**config)

    def create_session(
        self,
        audio_input: Optional[IAudioInput] = None,
        transpose: int = 0,
        **kwargs
    ) -> PitchSession:
        """Create a pitch session.

        Args:
            audio_input: Audio input, or None to create the default microphone input
            transpose: Initial transpose offset in semitones
            **kwargs: Additional parameters to pass to PitchSession

        Returns:
            Pitch session instance
        """
        # Create components if not provided
        if audio_input is None:
            audio_input = self.create_audio_input()

        if "estimator" not in kwargs:
            kwargs["estimator"] = self.create_pitch_estimator()

        if "history" not in kwargs:
            kwargs["history"] = self.create_history()

        if "transposer" not in kwargs:
            kwargs["transposer"] = Transposer(transpose)

        instance = PitchSession(audio_input=audio_input, **kwargs)

        logger.info("Created pitch session")
        return instance
