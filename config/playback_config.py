"""
Playback configuration for trajectory synthesis.
Simple presets plus JSON persistence.
"""
from dataclasses import dataclass, asdict
import json
import logging

logger = logging.getLogger(__name__)


@dataclass
class PlaybackConfig:
    """Tuning for speed calibration and real-time playback."""
    name: str = "Default"

    # Speed calibration
    target_duration: float = 30.0   # seconds for the whole toolpath
    min_speed: float = 100.0        # units/min
    noise_floor: float = 0.01       # hops shorter than this are ignored
    speed_step: float = 100.0       # calibrated speed rounds up to this
    max_speed_factor: float = 1.5

    # Heuristic multipliers
    z_travel_ratio: float = 0.3
    z_travel_factor: float = 0.8
    short_hop_length: float = 1.0
    short_hop_ratio: float = 0.5
    short_hop_factor: float = 1.2

    # Playback loop
    frame_interval: float = 1.0 / 60.0  # seconds per frame

    POSITIVE_FIELDS = (
        "target_duration", "min_speed", "speed_step", "max_speed_factor",
        "short_hop_factor", "z_travel_factor", "frame_interval",
    )

    def __post_init__(self):
        for name in self.POSITIVE_FIELDS:
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive, got {value!r}")
        if not self.noise_floor >= 0:
            raise ValueError(f"noise_floor must not be negative, got {self.noise_floor!r}")


class ConfigManager:
    """Manages playback configurations with simple presets."""

    @staticmethod
    def default() -> PlaybackConfig:
        return PlaybackConfig()

    @staticmethod
    def quick_preview() -> PlaybackConfig:
        """Shorter playback for skimming a file."""
        return PlaybackConfig(
            name="Quick Preview",
            target_duration=10.0,
            min_speed=300.0,
            frame_interval=1.0 / 30.0,
        )

    @staticmethod
    def detailed() -> PlaybackConfig:
        """Slow playback for inspecting individual moves."""
        return PlaybackConfig(
            name="Detailed",
            target_duration=120.0,
            min_speed=50.0,
            max_speed_factor=2.0,
        )

    @staticmethod
    def get_config(name: str) -> PlaybackConfig:
        """Get configuration by preset name."""
        configs = {
            "default": ConfigManager.default,
            "quick_preview": ConfigManager.quick_preview,
            "quick": ConfigManager.quick_preview,
            "detailed": ConfigManager.detailed,
        }
        return configs.get(name.lower(), ConfigManager.default)()

    @staticmethod
    def save_config(config: PlaybackConfig, filepath: str):
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(asdict(config), f, indent=2)

    @staticmethod
    def load_config(filepath: str) -> PlaybackConfig:
        """Load configuration from JSON file, falling back to the default."""
        try:
            with open(filepath, 'r') as f:
                data = json.load(f)
            return PlaybackConfig(**data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Could not load playback config %s: %s", filepath, e)
            return ConfigManager.default()
