"""Structured configuration for emulator sessions.

The same dataclasses back the hydra command line (``python -m chip8vm``) and
:func:`build_config`, which merges ``key=value`` overrides without hydra.
"""

from dataclasses import dataclass, field
from typing import Optional

from hydra.core.config_store import ConfigStore
from omegaconf import MISSING, DictConfig, OmegaConf

from chip8vm.rendering import create_color_scheme


@dataclass
class DisplayConfig:
    scale: int = 10
    color_scheme: str = "white"
    title: str = "chip8vm"


@dataclass
class AudioConfig:
    enabled: bool = True
    frequency: int = 440
    duration_ms: int = 100
    volume: float = 0.2


@dataclass
class EmulatorConfig:
    """Session settings.

    Timers tick once per cycle, so ``fps * cycles_per_frame`` is both the
    instruction rate and the timer rate.
    """
    rom: str = MISSING
    seed: int = 0
    fps: int = 60
    cycles_per_frame: int = 1
    headless: bool = False
    headless_cycles: int = 600
    screenshot: Optional[str] = None
    log_level: str = "INFO"
    display: DisplayConfig = field(default_factory=DisplayConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)


cs = ConfigStore.instance()
cs.store(name="emulator", node=EmulatorConfig)


def validate_config(config: EmulatorConfig) -> EmulatorConfig:
    """Check value ranges, raising ValueError on the first bad field."""
    if config.fps <= 0:
        raise ValueError(f"fps must be positive, got {config.fps}")
    if config.cycles_per_frame <= 0:
        raise ValueError(f"cycles_per_frame must be positive, got {config.cycles_per_frame}")
    if config.headless_cycles < 0:
        raise ValueError(f"headless_cycles must be non-negative, got {config.headless_cycles}")
    if config.display.scale < 1:
        raise ValueError(f"display.scale must be at least 1, got {config.display.scale}")
    if not 0.0 <= config.audio.volume <= 1.0:
        raise ValueError(f"audio.volume must be in [0, 1], got {config.audio.volume}")
    if config.audio.frequency <= 0 or config.audio.duration_ms <= 0:
        raise ValueError("audio.frequency and audio.duration_ms must be positive")
    create_color_scheme(config.display.color_scheme)
    return config


def to_config(cfg: DictConfig) -> EmulatorConfig:
    """Convert a hydra/OmegaConf node into a validated EmulatorConfig."""
    return validate_config(OmegaConf.to_object(cfg))


def build_config(overrides: list[str] = None) -> EmulatorConfig:
    """Build a validated EmulatorConfig from ``key=value`` overrides."""
    base = OmegaConf.structured(EmulatorConfig)
    cfg = OmegaConf.merge(base, OmegaConf.from_dotlist(overrides or []))
    return to_config(cfg)
