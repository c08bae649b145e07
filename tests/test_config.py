"""Tests for session configuration."""

import pytest
from omegaconf import OmegaConf
from omegaconf.errors import MissingMandatoryValue
from chip8vm.config import EmulatorConfig, build_config, to_config, validate_config


def test_defaults():
    config = build_config(["rom=game.ch8"])

    assert isinstance(config, EmulatorConfig)
    assert config.rom == "game.ch8"
    assert config.fps == 60
    assert config.cycles_per_frame == 1
    assert config.display.scale == 10
    assert config.display.color_scheme == "white"
    assert config.audio.enabled
    assert config.screenshot is None


def test_overrides():
    config = build_config([
        "rom=pong.ch8",
        "headless=true",
        "headless_cycles=50",
        "display.scale=4",
        "display.color_scheme=amber",
        "audio.enabled=false",
    ])

    assert config.headless
    assert config.headless_cycles == 50
    assert config.display.scale == 4
    assert config.display.color_scheme == "amber"
    assert not config.audio.enabled


def test_rom_required():
    with pytest.raises(MissingMandatoryValue):
        build_config([])


@pytest.mark.parametrize("override", [
    "fps=0",
    "cycles_per_frame=-1",
    "headless_cycles=-5",
    "display.scale=0",
    "display.color_scheme=plaid",
    "audio.volume=1.5",
    "audio.frequency=0",
])
def test_invalid_values(override):
    with pytest.raises(ValueError):
        build_config(["rom=game.ch8", override])


def test_to_config_from_dictconfig():
    cfg = OmegaConf.structured(EmulatorConfig(rom="x.ch8", seed=3))
    config = to_config(cfg)
    assert config.seed == 3


def test_validate_returns_config():
    config = EmulatorConfig(rom="x.ch8")
    assert validate_config(config) is config
