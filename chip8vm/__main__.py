"""Command line entry point.

    python -m chip8vm rom=roms/PONG2
    python -m chip8vm rom=roms/PONG2 cycles_per_frame=10 display.color_scheme=amber
    python -m chip8vm rom=roms/PONG2 headless=true headless_cycles=5000 screenshot=pong.png
"""

import sys

import hydra
import jax
from omegaconf import DictConfig, OmegaConf

from chip8vm.config import to_config
from chip8vm.emulator import load_rom
from chip8vm.errors import Chip8Error
from chip8vm.logging import SessionLogger
from chip8vm.state import create_state


@hydra.main(version_base=None, config_name="emulator")
def main(cfg: DictConfig) -> None:
    config = to_config(cfg)
    logger = SessionLogger(log_level=config.log_level)
    logger.log_session_start(OmegaConf.to_container(cfg))

    state = create_state(jax.random.PRNGKey(config.seed))
    state = load_rom(state, config.rom)
    logger.info(f"Loaded: {config.rom}")

    try:
        if config.headless:
            from chip8vm.headless import run_headless
            run_headless(state, config, logger)
        else:
            from chip8vm.frontend import Frontend
            Frontend(config, logger).run(state)
    except Chip8Error:
        sys.exit(1)


if __name__ == "__main__":
    main()
