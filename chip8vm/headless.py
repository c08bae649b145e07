"""Run a ROM without a window, for smoke tests and screenshots."""

from chip8vm.config import EmulatorConfig
from chip8vm.emulator import run
from chip8vm.errors import Chip8Error
from chip8vm.logging import SessionLogger, build_progress_bar
from chip8vm.rendering import display_image
from chip8vm.state import EmulatorState

CHUNK_SIZE = 1000


def run_headless(state: EmulatorState, config: EmulatorConfig, logger: SessionLogger,
                 chunk_size: int = CHUNK_SIZE) -> EmulatorState:
    """Run ``config.headless_cycles`` cycles in compiled chunks.

    Logs the final registers and writes ``config.screenshot`` when set.
    Faults are logged with the last good state and re-raised.
    """
    remaining = config.headless_cycles
    done = 0
    with build_progress_bar(remaining, disable=remaining == 0) as progress:
        while remaining > 0:
            count = min(chunk_size, remaining)
            try:
                state = run(state, count)
            except Chip8Error as e:
                logger.log_fault(e, state)
                raise
            progress.update(count)
            remaining -= count
            done += count

    logger.log_registers(state, level="INFO")
    logger.log_session_end(done)

    if config.screenshot:
        display_image(state, config.display.scale, config.display.color_scheme).save(config.screenshot)
        logger.info(f"Screenshot saved: {config.screenshot}")
    return state
