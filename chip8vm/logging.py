"""Console logging utilities for emulator sessions.

Provides a levelled console logger, a session logger that knows how to
report machine state and faults, and a tqdm progress bar for headless runs.
"""

import time
import sys
from typing import Any, Dict

from tqdm import tqdm

from chip8vm.state import EmulatorState


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


class ConsoleLogger:
    """Levelled stdout logger with optional colors and an elapsed-time prefix."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        log_level = log_level.upper()
        if log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")

        self.name = name
        self.threshold = LEVELS.index(log_level)
        self.use_colors = use_colors and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def log(self, level: str, message: str):
        """Print ``message`` when ``level`` is at or above the logger's level."""
        level = level.upper()
        if LEVELS.index(level) < self.threshold:
            return

        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{COLORS[level]}{tag}{RESET}"
        prefix = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{prefix}{tag}[{self.name}] {message}", flush=True)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class SessionLogger(ConsoleLogger):
    """Logger for one emulation session: configuration, machine state, faults."""

    def __init__(self, name: str = "Session", **kwargs):
        super().__init__(name, **kwargs)
        self.cycles = 0

    def log_session_start(self, config: Dict[str, Any]):
        """Log session configuration."""
        self.info("=" * 60)
        self.info("Starting session with configuration:")
        for key, value in config.items():
            if isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    self.info(f"  {key}.{sub_key}: {sub_value}")
            else:
                self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_registers(self, state: EmulatorState, level: str = "DEBUG"):
        """Log PC, I, timers and the register file."""
        self.log(
            level,
            f"PC=0x{int(state.pc):03X} I=0x{int(state.I):03X} "
            f"SP={int(state.stack.pointer)} "
            f"DT={int(state.delay_timer)} ST={int(state.sound_timer)}"
        )
        for row in range(0, 16, 8):
            registers = " ".join(f"V{i:X}={int(state.V[i]):02X}" for i in range(row, row + 8))
            self.log(level, f"  {registers}")

    def log_fault(self, error: Exception, state: EmulatorState = None):
        """Log a fatal machine fault, with registers when the state is known."""
        self.critical(f"{type(error).__name__}: {error}")
        if state is not None:
            self.log_registers(state, level="CRITICAL")

    def log_session_end(self, cycles: int):
        """Log cycle count and throughput."""
        elapsed = time.time() - self.start_time
        rate = cycles / elapsed if elapsed > 0 else 0.0
        self.info(f"Session ended after {cycles} cycles in {elapsed:.1f}s ({rate:.0f} cycles/s)")


def build_progress_bar(n: int, desc: str = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting emulated cycles."""
    if desc is None:
        desc = f"Emulating ({n:,} cycles)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="cycle", **kwargs)
