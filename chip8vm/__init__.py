"""CHIP-8 virtual machine package."""

from chip8vm.state import (
    EmulatorState, create_state, set_key, take_should_draw, take_should_sound, display_snapshot
)
from chip8vm.emulator import execute, fetch, step, run, load_program, load_rom
from chip8vm.decode import DecodedInstruction, Op, decode, classify
from chip8vm.errors import (
    Chip8Error, InvalidOpcodeError, StackOverflowError, StackUnderflowError, MemoryAccessError
)
from chip8vm.constants import *
from chip8vm.rendering import chip8_display_to_rgb, chip8_display_to_rgba, create_color_scheme, display_image

__all__ = [
    "EmulatorState",
    "create_state",
    "set_key",
    "take_should_draw",
    "take_should_sound",
    "display_snapshot",
    "fetch",
    "execute",
    "step",
    "run",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "classify",
    "Chip8Error",
    "InvalidOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryAccessError",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "chip8_display_to_rgba",
    "create_color_scheme",
    "display_image",
]
