"""CHIP-8 machine state structures."""

import dataclasses

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, PyTreeNode

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS
)


@dataclass(frozen=True)
class StackState:
    """Return address stack for CALL/RET."""
    data: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Complete CHIP-8 machine state.

    The display is indexed ``display[x, y]`` and holds 0/1 bytes. ``should_draw``
    and ``should_sound`` are edge signals: they stay set until consumed with
    :func:`take_should_draw` / :func:`take_should_sound`.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.uint8))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    should_draw: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.ones((), dtype=jnp.bool_))
    should_sound: jnp.ndarray = dataclasses.field(default_factory=lambda: jnp.ones((), dtype=jnp.bool_))


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0)) -> EmulatorState:
    """Create initial machine state with font data loaded."""
    state = EmulatorState(rng)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Set the pressed state of keypad key ``index`` (0x0-0xF)."""
    if not 0 <= index < NUM_KEYS:
        raise ValueError(f"Key index must be in [0, {NUM_KEYS}), got {index}")
    return state.replace(keypad=state.keypad.at[index].set(bool(pressed)))


def take_should_draw(state: EmulatorState) -> tuple[EmulatorState, bool]:
    """Consume the draw signal.

    Returns the state with the signal cleared and whether a redraw was pending.
    """
    return state.replace(should_draw=jnp.zeros((), dtype=jnp.bool_)), bool(state.should_draw)


def take_should_sound(state: EmulatorState) -> tuple[EmulatorState, bool]:
    """Consume the sound signal.

    Returns the state with the signal cleared and whether a tone was requested.
    """
    return state.replace(should_sound=jnp.zeros((), dtype=jnp.bool_)), bool(state.should_sound)


def display_snapshot(state: EmulatorState) -> np.ndarray:
    """Read-only (64, 32) uint8 copy of the framebuffer, indexed [x, y]."""
    snapshot = np.array(state.display, dtype=np.uint8)
    snapshot.setflags(write=False)
    return snapshot
