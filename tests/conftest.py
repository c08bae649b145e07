"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, load_program, take_should_draw, take_should_sound


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def quiet_state():
    """Fresh state with the start-up draw and sound signals already consumed."""
    state, _ = take_should_draw(create_state())
    state, _ = take_should_sound(state)
    return state


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*words):
    """Encode instruction words as a big-endian program image."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def load_words(state, *words):
    """Load instruction words at 0x200."""
    return load_program(state, assemble(*words))
