"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, FLAG_REGISTER
from chip8vm.instructions.system import advance

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Screen-sized 0/1 mask of the sprite bits DXYN would XOR in.

    The sprite wraps around both screen edges.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < jnp.astype(instruction.n, jnp.int32))

    sprite_bytes = state.memory[jnp.astype(state.I, jnp.int32) + row_offset]
    shift = jnp.clip(SPRITE_WIDTH - 1 - col_offset, 0, SPRITE_WIDTH - 1)
    bits = (sprite_bytes >> shift) & 1
    return jnp.where(in_sprite, bits, 0).astype(jnp.uint8)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw N-row sprite from memory[I] at (VX, VY), VF = collision."""
    sprite = sprite_mask(state, instruction)
    collision = jnp.any((state.display & sprite) == 1)

    return advance(state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        should_draw=jnp.ones((), dtype=jnp.bool_)
    ))
