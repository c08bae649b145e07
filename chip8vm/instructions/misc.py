"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, FONT_SPRITE_SIZE, FLAG_REGISTER, NUM_KEYS, NUM_REGISTERS
from chip8vm.instructions.system import advance


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return advance(state.replace(V=state.V.at[instruction.x].set(state.delay_timer)))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return advance(state.replace(delay_timer=state.V[instruction.x]))


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return advance(state.replace(sound_timer=state.V[instruction.x]))


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I, VF = 1 when the sum passes 0xFFF.

    I keeps its full 16 bits. As with the ALU, VF is written before the
    addition, so FF1E adds the new flag value.
    """
    total = jnp.astype(state.I, jnp.int32) + jnp.astype(state.V[instruction.x], jnp.int32)
    new_V = state.V.at[FLAG_REGISTER].set(jnp.astype(total > 0xFFF, jnp.uint8))
    new_i = state.I + jnp.astype(new_V[instruction.x], jnp.uint16)
    return advance(state.replace(I=new_i, V=new_V))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With no key down PC stays put and the instruction runs again next cycle.
    With several keys down the highest index wins.
    """
    def key_pressed_action(state):
        pressed_key = (NUM_KEYS - 1) - jnp.argmax(state.keypad[::-1])
        new_V = state.V.at[instruction.x].set(jnp.astype(pressed_key, jnp.uint8))
        return advance(state.replace(V=new_V))

    def wait_action(state):
        return state

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_SPRITE_SIZE
    return advance(state.replace(I=jnp.astype(font_address, jnp.uint16)))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store decimal digits of VX at I, I+1, I+2.

    The third digit is (VX % 100) // 10, not VX % 10: 123 stores 1, 2, 2.
    """
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        (value % 100) // 10
    ], dtype=jnp.uint8)

    indices = jnp.arange(3) + jnp.astype(state.I, jnp.int32)
    new_memory = state.memory.at[indices].set(digits)
    return advance(state.replace(memory=new_memory))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I, then I += X + 1."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
    current_memory_values = state.memory[base_indices]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    new_memory = state.memory.at[base_indices].set(new_memory_values)
    new_i = state.I + jnp.astype(instruction.x, jnp.uint16) + 1
    return advance(state.replace(memory=new_memory, I=new_i))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I, then I += X + 1."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)
    memory_values = state.memory[base_indices]
    new_V = jnp.where(register_mask, memory_values, state.V)
    new_i = state.I + jnp.astype(instruction.x, jnp.uint16) + 1
    return advance(state.replace(V=new_V, I=new_i))
