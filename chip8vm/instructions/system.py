"""CHIP-8 system instructions (0x0xxx) and shared PC helpers."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import INSTRUCTION_SIZE
from chip8vm.stack import pop


def advance(state: EmulatorState, count: int = 1) -> EmulatorState:
    """Move PC past ``count`` instructions."""
    return state.replace(pc=state.pc + INSTRUCTION_SIZE * count)


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation. Faults are reported by the cycle driver, not here."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    state = state.replace(
        display=jnp.zeros_like(state.display),
        should_draw=jnp.ones((), dtype=jnp.bool_)
    )
    return advance(state)


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine.

    CALL pushes its own address, so the popped address is stepped over.
    """
    stack, address = pop(state.stack)
    return advance(state.replace(stack=stack, pc=address))
