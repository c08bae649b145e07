"""CHIP-8 ALU operations (8xxx).

Each ``alu_*`` function maps (VX, VY) to (result, flag); ``flag`` is None for
operations that leave VF alone. VF is written before the result, and the
result is taken from the register file after that write, so 8FY4 and
friends end with the arithmetic result in VF.
"""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FLAG_REGISTER
from chip8vm.instructions.system import advance


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    carry = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32) > 0xFF
    return vx + vy, carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    return vx - vy, vx >= vy


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    return vy - vx, vy >= vx


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    return vx << 1, vx >> 7


def make_alu_instruction(alu_fn):
    """Wrap an ``alu_*`` function into an instruction handler."""
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        V = state.V
        result, flag = alu_fn(V[instruction.x], V[instruction.y])
        if flag is not None:
            V = V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))
            result, _ = alu_fn(V[instruction.x], V[instruction.y])
        V = V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
        return advance(state.replace(V=V))
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_shift_right = make_alu_instruction(alu_shift_right)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx)
execute_alu_shift_left = make_alu_instruction(alu_shift_left)
