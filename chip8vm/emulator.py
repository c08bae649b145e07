"""Main CHIP-8 execution engine: fetch, dispatch, timers and the cycle driver."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Op, decode, classify
from chip8vm.constants import PROGRAM_START, MAX_PROGRAM_SIZE, MEMORY_SIZE, STACK_SIZE, NUM_KEYS
from chip8vm.errors import Fault, Chip8Error, fault_to_error
from chip8vm.instructions.system import no_op, execute_clear_screen, execute_return
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8vm.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


_HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
    Op.INVALID: no_op,
}

# Indexed by Op value for jax.lax.switch
HANDLERS = [_HANDLERS[op] for op in Op]

# Fault checks in priority order; the first matching row wins.
_FAULT_ORDER = jnp.array([int(fault) for fault in (
    Fault.MEMORY_ACCESS,    # fetch
    Fault.INVALID_OPCODE,
    Fault.STACK_OVERFLOW,
    Fault.STACK_UNDERFLOW,
    Fault.MEMORY_ACCESS,    # DRW
    Fault.MEMORY_ACCESS,    # LD B, VX
    Fault.MEMORY_ACCESS,    # LD [I], VX / LD VX, [I]
    Fault.KEY_INDEX,
)], dtype=jnp.int32)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> jnp.uint16:
    """Read the big-endian instruction word at PC. PC is not advanced."""
    return _pack_u16(state.memory[state.pc], state.memory[state.pc + 1])


def dispatch(state: EmulatorState, instruction: DecodedInstruction, op: jnp.ndarray) -> EmulatorState:
    """Run the handler for ``op``."""
    return jax.lax.switch(op, HANDLERS, state, instruction)


@jax.jit
def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute a single CHIP-8 instruction word.

    Timers are not ticked and faults are not checked; use :func:`step` to run
    the machine.
    """
    decoded_instruction = decode(instruction)
    return dispatch(state, decoded_instruction, classify(decoded_instruction))


def detect_fault(state: EmulatorState, instruction: DecodedInstruction, op: jnp.ndarray) -> jnp.ndarray:
    """Fault code (int32 scalar) for running ``instruction`` on ``state``."""
    pc = jnp.astype(state.pc, jnp.int32)
    index = jnp.astype(state.I, jnp.int32)
    pointer = state.stack.pointer
    x = jnp.astype(instruction.x, jnp.int32)
    n = jnp.astype(instruction.n, jnp.int32)

    conditions = jnp.stack([
        pc + 1 >= MEMORY_SIZE,
        op == int(Op.INVALID),
        (op == int(Op.CALL)) & (pointer >= STACK_SIZE),
        (op == int(Op.RET)) & (pointer <= 0),
        (op == int(Op.DRW)) & (index + n > MEMORY_SIZE),
        (op == int(Op.LD_B_VX)) & (index + 3 > MEMORY_SIZE),
        ((op == int(Op.LD_MEM_VX)) | (op == int(Op.LD_VX_MEM))) & (index + x + 1 > MEMORY_SIZE),
        ((op == int(Op.SKP)) | (op == int(Op.SKNP))) & (state.V[x] >= NUM_KEYS),
    ])
    return jnp.where(jnp.any(conditions), _FAULT_ORDER[jnp.argmax(conditions)], int(Fault.NONE))


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement nonzero timers; a sound timer leaving 1 raises the sound signal."""
    delay, sound = state.delay_timer, state.sound_timer
    return state.replace(
        delay_timer=jnp.where(delay > 0, delay - 1, delay),
        sound_timer=jnp.where(sound > 0, sound - 1, sound),
        should_sound=state.should_sound | (sound == 1)
    )


def cycle(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """One fetch-decode-execute-timer cycle.

    Returns the next state and a fault code. When the code is not
    ``Fault.NONE`` the returned state must be discarded.
    """
    instruction = decode(fetch(state))
    op = classify(instruction)
    fault = detect_fault(state, instruction, op)
    return tick_timers(dispatch(state, instruction, op)), fault


_compiled_cycle = jax.jit(cycle)


@partial(jax.jit, static_argnums=1)
def _run_cycles(state: EmulatorState, cycles: int) -> tuple[EmulatorState, jnp.ndarray]:
    def body(carry, _):
        state, fault = carry
        next_state, next_fault = cycle(state)
        halted = (fault != 0) | (next_fault != 0)
        state = jax.tree.map(lambda old, new: jnp.where(halted, old, new), state, next_state)
        fault = jnp.where(fault != 0, fault, next_fault)
        return (state, fault), None

    (state, fault), _ = jax.lax.scan(body, (state, jnp.zeros((), dtype=jnp.int32)), length=cycles)
    return state, fault


def _fault_error(state: EmulatorState, fault: Fault) -> Chip8Error:
    address = int(state.pc)
    opcode = int(fetch(state)) if address + 1 < MEMORY_SIZE else None
    return fault_to_error(fault, address, opcode)


def step(state: EmulatorState) -> EmulatorState:
    """Advance the machine by one cycle.

    Raises:
        Chip8Error: on a fatal fault. The passed state is left as it was.
    """
    next_state, fault = _compiled_cycle(state)
    fault = Fault(int(fault))
    if fault != Fault.NONE:
        raise _fault_error(state, fault)
    return next_state


def run(state: EmulatorState, cycles: int) -> EmulatorState:
    """Advance the machine by ``cycles`` cycles in one compiled loop.

    Raises:
        Chip8Error: on the first fatal fault; the error describes the
            instruction that faulted.
    """
    if cycles < 0:
        raise ValueError(f"cycles must be non-negative, got {cycles}")
    if cycles == 0:
        return state
    final_state, fault = _run_cycles(state, cycles)
    fault = Fault(int(fault))
    if fault != Fault.NONE:
        raise _fault_error(final_state, fault)
    return final_state


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy program bytes into memory starting at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise ValueError(f"Program is {len(data)} bytes, at most {MAX_PROGRAM_SIZE} fit in memory")
    program = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(program)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load a raw ROM file into memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
