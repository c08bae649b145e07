"""CHIP-8 instruction decoding."""

from enum import IntEnum

import jax.numpy as jnp
import numpy as np
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate, kk)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    word = jnp.asarray(instruction).astype(jnp.uint16)
    return DecodedInstruction(
        raw=word,
        opcode=(word & 0xF000) >> 12,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF
    )


class Op(IntEnum):
    """Every operation the interpreter knows, in dispatch order."""
    CLS = 0
    RET = 1
    JP = 2
    CALL = 3
    SE_BYTE = 4
    SNE_BYTE = 5
    SE_REG = 6
    LD_BYTE = 7
    ADD_BYTE = 8
    LD_REG = 9
    OR = 10
    AND = 11
    XOR = 12
    ADD_REG = 13
    SUB = 14
    SHR = 15
    SUBN = 16
    SHL = 17
    SNE_REG = 18
    LD_I = 19
    JP_V0 = 20
    RND = 21
    DRW = 22
    SKP = 23
    SKNP = 24
    LD_VX_DT = 25
    LD_VX_K = 26
    LD_DT_VX = 27
    LD_ST_VX = 28
    ADD_I_VX = 29
    LD_F_VX = 30
    LD_B_VX = 31
    LD_MEM_VX = 32
    LD_VX_MEM = 33
    INVALID = 34


# Families decoded from the top nibble alone (5xy0/9xy0 ignore the low nibble).
_SINGLE_OP_FAMILIES = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x5: Op.SE_REG,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0x9: Op.SNE_REG,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_SYSTEM_OPS = {0x0: Op.CLS, 0xE: Op.RET}

_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


def _build_opcode_table() -> np.ndarray:
    """Map (first nibble, low byte) to an Op for every possible word."""
    table = np.full((16, 256), int(Op.INVALID), dtype=np.int32)
    low_nibble = np.arange(256) & 0xF

    for family, op in _SINGLE_OP_FAMILIES.items():
        table[family, :] = int(op)
    for nibble, op in _SYSTEM_OPS.items():
        table[0x0, low_nibble == nibble] = int(op)
    for nibble, op in _ALU_OPS.items():
        table[0x8, low_nibble == nibble] = int(op)
    for byte, op in _KEY_OPS.items():
        table[0xE, byte] = int(op)
    for byte, op in _MISC_OPS.items():
        table[0xF, byte] = int(op)
    return table


OPCODE_TABLE = jnp.asarray(_build_opcode_table())


def classify(instruction: DecodedInstruction) -> jnp.ndarray:
    """Return the Op index (int32 scalar) selected by a decoded instruction."""
    return OPCODE_TABLE[instruction.opcode, instruction.nn]
