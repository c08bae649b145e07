"""Fatal machine faults raised by the cycle driver."""

from enum import IntEnum


class Fault(IntEnum):
    """Fault codes produced by a compiled cycle."""
    NONE = 0
    INVALID_OPCODE = 1
    STACK_OVERFLOW = 2
    STACK_UNDERFLOW = 3
    MEMORY_ACCESS = 4
    KEY_INDEX = 5


class Chip8Error(Exception):
    """Base error for fatal machine faults.

    ``address`` is the PC of the faulting instruction and ``opcode`` the word
    fetched there (None when the fetch itself was out of range).
    """

    def __init__(self, message: str, address: int, opcode: int | None = None):
        super().__init__(message)
        self.address = address
        self.opcode = opcode


class InvalidOpcodeError(Chip8Error):
    """Raised when the fetched word matches no instruction."""


class StackOverflowError(Chip8Error):
    """Raised by CALL when all stack slots are in use."""


class StackUnderflowError(Chip8Error):
    """Raised by RET on an empty stack."""


class MemoryAccessError(Chip8Error):
    """Raised when an instruction reaches outside memory or the keypad."""


def fault_to_error(fault: Fault, address: int, opcode: int | None) -> Chip8Error:
    """Build the exception describing ``fault`` at ``address``."""
    where = f"at 0x{address:03X}"
    word = f"0x{opcode:04X}" if opcode is not None else "<unfetchable>"

    if fault == Fault.INVALID_OPCODE:
        return InvalidOpcodeError(f"invalid opcode {word} {where}", address, opcode)
    if fault == Fault.STACK_OVERFLOW:
        return StackOverflowError(f"stack overflow executing {word} {where}", address, opcode)
    if fault == Fault.STACK_UNDERFLOW:
        return StackUnderflowError(f"stack underflow executing {word} {where}", address, opcode)
    if fault == Fault.MEMORY_ACCESS:
        return MemoryAccessError(f"memory access out of range executing {word} {where}", address, opcode)
    if fault == Fault.KEY_INDEX:
        return MemoryAccessError(f"key index out of range executing {word} {where}", address, opcode)
    raise ValueError(f"Not a fault: {fault!r}")
