"""CHIP-8 return stack operations.

Bounds are not checked here; the cycle driver rejects CALL on a full stack
and RET on an empty one before the result is committed.
"""

import jax.numpy as jnp
from chip8vm.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push return address onto stack."""
    new_data = stack.data.at[stack.pointer].set(jnp.asarray(address).astype(jnp.uint16))
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop return address from stack.

    The popped address is the CALL itself, so RET steps 2 past it.
    """
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
