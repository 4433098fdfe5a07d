"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipjax.constants import STACK_SIZE


def push(stack, address: jnp.ndarray):
    """Push address onto stack. Callers check ``is_full`` first.

    The address is stored as is: a call from the last word of memory returns
    to 0x1000, where the next fetch faults.
    """
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16))
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack):
    """Pop address from stack. Callers check ``is_empty`` first."""
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address


def is_full(stack) -> jnp.ndarray:
    return stack.pointer >= STACK_SIZE


def is_empty(stack) -> jnp.ndarray:
    return stack.pointer == 0
