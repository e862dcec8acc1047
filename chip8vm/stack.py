"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8vm.constants import STACK_SIZE, WORD_MASK
from chip8vm.errors import StackOverflow, StackUnderflow
from chip8vm.state import StackState


def push(stack: StackState, address) -> StackState:
    """Push return address onto stack."""
    pointer = int(stack.pointer)
    if pointer >= STACK_SIZE:
        raise StackOverflow(int(address))
    new_data = stack.data.at[pointer].set(int(address) & WORD_MASK)
    return stack.replace(data=new_data, pointer=pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop return address from stack."""
    if int(stack.pointer) == 0:
        raise StackUnderflow()
    new_pointer = int(stack.pointer) - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
