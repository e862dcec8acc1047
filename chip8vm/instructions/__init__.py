"""Executor handlers, one module per instruction family."""

import jax.numpy as jnp

from chip8vm.constants import MEMORY_SIZE, WORD_MASK, FLAG_REGISTER
from chip8vm.errors import MemoryFault
from chip8vm.state import MachineState


def as_word(value) -> jnp.ndarray:
    """Wrap a Python int into a 16-bit register value."""
    return jnp.asarray(int(value) & WORD_MASK, dtype=jnp.uint16)


def advance_pc(state: MachineState, amount: int = 2) -> MachineState:
    return state.replace(pc=as_word(int(state.pc) + amount))


def set_register(state: MachineState, index: int, value: int) -> MachineState:
    return state.replace(registers=state.registers.at[index].set(int(value) & 0xFF))


def set_register_and_flag(state: MachineState, index: int, value: int, flag: int) -> MachineState:
    """Write VX then VF, so VF wins when X is F."""
    registers = state.registers.at[index].set(int(value) & 0xFF)
    return state.replace(registers=registers.at[FLAG_REGISTER].set(flag))


def check_range(address: int, length: int) -> None:
    """Raise MemoryFault unless [address, address + length) lies inside memory."""
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryFault(address, length)
