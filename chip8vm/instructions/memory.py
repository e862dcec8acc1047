"""CHIP-8 register load and immediate operations."""

from typing import Callable

import jax
import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import Operation
from chip8vm.instructions import as_word, set_register

RandomSource = Callable[[jax.Array], tuple[jax.Array, int]]


def jax_random_byte(key: jax.Array) -> tuple[jax.Array, int]:
    """Draw one byte from a JAX PRNG key, returning the advanced key."""
    key, subkey = jax.random.split(key)
    value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    return key, int(value)


def execute_set(state: MachineState, operation: Operation) -> MachineState:
    """6XKK - Set VX = KK."""
    return set_register(state, operation.x, operation.byte)


def execute_add(state: MachineState, operation: Operation) -> MachineState:
    """7XKK - Add KK to VX, wrapping, VF untouched."""
    return set_register(state, operation.x, state.register(operation.x) + operation.byte)


def execute_set_index(state: MachineState, operation: Operation) -> MachineState:
    """ANNN - Set I = NNN."""
    return state.replace(i=as_word(operation.addr))


def execute_random(state: MachineState, operation: Operation,
                   random_source: RandomSource = jax_random_byte) -> MachineState:
    """CXKK - Set VX = random byte & KK."""
    key, value = random_source(state.rng)
    state = set_register(state, operation.x, int(value) & operation.byte)
    return state.replace(rng=key)
