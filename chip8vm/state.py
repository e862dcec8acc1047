"""CHIP-8 machine state structures."""

from typing import Iterable

import chex
import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)
from chip8vm.errors import MemoryFault
from chip8vm.quirks import Quirks


@dataclass(frozen=True)
class StackState:
    """Return address stack for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class MachineState(PyTreeNode):
    """Complete CHIP-8 interpreter state.

    Instances are immutable; every instruction produces a new state through
    ``replace``. The framebuffer is indexed ``[x, y]``.
    """
    rng: jax.Array
    registers: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    i: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    stack: StackState = field(default_factory=StackState)
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    dt: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    st: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    framebuffer: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    )
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    awaiting_key: bool = False
    quirks: Quirks = field(pytree_node=False, default=Quirks())

    @property
    def sp(self) -> int:
        return int(self.stack.pointer)

    def register(self, index: int) -> int:
        """Value of register V[index] as a Python int."""
        return int(self.registers[index])


def create_state(rng: jax.Array = None, quirks: Quirks = Quirks()) -> MachineState:
    """Create a blank machine: zeroed memory and registers, pc at 0x200."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    return MachineState(rng=rng, quirks=quirks)


def write_memory(state: MachineState, address: int, data) -> MachineState:
    """Copy bytes into memory at ``address``, bounds-checked."""
    values = jnp.asarray(data, dtype=jnp.uint8).reshape(-1)
    length = int(values.shape[0])
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryFault(address, length)
    return state.replace(memory=state.memory.at[address:address + length].set(values))


def load_font(state: MachineState, font=FONT_DATA) -> MachineState:
    """Install the hex digit glyphs in low memory."""
    return write_memory(state, FONT_START, font)


def with_keys(state: MachineState, pressed: Iterable[int]) -> MachineState:
    """Replace the key latch so that exactly the keys in ``pressed`` are down."""
    indices = list(pressed)
    if any(not 0 <= key < NUM_KEYS for key in indices):
        raise ValueError(f"Key indices must be in range 0-{NUM_KEYS - 1}: {indices}")
    keypad = jnp.zeros(NUM_KEYS, dtype=jnp.bool_)
    if indices:
        keypad = keypad.at[jnp.array(indices)].set(True)
    return state.replace(keypad=keypad)


@chex.dataclass(frozen=True)
class MachineSnapshot:
    """Host-side copy of the machine state for observers and renderers."""
    registers: np.ndarray
    i: int
    pc: int
    sp: int
    stack: np.ndarray
    dt: int
    st: int
    framebuffer: np.ndarray
    keypad: np.ndarray
    awaiting_key: bool


def snapshot(state: MachineState) -> MachineSnapshot:
    """Copy the observable state out of device arrays."""
    return MachineSnapshot(
        registers=np.array(state.registers),
        i=int(state.i),
        pc=int(state.pc),
        sp=state.sp,
        stack=np.array(state.stack.data[:state.sp]),
        dt=int(state.dt),
        st=int(state.st),
        framebuffer=np.array(state.framebuffer),
        keypad=np.array(state.keypad),
        awaiting_key=bool(state.awaiting_key),
    )
