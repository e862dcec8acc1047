"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, Quirks, COSMAC_VIP


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state with default quirks for each test."""
    return create_state()


@pytest.fixture
def legacy_state():
    """Provide a fresh state with COSMAC VIP quirks."""
    return create_state(quirks=COSMAC_VIP)


@pytest.fixture
def static_index_state():
    """Provide a fresh state whose FX55/FX65 leave I unchanged."""
    return create_state(quirks=Quirks(increment_index=False))


def set_registers(state, **values):
    """Helper to set registers by name, e.g. set_registers(state, v1=0x10, vf=1)."""
    registers = state.registers
    for name, value in values.items():
        registers = registers.at[int(name[1:], 16)].set(value)
    return state.replace(registers=registers)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def fixed_random(value):
    """Random source that always yields ``value`` and leaves the key alone."""
    return lambda key: (key, value)
