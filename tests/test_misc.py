"""Tests for miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
import pytest
from chip8vm import execute, with_keys, MemoryFault
from conftest import set_registers


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        state = execute(fresh_state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # DT = V0
        assert state.dt == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # ST = V1
        assert state.st == 32

        state = execute(state, 0xF207)  # V2 = DT
        assert state.registers[2] == 48


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value,digits", [
        (156, (1, 5, 6)),
        (0, (0, 0, 0)),
        (255, (2, 5, 5)),
        (7, (0, 0, 7)),
    ])
    def test_bcd_conversion(self, fresh_state, value, digits):
        state = set_registers(fresh_state, v0=value)
        state = execute(state, 0xA300)

        state = execute(state, 0xF033)

        assert tuple(state.memory[0x300:0x303].tolist()) == digits

    def test_bcd_out_of_bounds(self, fresh_state):
        state = execute(fresh_state, 0xAFFE)
        with pytest.raises(MemoryFault):
            execute(state, 0xF033)

    def test_bcd_fault_leaves_memory(self, fresh_state):
        state = set_registers(fresh_state, v0=123)
        state = execute(state, 0xAFFE)
        before = state.memory

        with pytest.raises(MemoryFault):
            execute(state, 0xF033)

        assert jnp.array_equal(state.memory, before)


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        state = fresh_state
        for digit in range(16):
            state = execute(state, 0x6000 | digit)
            state = execute(state, 0xF029)
            assert state.i == digit * 5, f"Font address wrong for digit {digit:X}"

    def test_font_uses_full_register_value(self, fresh_state):
        """FX29 - Values past 0xF are not masked; I lands past the glyph table."""
        state = set_registers(fresh_state, v0=0x1A)
        state = execute(state, 0xF029)
        assert state.i == 0x1A * 5

    def test_font_largest_value_in_bounds(self, fresh_state):
        state = set_registers(fresh_state, v0=0xFF)
        state = execute(state, 0xF029)
        assert state.i == 0xFF * 5


class TestIndexArithmetic:

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I."""
        state = set_registers(fresh_state, v0=0x10, vf=0)
        state = execute(state, 0xA300)
        state = execute(state, 0xF01E)

        assert state.i == 0x310
        assert state.registers[15] == 0

    def test_add_to_index_past_12_bits(self, fresh_state):
        """FX1E - I is a 16-bit register and VF is untouched."""
        state = set_registers(fresh_state, v0=0xFF)
        state = execute(state, 0xAF80)
        state = execute(state, 0xF01E)

        assert state.i == 0x107F
        assert state.registers[15] == 0


class TestRegisterDumpLoad:
    """Test FX55 / FX65 with and without the index increment."""

    def test_store_increments_index(self, fresh_state):
        state = set_registers(fresh_state, v0=1, v1=2, v2=3, v3=9)
        state = execute(state, 0xA400)

        state = execute(state, 0xF255)  # Store V0-V2

        assert state.memory[0x400:0x403].tolist() == [1, 2, 3]
        assert state.memory[0x403] == 0  # V3 not stored
        assert state.i == 0x403

    def test_load_increments_index(self, fresh_state):
        state = fresh_state.replace(
            memory=fresh_state.memory.at[0x400:0x402].set(jnp.array([7, 8], dtype=jnp.uint8))
        )
        state = set_registers(state, v2=0x55)
        state = execute(state, 0xA400)

        state = execute(state, 0xF165)  # Load V0-V1

        assert state.registers[0] == 7
        assert state.registers[1] == 8
        assert state.registers[2] == 0x55
        assert state.i == 0x402

    def test_store_load_static_index(self, static_index_state):
        """With increment_index off, I is left where it was."""
        state = set_registers(static_index_state, v0=1, v1=2, v2=3)
        state = execute(state, 0xA300)

        state = execute(state, 0xF255)
        assert state.i == 0x300

        state = set_registers(state, v0=0, v1=0, v2=0)
        state = execute(state, 0xF265)
        assert state.registers[:3].tolist() == [1, 2, 3]
        assert state.i == 0x300

    def test_store_all_registers_at_top_of_memory(self, fresh_state):
        state = set_registers(fresh_state, vf=0xEE)
        state = execute(state, 0xAFF0)

        state = execute(state, 0xFF55)

        assert state.memory[0xFFF] == 0xEE
        assert state.i == 0x1000

    def test_store_past_end_faults(self, fresh_state):
        state = execute(fresh_state, 0xAFF1)
        with pytest.raises(MemoryFault) as info:
            execute(state, 0xFF55)
        assert info.value.address == 0xFF1
        assert info.value.length == 16

    def test_load_past_end_faults_without_changes(self, fresh_state):
        state = execute(fresh_state, 0xAFFF)
        state = set_registers(state, v0=0x12)

        with pytest.raises(MemoryFault):
            execute(state, 0xF165)

        assert state.registers[0] == 0x12
        assert state.i == 0xFFF


class TestWaitForKey:
    """Test FX0A busy-poll suspension."""

    def test_wait_without_key_rewinds(self, fresh_state):
        initial_pc = int(fresh_state.pc)

        state = execute(fresh_state, 0xF00A)

        assert state.pc == initial_pc - 2
        assert state.awaiting_key

    def test_wait_with_key_stores_lowest(self, fresh_state):
        state = with_keys(fresh_state, [0xC, 7, 9])
        initial_pc = int(state.pc)

        state = execute(state, 0xF30A)

        assert state.registers[3] == 7
        assert state.pc == initial_pc
        assert not state.awaiting_key

    def test_wait_resumes_after_key(self, fresh_state):
        state = execute(fresh_state, 0xF00A)
        assert state.awaiting_key

        state = with_keys(state, [0])
        state = execute(state, 0xF00A)

        assert not state.awaiting_key
        assert state.registers[0] == 0
