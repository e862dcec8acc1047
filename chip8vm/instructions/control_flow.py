"""CHIP-8 control flow instructions."""

from chip8vm.state import MachineState
from chip8vm.decode import Operation
from chip8vm.constants import ADDRESS_MASK, NUM_KEYS
from chip8vm.instructions import advance_pc, as_word
from chip8vm.stack import push


def execute_jump(state: MachineState, operation: Operation) -> MachineState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=as_word(operation.addr))


def execute_call(state: MachineState, operation: Operation) -> MachineState:
    """2NNN - Call subroutine at NNN.

    The pushed return address is the already-advanced pc, i.e. the
    instruction following the CALL.
    """
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, operation)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: MachineState, operation: Operation) -> MachineState:
        if condition_fn(state, operation):
            return advance_pc(state)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, op: state.register(op.x) == op.byte
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, op: state.register(op.x) != op.byte
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, op: state.register(op.x) == state.register(op.y)
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, op: state.register(op.x) != state.register(op.y)
)


def execute_jump_with_offset(state: MachineState, operation: Operation) -> MachineState:
    """BNNN - Jump to NNN + V0, or XNN + VX with the jump_uses_vx quirk."""
    register = (operation.addr >> 8) & 0xF if state.quirks.jump_uses_vx else 0
    target = operation.addr + state.register(register)
    return state.replace(pc=as_word(target & ADDRESS_MASK))


def key_pressed(state: MachineState, key: int) -> bool:
    """Whether ``key`` is latched down; values past the keypad read as released."""
    if key >= NUM_KEYS:
        return False
    return bool(state.keypad[key])


execute_skip_if_key = make_skip_instruction(
    lambda state, op: key_pressed(state, state.register(op.x))
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, op: not key_pressed(state, state.register(op.x))
)
