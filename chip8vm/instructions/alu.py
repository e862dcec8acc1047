"""CHIP-8 ALU operations (8xxx).

Each operation maps the pair (VX, VY) to (new VX, new VF). The flag is
written after the result, so when X is F the flag value is what remains.
"""

from chip8vm.state import MachineState
from chip8vm.decode import Op, Operation
from chip8vm.instructions import set_register, set_register_and_flag


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY, VF reset."""
    return vx | vy, 0


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY, VF reset."""
    return vx & vy, 0


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY, VF reset."""
    return vx ^ vy, 0


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return vx >> 1, vx & 0x01


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS = {
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD_REG: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}

SHIFTS = (Op.SHR, Op.SHL)


def execute_set_register(state: MachineState, operation: Operation) -> MachineState:
    """8XY0 - Set: VX = VY."""
    return set_register(state, operation.x, state.register(operation.y))


def execute_alu_operation(state: MachineState, operation: Operation) -> MachineState:
    """8XY1-8XYE - ALU operations writing a result and the flag register."""
    vx = state.register(operation.x)
    vy = state.register(operation.y)

    if operation.op in SHIFTS and state.quirks.shift_uses_vy:
        vx = vy

    result, flag = ALU_OPERATIONS[operation.op](vx, vy)
    return set_register_and_flag(state, operation.x, result, flag)
