"""Switchable CHIP-8 compatibility behaviours."""

from flax.struct import dataclass


@dataclass(frozen=True)
class Quirks:
    """Interpreter behaviours where historical implementations disagree.

    Attributes:
        increment_index: FX55/FX65 advance I by X + 1 after copying.
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX in place.
        jump_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0.
    """
    increment_index: bool = True
    shift_uses_vy: bool = False
    jump_uses_vx: bool = False


COSMAC_VIP = Quirks(increment_index=True, shift_uses_vy=True, jump_uses_vx=False)
SUPER_CHIP = Quirks(increment_index=False, shift_uses_vy=False, jump_uses_vx=True)
