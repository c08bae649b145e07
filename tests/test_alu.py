"""Tests for ALU operations (8xxx)."""

import pytest
from chip8vm import execute


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x42))
        state = state.replace(V=state.V.at[2].set(0x99))

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99
        assert state.pc == 0x202

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0xF0))
        state = state.replace(V=state.V.at[2].set(0x0F))

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0xF0))
        state = state.replace(V=state.V.at[2].set(0xF1))

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0xFF))
        state = state.replace(V=state.V.at[2].set(0x0F))

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_same(self, fresh_state):
        """8XY3 - XOR of a register with itself clears it."""
        state = execute(fresh_state, 0x6155)  # V1 = 0x55
        state = execute(state, 0x8113)  # V1 ^= V1
        assert state.V[1] == 0

    def test_logic_ops_leave_vf(self, fresh_state):
        """OR/AND/XOR do not touch VF."""
        state = execute(fresh_state, 0x6F07)  # VF = 7
        state = execute(state, 0x6103)
        state = execute(state, 0x6205)
        for instruction in (0x8121, 0x8122, 0x8123):
            state = execute(state, instruction)
            assert state.V[15] == 7


class TestArithmetic:
    """Test add/subtract with carry and borrow."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without overflow."""
        state = execute(fresh_state, 0x6110)  # V1 = 0x10
        state = execute(state, 0x6220)  # V2 = 0x20
        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - 0xFF + 0x01 wraps to 0 with carry."""
        state = execute(fresh_state, 0x61FF)  # V1 = 0xFF
        state = execute(state, 0x6201)  # V2 = 0x01
        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x00
        assert state.V[15] == 1

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract without borrow sets VF."""
        state = execute(fresh_state, 0x6130)  # V1 = 0x30
        state = execute(state, 0x6210)  # V2 = 0x10
        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_xy_equal(self, fresh_state):
        """8XY5 - Equal operands count as no borrow."""
        state = execute(fresh_state, 0x6142)
        state = execute(state, 0x6242)
        state = execute(state, 0x8125)

        assert state.V[1] == 0
        assert state.V[15] == 1

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - 0x01 - 0x02 wraps to 0xFF and clears VF."""
        state = execute(fresh_state, 0x6101)  # V1 = 0x01
        state = execute(state, 0x6202)  # V2 = 0x02
        state = execute(state, 0x6F01)  # VF = 1 beforehand
        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - VX = VY - VX without borrow."""
        state = execute(fresh_state, 0x6110)  # V1 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30
        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - VX = VY - VX with borrow."""
        state = execute(fresh_state, 0x6130)
        state = execute(state, 0x6210)
        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestShifts:
    """Test shift operations."""

    def test_shift_right_even(self, fresh_state):
        """8XY6 - Shift right of an even value clears VF."""
        state = execute(fresh_state, 0x6184)  # V1 = 0x84
        state = execute(state, 0x8106)

        assert state.V[1] == 0x42
        assert state.V[15] == 0

    def test_shift_right_odd(self, fresh_state):
        """8XY6 - Shift right of an odd value sets VF."""
        state = execute(fresh_state, 0x6185)  # V1 = 0x85
        state = execute(state, 0x8106)

        assert state.V[1] == 0x42
        assert state.V[15] == 1

    def test_shift_ignores_vy(self, fresh_state):
        """8XY6/8XYE - VY does not take part in the shift."""
        state = execute(fresh_state, 0x6104)  # V1 = 0x04
        state = execute(state, 0x62FF)  # V2 = 0xFF
        state = execute(state, 0x8126)

        assert state.V[1] == 0x02
        assert state.V[2] == 0xFF

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - Shift left drops bit 7 into VF."""
        state = execute(fresh_state, 0x6181)  # V1 = 0x81
        state = execute(state, 0x810E)

        assert state.V[1] == 0x02
        assert state.V[15] == 1

    def test_shift_left_no_overflow(self, fresh_state):
        """8XYE - Shift left without bit 7."""
        state = execute(fresh_state, 0x6141)
        state = execute(state, 0x810E)

        assert state.V[1] == 0x82
        assert state.V[15] == 0


class TestFlagRegisterOperands:
    """VF is written before the result when it is also an operand."""

    def test_add_into_vf_keeps_sum(self, fresh_state):
        """8FY4 - The sum lands in VF after the carry was written."""
        state = execute(fresh_state, 0x6FFF)  # VF = 0xFF
        state = execute(state, 0x6101)  # V1 = 0x01
        state = execute(state, 0x8F14)  # VF += V1

        # carry (1) is written first, then VF = 1 + 1
        assert state.V[15] == 2

    def test_add_reads_updated_vf(self, fresh_state):
        """8XF4 - VY = VF is read after the carry was written."""
        state = execute(fresh_state, 0x61FF)  # V1 = 0xFF
        state = execute(state, 0x6F05)  # VF = 0x05
        state = execute(state, 0x81F4)  # V1 += VF

        assert state.V[15] == 1
        assert state.V[1] == 0x00

    def test_shift_right_vf(self, fresh_state):
        """8FY6 - Shifting VF shifts the freshly written flag."""
        state = execute(fresh_state, 0x6F03)  # VF = 0x03
        state = execute(state, 0x8F06)

        assert state.V[15] == 0
