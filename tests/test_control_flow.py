"""Tests for control flow instructions."""

import pytest
from chip8vm import execute, set_key


class TestJumps:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """1NNN - Jump to address NNN."""
        state = execute(fresh_state, 0x1234)
        assert state.pc == 0x234

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xB300)
        assert state.pc == 0x310

    def test_jump_with_offset_uses_v0_only(self, fresh_state):
        """BNNN - Only V0 is added, whatever the X nibble says."""
        state = execute(fresh_state, 0x6004)  # V0 = 4
        state = execute(state, 0x6520)  # V5 = 0x20
        state = execute(state, 0xB500)
        assert state.pc == 0x504

    def test_jump_with_offset_no_wrap(self, fresh_state):
        """BNNN - The target is not folded back into 12 bits."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0xBFFF)
        assert state.pc == 0x10FE


class TestSubroutines:
    """Test CALL/RET."""

    def test_call_pushes_current_pc(self, fresh_state):
        """2NNN - The address of the CALL itself is pushed."""
        state = execute(fresh_state, 0x2300)

        assert state.pc == 0x300
        assert state.stack.pointer == 1
        assert state.stack.data[0] == 0x200

    def test_return_steps_past_call(self, fresh_state):
        """00EE - Returns to the instruction after the CALL."""
        state = execute(fresh_state, 0x2300)
        state = execute(state, 0x00EE)

        assert state.pc == 0x202
        assert state.stack.pointer == 0

    def test_nested_calls(self, fresh_state):
        """Nested CALLs unwind in LIFO order."""
        state = execute(fresh_state, 0x2300)  # at 0x200
        state = execute(state, 0x2400)  # at 0x300
        assert state.stack.pointer == 2

        state = execute(state, 0x00EE)
        assert state.pc == 0x302
        state = execute(state, 0x00EE)
        assert state.pc == 0x202


class TestSkips:
    """Test conditional skips."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Skip when VX == NN."""
        state = execute(fresh_state, 0x6142)
        state = execute(state, 0x3142)
        assert state.pc == 0x202 + 4

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - No skip when VX != NN."""
        state = execute(fresh_state, 0x6142)
        state = execute(state, 0x3143)
        assert state.pc == 0x202 + 2

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Skip when VX != NN."""
        state = execute(fresh_state, 0x4101)
        assert state.pc == 0x204

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - No skip when VX == NN."""
        state = execute(fresh_state, 0x4100)
        assert state.pc == 0x202

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Skip when VX == VY."""
        state = execute(fresh_state, 0x6177)
        state = execute(state, 0x6277)
        state = execute(state, 0x5120)
        assert state.pc == 0x204 + 4

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - No skip when VX != VY."""
        state = execute(fresh_state, 0x6177)
        state = execute(state, 0x5120)
        assert state.pc == 0x202 + 2

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Skip when VX != VY."""
        state = execute(fresh_state, 0x6177)
        state = execute(state, 0x9120)
        assert state.pc == 0x202 + 4

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - No skip when VX == VY."""
        state = execute(fresh_state, 0x9120)
        assert state.pc == 0x202

    @pytest.mark.parametrize("x, y, value", [(0x1, 0x2, 0x00), (0x3, 0xA, 0x7F), (0xE, 0x0, 0xFF)])
    def test_copy_then_compare_always_skips(self, fresh_state, x, y, value):
        """LD VX, VY followed by SE VX, VY always skips."""
        state = execute(fresh_state, 0x6000 | (y << 8) | value)
        state = execute(state, 0x6000 | (x << 8) | (value ^ 0x5A))
        state = execute(state, 0x8000 | (x << 8) | (y << 4))
        pc = int(state.pc)
        state = execute(state, 0x5000 | (x << 8) | (y << 4))
        assert state.pc == pc + 4


class TestKeySkips:
    """Test EX9E/EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip when key VX is down."""
        state = execute(fresh_state, 0x6105)  # V1 = 5
        state = set_key(state, 5, True)
        state = execute(state, 0xE19E)
        assert state.pc == 0x202 + 4

    def test_no_skip_if_key_released(self, fresh_state):
        """EX9E - No skip when key VX is up."""
        state = execute(fresh_state, 0x6105)
        state = set_key(state, 4, True)
        state = execute(state, 0xE19E)
        assert state.pc == 0x202 + 2

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip when key VX is up."""
        state = execute(fresh_state, 0x610A)
        state = execute(state, 0xE1A1)
        assert state.pc == 0x202 + 4

    def test_no_skip_if_key_not_pressed_but_down(self, fresh_state):
        """EXA1 - No skip when key VX is down."""
        state = execute(fresh_state, 0x610A)
        state = set_key(state, 0xA, True)
        state = execute(state, 0xE1A1)
        assert state.pc == 0x202 + 2
