"""Tests for register load, index and random instructions."""

import pytest
import jax
from chipjax import execute, create_state
from conftest import execute_jit


class TestBasicMemory:
    """Test basic register operations."""

    def test_set_basic(self, fresh_state):
        """6XKK - Set VX = KK."""
        state = execute(fresh_state, 0x6A42)  # VA = 0x42
        assert state.V[0xA] == 0x42

    def test_add_basic(self, fresh_state):
        """7XKK - Add KK to VX."""
        state = execute(fresh_state, 0x6A10)  # VA = 0x10
        state = execute(state, 0x7A05)  # VA += 0x05
        assert state.V[0xA] == 0x15

    def test_add_wraps_without_flag(self, fresh_state):
        """7XKK - Wraps at 256 and never touches VF."""
        state = execute(fresh_state, 0x60FF)  # V0 = 0xFF
        state = execute(state, 0x7002)  # V0 += 2
        assert state.V[0] == 0x01
        assert state.V[15] == 0

    def test_add_to_vf(self, fresh_state):
        """7FKK - VF can be used as a plain register."""
        state = execute(fresh_state, 0x6F10)
        state = execute(state, 0x7F01)
        assert state.V[15] == 0x11

    @pytest.mark.parametrize("kk, kk2", [(0, 0), (0x10, 0x20), (0xFF, 0x01), (0x80, 0x80), (0xC8, 0x64)])
    def test_set_then_add(self, fresh_state, kk, kk2):
        """6XKK then 7XKK' leaves VX = (KK + KK') mod 256."""
        state = execute_jit(fresh_state, 0x6300 | kk)
        state = execute_jit(state, 0x7300 | kk2)
        assert state.V[3] == (kk + kk2) % 256


class TestIndexRegister:
    """Test index register operations."""

    def test_set_index_basic(self, fresh_state):
        """ANNN - Set I = NNN."""
        state = execute(fresh_state, 0xA123)
        assert state.I == 0x123

    def test_set_index_zero(self, fresh_state):
        """ANNN - Set I = 0."""
        state = execute(fresh_state, 0xA000)
        assert state.I == 0x000

    def test_set_index_maximum(self, fresh_state):
        """ANNN - Set I to maximum value."""
        state = execute(fresh_state, 0xAFFF)
        assert state.I == 0xFFF

    def test_set_index_multiple_operations(self, fresh_state):
        """ANNN - Later writes replace earlier ones."""
        state = execute(fresh_state, 0xA111)
        state = execute(state, 0xA222)
        assert state.I == 0x222


class TestRandom:
    """Test random number generation."""

    def test_random_zero_mask(self, fresh_state):
        """CXKK - Random AND with 0x00 should always be 0."""
        state = execute(fresh_state, 0xC000)
        assert state.V[0] == 0

    def test_random_full_mask(self, fresh_state):
        """CXKK - Random AND with 0xFF stays a byte."""
        state = execute(fresh_state, 0xC1FF)
        assert 0 <= state.V[1] <= 255

    @pytest.mark.parametrize("mask", [0x01, 0x03, 0x0F, 0x80, 0xAA])
    def test_random_mask_patterns(self, fresh_state, mask):
        """CXKK - Bits outside the mask are never set."""
        state = fresh_state
        for _ in range(8):
            state = execute_jit(state, 0xC200 | mask)
            assert int(state.V[2]) & ~mask == 0

    def test_random_advances_rng(self, fresh_state):
        """CXKK - Each draw consumes the generator state."""
        state = execute(fresh_state, 0xC0FF)
        assert not (state.rng == fresh_state.rng).all()

    def test_random_is_reproducible(self):
        """Same seed, same sequence."""
        first = execute(create_state(jax.random.PRNGKey(7)), 0xC0FF)
        second = execute(create_state(jax.random.PRNGKey(7)), 0xC0FF)
        assert first.V[0] == second.V[0]

    def test_random_preserves_state(self, fresh_state):
        """CXKK - Other registers are untouched."""
        state = execute(fresh_state, 0x6142)
        state = execute(state, 0x6299)
        state = execute(state, 0xA300)

        after = execute(state, 0xC0FF)

        assert after.V[1] == 0x42
        assert after.V[2] == 0x99
        assert after.I == 0x300
