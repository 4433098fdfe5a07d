"""Tests for FXKK instructions."""

import pytest
import jax.numpy as jnp
from chipjax import execute
from chipjax.constants import FONT_DATA


class TestTimers:
    """Test timer instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """FX15, FX07, FX18 - Timer operations."""
        state = execute(fresh_state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # delay timer = V0
        assert state.delay_timer == 48

        state = execute(state, 0xF118)  # sound timer = V1 (0)
        assert state.sound_timer == 0

        state = execute(state, 0x6120)
        state = execute(state, 0xF118)
        assert state.sound_timer == 0x20

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    def test_misc_bcd_conversion(self, fresh_state):
        """FX33 - BCD of 234 is 2, 3, 4."""
        state = execute(fresh_state, 0x60EA)  # V0 = 234
        state = execute(state, 0xA300)
        state = execute(state, 0xF033)

        assert state.memory[0x300] == 2
        assert state.memory[0x301] == 3
        assert state.memory[0x302] == 4

    @pytest.mark.parametrize("value, digits", [
        (0, (0, 0, 0)),
        (7, (0, 0, 7)),
        (42, (0, 4, 2)),
        (100, (1, 0, 0)),
        (255, (2, 5, 5)),
    ])
    def test_bcd_edge_cases(self, fresh_state, value, digits):
        """FX33 - Leading zeros are stored."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(value), I=jnp.uint16(0x400))
        state = execute(state, 0xF533)

        assert tuple(int(b) for b in state.memory[0x400:0x403]) == digits

    def test_bcd_at_end_of_memory(self, fresh_state):
        """FX33 - Writing the last three bytes of memory is fine."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(123), I=jnp.uint16(0xFFD))
        state = execute(state, 0xF033)

        assert state.fault == 0
        assert tuple(int(b) for b in state.memory[0xFFD:]) == (1, 2, 3)


class TestFont:
    """Test font character location."""

    def test_misc_font_character(self, fresh_state):
        """FX29 - Set I to location of character."""
        state = execute(fresh_state, 0x600A)  # V0 = 0xA
        state = execute(state, 0xF029)
        assert state.I == 0xA * 5

    def test_font_all_characters(self, fresh_state):
        """FX29 - Each glyph is five bytes, from address 0."""
        state = fresh_state
        for digit in range(16):
            state = state.replace(V=state.V.at[0].set(digit))
            state = execute(state, 0xF029)
            assert state.I == digit * 5
            address = int(state.I)
            glyph = [int(b) for b in state.memory[address:address + 5]]
            assert glyph == FONT_DATA[digit * 5:digit * 5 + 5]


class TestRegisterMemory:
    """Test FX55 / FX65."""

    def test_store_load_round_trip(self, fresh_state):
        """FX55 then FX65 restores V0..VX and leaves I alone."""
        values = [0x11, 0x22, 0x33, 0x44]
        state = fresh_state.replace(
            V=fresh_state.V.at[:4].set(jnp.array(values, dtype=jnp.uint8)).at[4].set(0x99),
            I=jnp.uint16(0x400)
        )

        state = execute(state, 0xF355)  # store V0..V3
        assert [int(b) for b in state.memory[0x400:0x405]] == values + [0]
        assert state.I == 0x400

        state = state.replace(V=jnp.zeros(16, dtype=jnp.uint8))
        state = execute(state, 0xF365)  # load V0..V3
        assert [int(v) for v in state.V[:5]] == values + [0]
        assert state.I == 0x400

    def test_store_single_register(self, fresh_state):
        """FX55 with X = 0 stores only V0."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(7).at[1].set(8), I=jnp.uint16(0x500))
        state = execute(state, 0xF055)

        assert state.memory[0x500] == 7
        assert state.memory[0x501] == 0

    def test_load_all_registers(self, fresh_state):
        """FF65 loads all sixteen registers, VF included."""
        data = jnp.arange(1, 17, dtype=jnp.uint8)
        state = fresh_state.replace(memory=fresh_state.memory.at[0x600:0x610].set(data), I=jnp.uint16(0x600))
        state = execute(state, 0xFF65)

        assert [int(v) for v in state.V] == list(range(1, 17))

    def test_store_all_registers_at_end_of_memory(self, fresh_state):
        """FF55 at 0xFF0 writes up to the last byte."""
        state = fresh_state.replace(V=jnp.full(16, 0xAB, dtype=jnp.uint8), I=jnp.uint16(0xFF0))
        state = execute(state, 0xFF55)

        assert state.fault == 0
        assert state.memory[0xFFF] == 0xAB


class TestAddToIndex:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        """FX1E - I += VX."""
        state = execute(fresh_state, 0xA100)
        state = execute(state, 0x6010)
        state = execute(state, 0xF01E)
        assert state.I == 0x110

    def test_add_to_index_leaves_vf_by_default(self, fresh_state):
        """FX1E - Past 0xFFF, I is unmasked and VF unchanged."""
        state = fresh_state.replace(I=jnp.uint16(0xFFF), V=fresh_state.V.at[0].set(2).at[15].set(5))
        state = execute(state, 0xF01E)

        assert state.I == 0x1001
        assert state.V[15] == 5

    def test_add_to_index_saturates(self, fresh_state):
        """FX1E - I stops at 0xFFFF instead of wrapping to low memory."""
        state = fresh_state.replace(I=jnp.uint16(0xFFF0), V=fresh_state.V.at[0].set(0xFF))
        state = execute(state, 0xF01E)
        assert state.I == 0xFFFF

        state = execute(state, 0xF01E)
        assert state.I == 0xFFFF

    def test_saturated_index_still_faults(self, fresh_state):
        """FX55 through a saturated I faults rather than writing the font."""
        state = fresh_state.replace(
            pc=jnp.uint16(0x202), I=jnp.uint16(0xFFFF), V=fresh_state.V.at[0].set(0xFF)
        )
        state = execute(state, 0xF01E)
        state = execute(state, 0xF055)

        assert state.fault != 0
        assert (state.memory == fresh_state.memory).all()

    def test_add_to_index_overflow_flag(self, overflow_flag_state):
        """FX1E - With the overflow flag enabled, VF reports I > 0xFFF."""
        state = overflow_flag_state.replace(
            I=jnp.uint16(0xFFF), V=overflow_flag_state.V.at[0].set(2)
        )
        state = execute(state, 0xF01E)
        assert state.I == 0x1001
        assert state.V[15] == 1

        state = state.replace(I=jnp.uint16(0x100))
        state = execute(state, 0xF01E)
        assert state.I == 0x102
        assert state.V[15] == 0


class TestWaitForKey:
    """Test FX0A as a single instruction."""

    def test_key_already_held(self, fresh_state):
        """FX0A - A held key completes immediately."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0xB].set(True))
        state = execute(state, 0xF30A)

        assert state.V[3] == 0xB
        assert not state.awaiting_key

    def test_lowest_key_wins(self, fresh_state):
        """FX0A - With several keys held the lowest index is taken."""
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0x9].set(True).at[0x4].set(True))
        state = execute(state, 0xF30A)
        assert state.V[3] == 0x4

    def test_no_key_enters_waiting(self, fresh_state):
        """FX0A - Without a key the machine starts waiting."""
        state = execute(fresh_state, 0xF30A)

        assert state.awaiting_key
        assert state.key_register == 3
        assert state.V[3] == 0


def test_undefined_misc_instruction(fresh_state):
    """FXKK with an unassigned KK is a no-op."""
    state = fresh_state.replace(V=fresh_state.V.at[0].set(9))
    after = execute(state, 0xF0FF)

    assert (after.V == state.V).all()
    assert after.I == state.I
    assert after.pc == state.pc
    assert (after.memory == state.memory).all()
