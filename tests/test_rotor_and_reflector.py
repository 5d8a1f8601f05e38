"""
Unit tests for the rotor variants.
"""

import pytest
from hypothesis import given, strategies as st

from alphabet_and_permutation import Alphabet, Permutation
from enigma_errors import ConfigError, UnknownSymbol
from rotor_and_reflector import Rotor, RotorKind
from suites import REFLECTORS, ROTORS

UPPER = Alphabet()


def wheel(name):
    wiring, notches = ROTORS[name]
    return Rotor.moving(name, Permutation.from_wiring(wiring, UPPER), notches)


class TestCapabilities:
    """rotates / reflecting / at_notch / advance per kind."""

    def test_moving(self):
        rotor = wheel("I")
        assert rotor.kind is RotorKind.MOVING
        assert rotor.rotates()
        assert not rotor.reflecting()
        assert rotor.notches == "Q"

    def test_fixed(self):
        rotor = Rotor.fixed("BETA", Permutation("(AB)", UPPER))
        assert not rotor.rotates()
        assert not rotor.reflecting()
        rotor.set("Q")
        rotor.advance()
        assert rotor.setting == 16
        assert not rotor.at_notch()

    def test_reflector(self):
        rotor = Rotor.reflector("B", Permutation.from_wiring(REFLECTORS["B"], UPPER))
        assert rotor.reflecting()
        assert not rotor.rotates()
        rotor.advance()
        assert rotor.setting == 0

    def test_notch_detection(self):
        rotor = wheel("VI")
        rotor.set("Z")
        assert rotor.at_notch()
        rotor.set("M")
        assert rotor.at_notch()
        rotor.set("N")
        assert not rotor.at_notch()

    def test_advance_wraps(self):
        rotor = wheel("I")
        rotor.set("Z")
        rotor.advance()
        assert rotor.setting == 0

    def test_only_moving_rotors_take_notches(self):
        with pytest.raises(ConfigError):
            Rotor("BETA", Permutation("", UPPER), RotorKind.FIXED, "A")

    def test_notch_outside_alphabet(self):
        with pytest.raises(UnknownSymbol):
            Rotor.moving("X", Permutation("", UPPER), "a")


class TestSettings:
    """set / set_ring_setting."""

    def test_set_by_symbol_and_index(self):
        rotor = wheel("II")
        rotor.set("C")
        assert rotor.setting == 2
        rotor.set(27)
        assert rotor.setting == 1
        rotor.set(-1)
        assert rotor.setting == 25

    def test_set_unknown_symbol(self):
        with pytest.raises(UnknownSymbol):
            wheel("II").set("!")

    def test_ring_setting(self):
        rotor = wheel("II")
        assert rotor.ring_setting == 0
        rotor.set_ring_setting("B")
        assert rotor.ring_setting == 1
        with pytest.raises(UnknownSymbol):
            rotor.set_ring_setting("b")


class TestConversion:
    """convert_forward / convert_backward."""

    def test_zero_position_is_plain_wiring(self):
        rotor = wheel("I")
        assert rotor.convert_forward(0) == 4        # A -> E
        assert rotor.convert_backward(4) == 0

    def test_offset_by_setting(self):
        rotor = wheel("III")
        rotor.set("B")
        assert rotor.convert_forward(0) == 2        # B -> D, shifted back to C
        assert rotor.convert_backward(2) == 0

    def test_ring_cancels_setting(self):
        plain, shifted = wheel("I"), wheel("I")
        shifted.set("B")
        shifted.set_ring_setting("B")
        for p in range(26):
            assert shifted.convert_forward(p) == plain.convert_forward(p)

    def test_repr(self):
        assert repr(wheel("I")) == "<Rotor I moving pos=0 ring=0>"


@given(
    st.sampled_from(sorted(ROTORS)),
    st.integers(min_value=0, max_value=25),
    st.integers(min_value=0, max_value=25),
    st.integers(min_value=0, max_value=25),
)
def test_backward_undoes_forward(name, setting, ring, p):
    rotor = wheel(name)
    rotor.set(setting)
    rotor.set_ring_setting(UPPER.to_char(ring))
    assert rotor.convert_backward(rotor.convert_forward(p)) == p
    assert rotor.convert_forward(rotor.convert_backward(p)) == p
