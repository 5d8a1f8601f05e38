"""Shared fixtures for the rotor machine tests."""

import pytest

from alphabet_and_permutation import Alphabet
from debug import COMPONENTS, Debug
from machine_config import MachineConfig, RotorDescriptor
from rotor_and_reflector import RotorKind
from suites import ROTORS, REFLECTORS, historical_config


@pytest.fixture(autouse=True)
def quiet_debug():
    """Leave the shared trace switches off between tests."""
    yield
    dbg = Debug()
    dbg.toggle_global(False)
    dbg.disable(*COMPONENTS)


@pytest.fixture
def upper():
    return Alphabet()


@pytest.fixture
def enigma_i():
    """Three-rotor machine with reflector B and rotors I II III at AAA."""
    machine = historical_config(num_rotors=4, pawls=3).build()
    machine.insert_rotors(["B", "I", "II", "III"])
    machine.set_rotors("AAA")
    return machine


@pytest.fixture
def two_rotor_config():
    """Reflector B plus the moving rotors II and III in a three-slot machine."""
    return MachineConfig(
        "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
        3,
        2,
        [
            RotorDescriptor("B", RotorKind.REFLECTOR, wiring=REFLECTORS["B"]),
            RotorDescriptor("II", RotorKind.MOVING, notches="E", wiring=ROTORS["II"][0]),
            RotorDescriptor("III", RotorKind.MOVING, notches="V", wiring=ROTORS["III"][0]),
        ],
    )
