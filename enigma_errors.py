# enigma_errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every failure raised by the machine and its glue."""


# ── alphabet & permutation ────────────────────────────────────────
class InvalidAlphabet(EnigmaError):
    pass


class OutOfRange(EnigmaError):
    pass


class UnknownSymbol(EnigmaError):
    pass


class InvalidCycle(EnigmaError):
    pass


# ── machine setup ─────────────────────────────────────────────────
class MachineConfigError(EnigmaError):
    pass


class UnknownRotor(EnigmaError):
    pass


class DuplicateRotor(EnigmaError):
    pass


class TooManyRotors(EnigmaError):
    pass


class NotAReflector(EnigmaError):
    pass


class BadSetting(EnigmaError):
    pass


# ── configuration / session text ──────────────────────────────────
class ConfigError(EnigmaError):
    pass


class BadRotorArrangement(EnigmaError):
    """Moving rotors must fill exactly the rightmost *pawls* slots."""


__all__ = [
    "EnigmaError",
    "InvalidAlphabet",
    "OutOfRange",
    "UnknownSymbol",
    "InvalidCycle",
    "MachineConfigError",
    "UnknownRotor",
    "DuplicateRotor",
    "TooManyRotors",
    "NotAReflector",
    "BadSetting",
    "ConfigError",
    "BadRotorArrangement",
]
