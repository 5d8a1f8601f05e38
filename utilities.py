# utilities.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from alphabet_and_permutation import Alphabet, Permutation
from enigma_errors import BadRotorArrangement, BadSetting, ConfigError
from machine import Machine

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_num_re = re.compile(r"^([A-Za-z_]*?)(\d+)$")
# I … XXXIX; C, D and M are left out so reflector names stay plain words
_roman_re = re.compile(r"^X{0,3}(IX|IV|V?I{0,3})$")
_ROMAN = {"I": 1, "V": 5, "X": 10}


def _roman_value(name: str) -> int:
    total = 0
    for ch, nxt in zip(name, name[1:] + " "):
        v = _ROMAN[ch]
        total += -v if nxt in _ROMAN and _ROMAN[nxt] > v else v
    return total


def _nat_key(name: str):
    """Natural-sort rotor names: R1, R2, …, R10 and I, II, …, IX, X in order.

    Anything else sorts alphabetically after the numbered names.
    """
    if name and _roman_re.match(name):
        return (0, "", _roman_value(name))
    m = _num_re.match(name)
    if m:
        prefix, num = m.groups()
        return (0, prefix, int(num))
    return (1, name, 0)


def sorted_names(names: Iterable[str]) -> List[str]:
    return sorted(names, key=_nat_key)


# ────────────────────────────────────────────────────────────────────────
#  1. Setting directives
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class SettingDirective:
    """One ``* B BETA III IV I AXLE [RING] (AB) (CD)`` line, split up."""

    rotors: List[str]
    positions: str
    ring: str | None = None
    plugs: str = ""

    def to_line(self) -> str:
        parts = ["*", *self.rotors, self.positions]
        if self.ring:
            parts.append(self.ring)
        if self.plugs:
            parts.append(self.plugs)
        return " ".join(parts)


def is_setting_line(line: str) -> bool:
    return line.lstrip().startswith("*")


def parse_setting(line: str, num_rotors: int) -> SettingDirective:
    """Split a setting line for a machine with NUM_ROTORS slots."""
    text = line.strip()
    if not text.startswith("*"):
        raise ConfigError(f"Setting line must start with '*': {line!r}")
    tokens = text[1:].split()

    if len(tokens) < num_rotors + 1:
        raise ConfigError(
            f"Setting line needs {num_rotors} rotor names and a position: {line!r}"
        )
    names = [t.upper() for t in tokens[:num_rotors]]
    positions = tokens[num_rotors]
    if positions.startswith("("):
        raise ConfigError(f"Missing rotor positions in {line!r}")

    rest = tokens[num_rotors + 1:]
    ring = None
    if rest and not rest[0].startswith("("):
        ring = rest.pop(0)
    if any(not t.startswith("(") and not t.endswith(")") for t in rest):
        raise ConfigError(f"Unexpected text after plugboard in {line!r}")

    return SettingDirective(names, positions, ring, " ".join(rest))


def plugboard_from_text(text: str, alphabet: Alphabet) -> Permutation:
    """Plugboard cycles; every cable joins exactly two symbols."""
    perm = Permutation(text, alphabet)
    for cycle in perm.cycles:
        if len(cycle) != 2:
            pair = "".join(alphabet.to_char(i) for i in cycle)
            raise ConfigError(f"Plugboard cycle ({pair}) must swap exactly two symbols")
    return perm


def check_arrangement(machine: Machine, names: Sequence[str]) -> None:
    """Moving rotors must fill exactly the rightmost ``num_pawls()`` slots."""
    catalog = machine.available_rotors
    if len(names) != machine.num_rotors():
        return
    first_moving = machine.num_rotors() - machine.num_pawls()
    for slot, name in enumerate(names[1:], start=1):
        rotor = catalog.get(name)
        if rotor is None:
            continue
        if rotor.rotates() != (slot >= first_moving):
            want = "moving" if slot >= first_moving else "non-moving"
            raise BadRotorArrangement(f"Slot {slot} needs a {want} rotor, got {name}")


def _check_symbols(text: str, need: int, alphabet: Alphabet, what: str) -> None:
    if len(text) != need:
        raise BadSetting(f"{what} {text!r} must be {need} symbols long")
    for ch in text:
        if ch not in alphabet:
            raise BadSetting(f"{what} symbol {ch!r} not in alphabet")


def apply_setting(machine: Machine, directive: SettingDirective) -> None:
    """Configure MACHINE from DIRECTIVE; nothing changes when it fails."""
    alpha = machine.alphabet
    need = len(directive.rotors) - 1

    # validate everything first
    plugboard = plugboard_from_text(directive.plugs, alpha)
    check_arrangement(machine, directive.rotors)
    _check_symbols(directive.positions, need, alpha, "Setting")
    ring = directive.ring if directive.ring is not None else alpha.to_char(0) * need
    _check_symbols(ring, need, alpha, "Ring setting")

    machine.insert_rotors(directive.rotors)
    machine.set_rotors(directive.positions)
    machine.ringstellung(ring)
    machine.set_plugboard(plugboard)


# ────────────────────────────────────────────────────────────────────────
#  2. Text preprocessing
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str, alphabet: Alphabet) -> str:
    """Drop whitespace and upper-case symbols the alphabet only has in upper case.

    Anything else outside the alphabet is kept so the machine can reject it.
    """
    out = []
    for ch in msg:
        if ch.isspace():
            continue
        if ch not in alphabet and ch.upper() in alphabet:
            ch = ch.upper()
        out.append(ch)
    return "".join(out)


def format_groups(msg: str, block: int = 5) -> str:
    """Split MSG into groups of BLOCK symbols (the last may be shorter)."""
    if block < 1:
        raise ConfigError(f"Group size must be at least 1, got {block}")
    return " ".join(msg[i : i + block] for i in range(0, len(msg), block))


__all__ = [
    "SettingDirective",
    "apply_setting",
    "check_arrangement",
    "format_groups",
    "is_setting_line",
    "parse_setting",
    "plugboard_from_text",
    "preprocess_message",
    "sorted_names",
]
