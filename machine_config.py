# machine_config.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from alphabet_and_permutation import Alphabet, Permutation
from enigma_errors import ConfigError
from machine import Machine
from rotor_and_reflector import Rotor, RotorKind

# ────────────────────────────────────────────────────────────────────────
#  0. Descriptors
# ────────────────────────────────────────────────────────────────────────

_KIND_NAMES = {
    "moving": RotorKind.MOVING,
    "fixed": RotorKind.FIXED,
    "reflector": RotorKind.REFLECTOR,
}
_FORBIDDEN_IN_ALPHABET = set("()*")


@dataclass(slots=True)
class RotorDescriptor:
    """One catalog entry: cycle text *or* a wiring string, never both."""

    name: str
    kind: RotorKind
    cycles: str = ""
    notches: str = ""
    wiring: str | None = None

    def build(self, alphabet: Alphabet) -> Rotor:
        if self.wiring is not None:
            perm = Permutation.from_wiring(self.wiring, alphabet)
        else:
            perm = Permutation(self.cycles, alphabet)
        return Rotor(self.name, perm, self.kind, self.notches)


@dataclass(slots=True)
class MachineConfig:
    alphabet: str
    num_rotors: int
    pawls: int
    rotors: List[RotorDescriptor] = field(default_factory=list)

    def build(self) -> Machine:
        alpha = Alphabet(self.alphabet)
        return Machine(
            alpha,
            self.num_rotors,
            self.pawls,
            [d.build(alpha) for d in self.rotors],
        )

    def names(self, kind: RotorKind) -> List[str]:
        return [d.name for d in self.rotors if d.kind is kind]


def _check_alphabet(chars: str) -> str:
    if not chars or any(ch.isspace() or ch in _FORBIDDEN_IN_ALPHABET for ch in chars):
        raise ConfigError(f"Illegal alphabet {chars!r}")
    return chars


def _check_counts(num_rotors: int, pawls: int) -> None:
    # the reflector never rotates, so at least one slot is pawl-free
    if pawls <= 0 or pawls >= num_rotors:
        raise ConfigError(f"Bad number of rotors ({num_rotors}) and pawls ({pawls})")


# ────────────────────────────────────────────────────────────────────────
#  1. Text configuration
# ────────────────────────────────────────────────────────────────────────


def parse_config(text: str) -> MachineConfig:
    """Parse the whitespace-separated configuration format::

        ABCDEFGHIJKLMNOPQRSTUVWXYZ
        5 3
        I MQ   (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
        BETA N (ALBEVFCYODJWUGNMQTZSKPR) (HIX)
        B R    (AY) (BR) (CU) ...

    The type token is ``M`` followed by the notch symbols, ``N`` for a fixed
    rotor or ``R`` for a reflector. Rotor names are upper-cased.
    """
    tokens = text.split()
    if len(tokens) < 3:
        raise ConfigError("configuration file truncated")

    alphabet = _check_alphabet(tokens[0])
    try:
        num_rotors, pawls = int(tokens[1]), int(tokens[2])
    except ValueError:
        raise ConfigError("Integers expected for rotor and pawl counts") from None
    _check_counts(num_rotors, pawls)

    rotors: List[RotorDescriptor] = []
    pos = 3
    while pos < len(tokens):
        if pos + 1 >= len(tokens):
            raise ConfigError(f"bad rotor description near {tokens[pos]!r}")
        name, kind_tok = tokens[pos].upper(), tokens[pos + 1]
        pos += 2

        cycles: List[str] = []
        depth = 0
        while pos < len(tokens) and (depth > 0 or tokens[pos].startswith("(")):
            tok = tokens[pos]
            depth += tok.count("(") - tok.count(")")
            cycles.append(tok)
            pos += 1

        rotors.append(_descriptor(name, kind_tok, " ".join(cycles)))

    return MachineConfig(alphabet, num_rotors, pawls, rotors)


def _descriptor(name: str, kind_tok: str, cycles: str) -> RotorDescriptor:
    head, notches = kind_tok[0].upper(), kind_tok[1:]
    if head == "M":
        return RotorDescriptor(name, RotorKind.MOVING, cycles, notches)
    if notches:
        raise ConfigError(f"Rotor {name}: only moving rotors take notches")
    if head == "N":
        return RotorDescriptor(name, RotorKind.FIXED, cycles)
    if head == "R":
        return RotorDescriptor(name, RotorKind.REFLECTOR, cycles)
    raise ConfigError(f"Rotor {name}: incorrect rotor type {kind_tok!r}")


# ────────────────────────────────────────────────────────────────────────
#  2. JSON configuration
# ────────────────────────────────────────────────────────────────────────


def _text_field(value: Any, what: str, optional: bool = False) -> str | None:
    if value is None and optional:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{what} must be a string, got {value!r}")
    return value


def config_from_dict(data: Dict[str, Any]) -> MachineConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a JSON object, got {type(data).__name__}")
    required = {"alphabet", "slots", "pawls", "rotors"}
    missing = required - data.keys()
    if missing:
        raise ConfigError(f"Missing keys in config: {', '.join(sorted(missing))}")

    try:
        num_rotors, pawls = int(data["slots"]), int(data["pawls"])
    except (TypeError, ValueError):
        raise ConfigError("Integers expected for slots and pawls") from None
    _check_counts(num_rotors, pawls)
    alphabet = _check_alphabet(_text_field(data["alphabet"], "alphabet"))
    if not isinstance(data["rotors"], list):
        raise ConfigError("'rotors' must be a list of rotor entries")

    rotors: List[RotorDescriptor] = []
    for entry in data["rotors"]:
        if not isinstance(entry, dict):
            raise ConfigError(f"Bad rotor entry {entry!r}: expected an object")
        try:
            name = str(entry["name"]).upper()
            kind = _KIND_NAMES[str(entry["kind"]).lower()]
        except KeyError as exc:
            raise ConfigError(f"Bad rotor entry {entry!r}: {exc}") from None
        rotors.append(
            RotorDescriptor(
                name,
                kind,
                cycles=_text_field(entry.get("cycles", ""), f"{name} cycles"),
                notches=_text_field(entry.get("notches", ""), f"{name} notches"),
                wiring=_text_field(entry.get("wiring"), f"{name} wiring", optional=True),
            )
        )
    return MachineConfig(alphabet, num_rotors, pawls, rotors)


def config_to_dict(cfg: MachineConfig) -> Dict[str, Any]:
    rotors = []
    for d in cfg.rotors:
        entry: Dict[str, Any] = {"name": d.name, "kind": d.kind.name.lower()}
        if d.wiring is not None:
            entry["wiring"] = d.wiring
        else:
            entry["cycles"] = d.cycles
        if d.notches:
            entry["notches"] = d.notches
        rotors.append(entry)
    return {
        "alphabet": cfg.alphabet,
        "slots": cfg.num_rotors,
        "pawls": cfg.pawls,
        "rotors": rotors,
    }


def load_config(path: str | Path) -> MachineConfig:
    """Read a ``.json`` descriptor or the plain text format."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not open {path}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path}: not valid UTF-8 ({exc.reason})") from None

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from None
        return config_from_dict(data)
    return parse_config(text)


def config_to_text(cfg: MachineConfig) -> str:
    """Render *cfg* in the plain text format read by :func:`parse_config`."""
    lines = [cfg.alphabet, f"{cfg.num_rotors} {cfg.pawls}"]
    width = max((len(d.name) for d in cfg.rotors), default=0)
    for d in cfg.rotors:
        if d.wiring is not None:
            cycles = Permutation.from_wiring(d.wiring, Alphabet(cfg.alphabet)).cycle_text()
        else:
            cycles = d.cycles
        kind = d.kind.value + d.notches
        lines.append(f"{d.name:<{width}} {kind:<4} {cycles}")
    return "\n".join(lines) + "\n"
