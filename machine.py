# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import overload

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from enigma_errors import (
    BadSetting,
    DuplicateRotor,
    MachineConfigError,
    NotAReflector,
    TooManyRotors,
    UnknownRotor,
)
from rotor_and_reflector import Rotor

debug = Debug()


class Machine:
    """A complete machine: ALPHABET, NUM_ROTORS slots and PAWLS pawls.

    Slot 0 holds the reflector, slot ``num_rotors - 1`` the fast rotor.
    ALL_ROTORS is the catalog the slots are filled from.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
    ) -> None:
        if num_rotors <= 1:
            raise MachineConfigError("Machine lacks enough rotor slots.")
        if pawls <= 0 or pawls > num_rotors:
            raise MachineConfigError(
                f"Machine has illegal number of pawls ({pawls} for {num_rotors} slots)."
            )

        catalog: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in catalog:
                raise DuplicateRotor(f"Rotor {rotor.name!r} defined twice")
            catalog[rotor.name] = rotor

        self._alphabet = alphabet
        self._num_rotors = num_rotors
        self._pawls = pawls
        self._catalog = catalog
        self._rotors: list[Rotor] = []
        self._plugboard = Permutation("", alphabet)

    # ── basics ──────────────────────────────────────────────────

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    def num_rotors(self) -> int:
        return self._num_rotors

    def num_pawls(self) -> int:
        return self._pawls

    @property
    def available_rotors(self) -> dict[str, Rotor]:
        return dict(self._catalog)

    @property
    def rotors(self) -> tuple[Rotor, ...]:
        return tuple(self._rotors)

    def get_rotor(self, k: int) -> Rotor:
        """Rotor #K, where #0 is the reflector."""
        return self._rotors[k]

    def window(self) -> str:
        """Visible settings of every rotor but the reflector, left to right."""
        return "".join(self._alphabet.to_char(r.setting) for r in self._rotors[1:])

    # ── rotor selection, key & ring ─────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill my slots with the rotors NAMES (NAMES[0] is the reflector).

        Every selected rotor starts at setting 0.
        """
        if len(names) > self._num_rotors:
            raise TooManyRotors(
                f"{len(names)} rotors given for {self._num_rotors} slots"
            )
        selected: list[Rotor] = []
        for name in names:
            try:
                rotor = self._catalog[name]
            except KeyError:
                raise UnknownRotor(f"Bad rotor name {name!r}") from None
            if rotor in selected:
                raise DuplicateRotor(f"Rotor {name!r} selected twice")
            selected.append(rotor)
        if not selected or not selected[0].reflecting():
            first = names[0] if names else None
            raise NotAReflector(f"First rotor {first!r} is not a reflector")

        for rotor in selected:
            rotor.set(0)
        self._rotors = selected

    def set_rotors(self, setting: str) -> None:
        """Rotate each non-reflector rotor to its window symbol in SETTING."""
        indices = self._check_setting(setting, "Setting")
        for rotor, idx in zip(self._rotors[1:], indices):
            rotor.set(idx)

    def ringstellung(self, ring: str) -> None:
        """Apply ring offsets, one symbol per non-reflector rotor."""
        self._check_setting(ring, "Ring setting")
        for rotor, ch in zip(self._rotors[1:], ring):
            rotor.set_ring_setting(ch)

    def _check_setting(self, text: str, what: str) -> list[int]:
        need = len(self._rotors) - 1
        if need < 1:
            raise BadSetting("No rotors inserted")
        if len(text) != need:
            raise BadSetting(f"{what} {text!r} must be {need} symbols long")
        bad = [ch for ch in text if ch not in self._alphabet]
        if bad:
            raise BadSetting(f"{what} symbol {bad[0]!r} not in alphabet")
        return [self._alphabet.to_int(ch) for ch in text]

    # ── plugboard ───────────────────────────────────────────────

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    def set_plugboard(self, plugboard: Permutation) -> None:
        self._plugboard = plugboard

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self) -> None:
        """Advance rotors one key-press, double-step included.

        Notch states are read before anything moves. A rotor sitting at a
        notch whose left neighbour rotates advances together with that
        neighbour; no rotor moves twice; the fast rotor always moves.
        """
        rotors = self._rotors
        notched = [r.at_notch() for r in rotors]
        advanced: set[int] = set()

        for i in range(len(rotors) - 1, 0, -1):
            if not notched[i] or not rotors[i - 1].rotates():
                continue
            for k in (i, i - 1):
                if k not in advanced:
                    rotors[k].advance()
                    advanced.add(k)

        fast = len(rotors) - 1
        if fast not in advanced:
            rotors[fast].advance()

        if debug.active("stepping"):
            debug.log("stepping", f"[{self.window()}] moved slots {sorted(advanced | {fast})}")

    # ── encipher one symbol  ────────────────────────────────────

    def _convert_index(self, c: int) -> int:
        if not self._rotors:
            raise MachineConfigError("No rotors inserted")
        key = self._alphabet.to_char(c)
        if debug.active("keyboard"):
            debug.log("keyboard", f"key {key} ({c})")

        self._step_rotors()

        signal = self._plugboard.permute(c)
        self._trace_plugboard(c, signal)
        path = [c, signal]

        for rotor in reversed(self._rotors):
            signal = rotor.convert_forward(signal)
            path.append(signal)

        for rotor in self._rotors[1:]:
            signal = rotor.convert_backward(signal)
            path.append(signal)

        out = self._plugboard.permute(signal)
        self._trace_plugboard(signal, out)
        signal = out
        path.append(signal)

        if debug.active("encipher"):
            trace = " -> ".join(self._alphabet.to_char(i) for i in path)
            debug.log("encipher", f"[{self.window()}] {trace}")
        return signal

    def _trace_plugboard(self, a: int, b: int) -> None:
        if debug.active("plugboard"):
            to_char = self._alphabet.to_char
            debug.log("plugboard", f"{to_char(a)} -> {to_char(b)}")

    @overload
    def convert(self, msg: int) -> int: ...
    @overload
    def convert(self, msg: str) -> str: ...

    def convert(self, msg):
        """Convert an index, or every symbol of a string in order.

        Rotors advance before each symbol is converted.
        """
        if isinstance(msg, str):
            indices = [self._alphabet.to_int(ch) for ch in msg]
            to_char = self._alphabet.to_char
            return "".join(to_char(self._convert_index(i)) for i in indices)
        return self._convert_index(msg)

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self._rotors) or "-"
        return f"<Machine slots={self._num_rotors} pawls={self._pawls} rotors={names}>"
