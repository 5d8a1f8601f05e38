# rotor_and_reflector.py
from __future__ import annotations

from enum import Enum

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from enigma_errors import ConfigError

debug = Debug()


class RotorKind(Enum):
    REFLECTOR = "R"
    FIXED = "N"
    MOVING = "M"


# capability table: (rotates, reflects)
_CAPS: dict[RotorKind, tuple[bool, bool]] = {
    RotorKind.REFLECTOR: (False, True),
    RotorKind.FIXED: (False, False),
    RotorKind.MOVING: (True, False),
}


class Rotor:
    """One wheel of the machine: a wiring permutation plus rotational state.

    The wiring is given for the wheel at setting 0 with no ring offset.
    Only MOVING wheels carry notches and respond to ``advance()``;
    a REFLECTOR is only ever installed in slot 0.
    """

    def __init__(
        self,
        name: str,
        permutation: Permutation,
        kind: RotorKind = RotorKind.FIXED,
        notches: str = "",
    ) -> None:
        if notches and kind is not RotorKind.MOVING:
            raise ConfigError(f"Only moving rotors have notches ({name})")
        for ch in notches:
            permutation.alphabet.to_int(ch)

        self._name = name
        self._permutation = permutation
        self.kind = kind
        self._notches = frozenset(notches)
        self._notch_text = notches

        self._setting = 0
        self._ring = 0

    # ── constructors per kind ────────────────────────────────────
    @classmethod
    def moving(cls, name: str, permutation: Permutation, notches: str) -> "Rotor":
        return cls(name, permutation, RotorKind.MOVING, notches)

    @classmethod
    def fixed(cls, name: str, permutation: Permutation) -> "Rotor":
        return cls(name, permutation, RotorKind.FIXED)

    @classmethod
    def reflector(cls, name: str, permutation: Permutation) -> "Rotor":
        return cls(name, permutation, RotorKind.REFLECTOR)

    # ── identity ─────────────────────────────────────────────────
    @property
    def name(self) -> str:
        return self._name

    @property
    def permutation(self) -> Permutation:
        return self._permutation

    @property
    def alphabet(self) -> Alphabet:
        return self._permutation.alphabet

    @property
    def notches(self) -> str:
        return self._notch_text

    def size(self) -> int:
        return self._permutation.size()

    # ── capabilities ─────────────────────────────────────────────
    def rotates(self) -> bool:
        return _CAPS[self.kind][0]

    def reflecting(self) -> bool:
        return _CAPS[self.kind][1]

    def at_notch(self) -> bool:
        """True iff I am positioned to let the rotor on my left advance."""
        if self.kind is not RotorKind.MOVING:
            return False
        return self.alphabet.to_char(self._setting) in self._notches

    def advance(self) -> None:
        if self.kind is RotorKind.MOVING:
            self._setting = self._permutation.wrap(self._setting + 1)

    # ── setting & ring ───────────────────────────────────────────
    @property
    def setting(self) -> int:
        return self._setting

    def set(self, posn: int | str) -> None:
        """Rotate to POSN, an index (wrapped) or a window symbol."""
        if isinstance(posn, str):
            posn = self.alphabet.to_int(posn)
        self._setting = self._permutation.wrap(posn)

    @property
    def ring_setting(self) -> int:
        return self._ring

    def set_ring_setting(self, symbol: str) -> None:
        self._ring = self.alphabet.to_int(symbol)

    # ── signal paths ---------------------------------------------
    def convert_forward(self, p: int) -> int:
        d = self._setting - self._ring
        perm = self._permutation
        result = perm.wrap(perm.permute(perm.wrap(p + d)) - d)
        self._trace("fwd", p, result)
        return result

    def convert_backward(self, e: int) -> int:
        d = self._setting - self._ring
        perm = self._permutation
        result = perm.wrap(perm.invert(perm.wrap(e + d)) - d)
        self._trace("bwd", e, result)
        return result

    def _trace(self, way: str, a: int, b: int) -> None:
        component = "reflector" if self.reflecting() else "rotor"
        if debug.active(component):
            to_char = self.alphabet.to_char
            debug.log(component, f"{self._name} {way} {to_char(a % self.size())} -> {to_char(b)}")

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return (
            f"<Rotor {self._name} {self.kind.name.lower()} "
            f"pos={self._setting} ring={self._ring}>"
        )
