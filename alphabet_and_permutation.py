# alphabet_and_permutation.py
from __future__ import annotations

import re
from collections.abc import Iterator
from typing import overload

from enigma_errors import InvalidAlphabet, InvalidCycle, OutOfRange, UnknownSymbol


UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_cycle_re = re.compile(r"\(([^()]*)\)")


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """An ordered set of symbols; symbol K has index K."""

    def __init__(self, chars: str = UPPER) -> None:
        if not chars:
            raise InvalidAlphabet("Alphabet must contain at least one symbol")
        seen: set[str] = set()
        for ch in chars:
            if ch in seen:
                raise InvalidAlphabet(f"Duplicate symbol {ch!r} in alphabet")
            seen.add(ch)

        self.chars: str = chars
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(chars)
        }

    def size(self) -> int:
        return len(self.chars)

    def contains(self, symbol: str) -> bool:
        return symbol in self.alpha_to_index

    # symbol → integer signal
    def to_int(self, symbol: str) -> int:
        try:
            return self.alpha_to_index[symbol]
        except KeyError:
            raise UnknownSymbol(
                f"Invalid character {symbol!r} for current alphabet."
            ) from None

    # integer signal → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self.chars)):
            hi = len(self.chars) - 1
            raise OutOfRange(f"Index {index} out of range 0–{hi}")
        return self.chars[index]

    # ── niceties ---------------------------------------------------
    def __len__(self) -> int:
        return len(self.chars)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.alpha_to_index

    def __iter__(self) -> Iterator[str]:
        return iter(self.chars)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Alphabet) and other.chars == self.chars

    def __hash__(self) -> int:
        return hash(self.chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self.chars!r}>"


# ── Permutation ───────────────────────────────────────────────────
class Permutation:
    """A bijection on the indices of ALPHABET given in cycle notation.

    ``"(ABC) (DE)"`` sends A→B→C→A and D↔E; symbols outside every cycle map
    to themselves. Whitespace is ignored and cycles may abut: ``"(AB)(CD)"``.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self._alphabet = alphabet
        self._cycles: tuple[tuple[int, ...], ...] = self._parse(cycles, alphabet)

        # integer lookup tables
        n = alphabet.size()
        self._fwd = list(range(n))
        self._rev = list(range(n))
        for cycle in self._cycles:
            for pos, idx in enumerate(cycle):
                nxt = cycle[(pos + 1) % len(cycle)]
                self._fwd[idx] = nxt
                self._rev[nxt] = idx

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string: ``wiring[i]`` is the image of symbol i."""
        if sorted(wiring) != sorted(alphabet.chars):
            raise InvalidCycle("wiring must be a permutation of alphabet")

        seen: set[str] = set()
        groups: list[str] = []
        for start in alphabet:
            if start in seen:
                continue
            group = []
            ch = start
            while ch not in seen:
                seen.add(ch)
                group.append(ch)
                ch = wiring[alphabet.to_int(ch)]
            groups.append("(" + "".join(group) + ")")
        return cls(" ".join(groups), alphabet)

    @staticmethod
    def _parse(text: str, alphabet: Alphabet) -> tuple[tuple[int, ...], ...]:
        leftover = _cycle_re.sub(" ", text)
        if leftover.strip():
            raise InvalidCycle(f"Malformed cycle text {text!r}")

        used: set[str] = set()
        cycles: list[tuple[int, ...]] = []
        for body in _cycle_re.findall(text):
            symbols = "".join(body.split())
            if not symbols:
                raise InvalidCycle("Empty cycle '()' is not allowed")
            for ch in symbols:
                if ch not in alphabet:
                    raise InvalidCycle(f"Symbol {ch!r} not in alphabet")
                if ch in used:
                    raise InvalidCycle(f"Symbol {ch!r} appears more than once")
                used.add(ch)
            cycles.append(tuple(alphabet.to_int(ch) for ch in symbols))
        return tuple(cycles)

    # ── basics ---------------------------------------------------
    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def cycles(self) -> tuple[tuple[int, ...], ...]:
        return self._cycles

    def size(self) -> int:
        return self._alphabet.size()

    def wrap(self, p: int) -> int:
        """Return P modulo the size of this permutation."""
        return p % self.size()

    # ── mapping ---------------------------------------------------
    @overload
    def permute(self, p: int) -> int: ...
    @overload
    def permute(self, p: str) -> str: ...

    def permute(self, p):
        if isinstance(p, str):
            return self._alphabet.to_char(self._fwd[self._alphabet.to_int(p)])
        return self._fwd[self.wrap(p)]

    @overload
    def invert(self, c: int) -> int: ...
    @overload
    def invert(self, c: str) -> str: ...

    def invert(self, c):
        if isinstance(c, str):
            return self._alphabet.to_char(self._rev[self._alphabet.to_int(c)])
        return self._rev[self.wrap(c)]

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return all(self._fwd[i] != i for i in range(self.size()))

    def cycle_text(self) -> str:
        """My cycles back in ``"(ABC) (DE)"`` notation."""
        return " ".join(
            "(" + "".join(self._alphabet.to_char(i) for i in cycle) + ")"
            for cycle in self._cycles
        )

    def __repr__(self) -> str:
        return f"<Permutation {self.cycle_text()}>"
