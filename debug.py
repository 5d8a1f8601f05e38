# debug.py
from __future__ import annotations

import logging
import os
from typing import ClassVar, Dict

# pipeline stages a key-press passes through, in order
COMPONENTS = ("keyboard", "plugboard", "rotor", "reflector", "stepping", "encipher")

_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def _from_env() -> Dict[str, bool]:
    """Component switches named in ``$ENIGMA_TRACE`` (comma separated)."""
    wanted = {w.strip().lower() for w in os.environ.get("ENIGMA_TRACE", "").split(",")}
    return {c: c in wanted or "all" in wanted for c in COMPONENTS}


class Debug:
    """Per-stage trace switches in front of the ``ENIGMA`` logger.

    Every instance reads and writes the same switches, so a module-level
    ``debug = Debug()`` in each file is turned on by one call from the CLI.
    Nothing is formatted unless ``active(component)`` is true.
    """

    _handler_installed: ClassVar[bool] = False
    _enabled: ClassVar[bool] = False
    _switches: ClassVar[Dict[str, bool]] = _from_env()

    def __init__(self, *, log_to: str | None = None) -> None:
        self.logger = logging.getLogger("ENIGMA")
        self.logger.setLevel(logging.DEBUG)
        if not Debug._handler_installed:
            logging.basicConfig(level=logging.DEBUG, format=_LOG_FORMAT, datefmt=_DATE_FORMAT)
            Debug._handler_installed = True
        if log_to:
            self.add_file(log_to)

    def add_file(self, path: str) -> logging.Handler:
        """Also write the trace to PATH; returns the handler for remove_file."""
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        self.logger.addHandler(handler)
        return handler

    def remove_file(self, handler: logging.Handler) -> None:
        self.logger.removeHandler(handler)
        handler.close()

    # ── tracing ──────────────────────────────────────────────────
    def active(self, component: str) -> bool:
        return Debug._enabled and Debug._switches.get(component, False)

    def log(self, component: str, message: str) -> None:
        if self.active(component):
            self.logger.debug("[%s] %s", component.upper(), message)

    # ── switches ─────────────────────────────────────────────────
    def enable(self, *components: str) -> None:
        self._set(components, True)

    def disable(self, *components: str) -> None:
        self._set(components, False)

    def toggle(self, component: str) -> None:
        self._set((component,), not Debug._switches.get(component, False))

    def toggle_global(self, state: bool) -> None:
        """Master switch; component switches keep their values."""
        Debug._enabled = state

    @property
    def enabled(self) -> bool:
        return Debug._enabled

    def status(self) -> Dict[str, bool]:
        return dict(Debug._switches)

    def _set(self, components, state: bool) -> None:
        unknown = [c for c in components if c not in Debug._switches]
        if unknown:
            raise ValueError(f"No such component: {unknown[0]!r} (known: {', '.join(COMPONENTS)})")
        for c in components:
            Debug._switches[c] = state

    def __repr__(self) -> str:
        on = [c for c in COMPONENTS if Debug._switches[c]]
        return f"<Debug {'on' if Debug._enabled else 'off'} {on}>"
