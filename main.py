# main.py
from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, TextIO

from debug import COMPONENTS, Debug
from enigma_errors import ConfigError, EnigmaError
from machine import Machine
from machine_config import MachineConfig, load_config
from rotor_and_reflector import RotorKind
from utilities import (
    SettingDirective,
    apply_setting,
    format_groups,
    is_setting_line,
    parse_setting,
    preprocess_message,
    sorted_names,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()
debug.toggle_global(False)


@dataclass(slots=True)
class Config:
    """Runtime switches for a session."""

    verbose: bool = False           # trace every key-press through the logger
    block: int = 5                  # output group size

    def __post_init__(self) -> None:
        if self.block < 1:
            raise ConfigError(f"Group size must be at least 1, got {self.block}")


# ────────────────────────────────────────────────────────────────────────
#  1. MachineContext – wraps a Machine & its current setting
# ────────────────────────────────────────────────────────────────────────


class MachineContext:
    """A thin wrapper so we do not pass the machine and its key around."""

    def __init__(self, machine: Machine) -> None:
        self.machine = machine
        self.directive: SettingDirective | None = None

    @classmethod
    def from_config(cls, cfg: MachineConfig) -> "MachineContext":
        return cls(cfg.build())

    # ––– helpers ––––––––––––––––––––––––––––––––––––––––––––––––

    def apply(self, line: str) -> None:
        """Reconfigure the machine from a ``*`` setting line."""
        directive = parse_setting(line, self.machine.num_rotors())
        apply_setting(self.machine, directive)
        self.directive = directive

    def rewind(self) -> None:
        """Put the machine back to the last applied setting."""
        if self.directive is None:
            raise ConfigError("No setting line has been applied")
        apply_setting(self.machine, self.directive)

    def encipher_block(self, text: str) -> str:
        """Convert *text* from the machine's current state."""
        if self.directive is None:
            raise ConfigError("No setting line before message")
        clean = preprocess_message(text, self.machine.alphabet)
        return self.machine.convert(clean)


# ────────────────────────────────────────────────────────────────────────
#  2. Session – settings and messages, line by line
# ────────────────────────────────────────────────────────────────────────


def process(ctx: MachineContext, lines: Iterable[str], cfg: Config) -> Iterator[str]:
    """Yield one output line per input line.

    Setting lines reconfigure the machine and produce no output; blank lines
    come out blank; every other line is converted and printed in groups.
    """
    for raw in lines:
        line = raw.rstrip("\r\n")
        if is_setting_line(line):
            ctx.apply(line)
            continue
        if not line.strip():
            yield ""
            continue
        yield format_groups(ctx.encipher_block(line), cfg.block)


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    p.add_argument("config", type=Path, help="Machine configuration (text or .json)")
    p.add_argument("input", nargs="?", type=Path, help="Messages to convert (default: stdin)")
    p.add_argument("output", nargs="?", type=Path, help="Where to write results (default: stdout)")
    p.add_argument("--verbose", action="store_true", help="Trace every key-press to the log.")
    p.add_argument("--log-file", type=Path, help="Also write the trace to this file.")
    p.add_argument("--block", type=int, default=5, help="Output group size. Default: 5")
    p.add_argument("--list-rotors", action="store_true", help="Show the rotor catalog and exit.")
    return p.parse_args(argv)


def _list_rotors(cfg: MachineConfig, out: TextIO) -> None:
    for kind in RotorKind:
        names = sorted_names(cfg.names(kind))
        out.write(f"{kind.name.title():<10} {' '.join(names)}\n")


def _open_input(path: Path | None) -> TextIO:
    if path is None:
        return sys.stdin
    try:
        return path.open("r", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not open {path}") from exc


def _open_output(path: Path | None) -> TextIO:
    if path is None:
        return sys.stdout
    try:
        return path.open("w", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"could not open {path}") from exc


def _decoded(src: TextIO, path: Path | None) -> Iterator[str]:
    try:
        yield from src
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path or '<stdin>'}: not valid UTF-8 ({exc.reason})") from None


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def run(args: argparse.Namespace) -> None:
    cfg = Config(verbose=args.verbose, block=args.block)
    if cfg.verbose:
        debug.enable(*COMPONENTS)
        debug.toggle_global(True)

    machine_cfg = load_config(args.config)
    if args.list_rotors:
        _list_rotors(machine_cfg, sys.stdout)
        return

    ctx = MachineContext.from_config(machine_cfg)
    with ExitStack() as stack:
        src = _open_input(args.input)
        if src is not sys.stdin:
            stack.enter_context(src)
        dst = _open_output(args.output)
        if dst is not sys.stdout:
            stack.enter_context(dst)
        for out_line in process(ctx, _decoded(src, args.input), cfg):
            dst.write(out_line + "\n")


def _open_log(path: Path | None) -> logging.Handler | None:
    if path is None:
        return None
    try:
        return debug.add_file(str(path))
    except OSError as exc:
        raise ConfigError(f"could not open {path}") from exc


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    trace_file = None
    try:
        trace_file = _open_log(args.log_file)
        run(args)
    except EnigmaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if trace_file is not None:
            debug.remove_file(trace_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
