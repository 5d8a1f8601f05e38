# settings_generator.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List

from enigma_errors import ConfigError, EnigmaError
from machine_config import MachineConfig, load_config
from rotor_and_reflector import RotorKind
from suites import historical_config
from utilities import SettingDirective

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def random_setting(
    cfg: MachineConfig,
    rng: Random | SystemRandom,
    pairs: int = 10,
    with_ring: bool = True,
) -> SettingDirective:
    """A setting directive that :func:`utilities.apply_setting` accepts for *cfg*."""
    moving = cfg.names(RotorKind.MOVING)
    fixed = cfg.names(RotorKind.FIXED)
    reflectors = cfg.names(RotorKind.REFLECTOR)

    n_moving = cfg.pawls
    n_fixed = cfg.num_rotors - 1 - n_moving
    if not reflectors or len(moving) < n_moving or len(fixed) < n_fixed:
        raise ConfigError(
            f"Catalog cannot fill {cfg.num_rotors} slots with {n_moving} moving rotors"
        )

    names = [rng.choice(reflectors)]
    names += rng.sample(fixed, n_fixed)
    names += rng.sample(moving, n_moving)

    alpha = cfg.alphabet
    need = cfg.num_rotors - 1
    positions = "".join(rng.choice(alpha) for _ in range(need))
    ring = "".join(rng.choice(alpha) for _ in range(need)) if with_ring else None
    plugs = " ".join(f"({p})" for p in choose_pairs(alpha, pairs, rng))
    return SettingDirective(names, positions, ring, plugs)


def parse_cli(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate random setting lines")
    p.add_argument(
        "--config",
        type=Path,
        help="Machine configuration (default: the historical catalog)",
    )
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--pairs", type=int, default=10, help="Plugboard cables (default 10)")
    p.add_argument("--no-ring", action="store_true", help="Leave ring settings out")
    p.add_argument("--count", type=int, default=1, help="How many lines (default 1)")
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> int:
    args = parse_cli(argv)
    try:
        cfg = load_config(args.config) if args.config else historical_config()
        rng = build_rng(args.seed)
        for _ in range(args.count):
            directive = random_setting(cfg, rng, args.pairs, not args.no_ring)
            print(directive.to_line())
    except EnigmaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
