# suites.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Tuple

from machine_config import MachineConfig, RotorDescriptor, config_to_dict, config_to_text
from rotor_and_reflector import RotorKind

Alpha26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# ── historical wheels ─────────────────────────────────────────────
# name: (wiring, notches)
ROTORS: Dict[str, Tuple[str, str]] = {
    "I":    ("EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    "II":   ("AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    "III":  ("BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    "IV":   ("ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    "V":    ("VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
    "VI":   ("JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),
    "VII":  ("NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),
    "VIII": ("FKQHTLXOCBJSPDZRAMEWNIUYGV", "ZM"),
}

# greek wheels of the four-rotor naval machine; they never turn
FIXED: Dict[str, str] = {
    "BETA":  "LEYJVCNIXWPBQMDRTAKZGFUHOS",
    "GAMMA": "FSOKANUERHMBTIYCWLQPZXVGJD",
}

REFLECTORS: Dict[str, str] = {
    "A":      "EJMZALYXVBWFCRQUONTSPIKHGD",
    "B":      "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C":      "FVPJIAOYEDRZXWGCTKUQSBNMHL",
    "B_THIN": "ENKQAUYWJICOPBLMDXZVFTHRGS",
    "C_THIN": "RDOBJNTKVEHMLFCWZAXGYIPSUQ",
}


def historical_config(num_rotors: int = 5, pawls: int = 3) -> MachineConfig:
    """Every historical wheel over A–Z; five slots and three pawls by default."""
    rotors: List[RotorDescriptor] = [
        RotorDescriptor(name, RotorKind.MOVING, notches=notch, wiring=wiring)
        for name, (wiring, notch) in ROTORS.items()
    ]
    rotors += [
        RotorDescriptor(name, RotorKind.FIXED, wiring=wiring)
        for name, wiring in FIXED.items()
    ]
    rotors += [
        RotorDescriptor(name, RotorKind.REFLECTOR, wiring=wiring)
        for name, wiring in REFLECTORS.items()
    ]
    return MachineConfig(Alpha26, num_rotors, pawls, rotors)


# ── CLI: dump the catalog as a configuration file ─────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Write the historical wheel catalog")
    p.add_argument("--slots", type=int, default=5, help="Rotor slots (default 5)")
    p.add_argument("--pawls", type=int, default=3, help="Pawls (default 3)")
    p.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default text)",
    )
    p.add_argument("--outfile", type=Path, help="Write to this file (stdout if omitted)")
    return p.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    cfg = historical_config(args.slots, args.pawls)

    if args.format == "json":
        text = json.dumps(config_to_dict(cfg), indent=2) + "\n"
    else:
        text = config_to_text(cfg)

    if args.outfile:
        args.outfile.write_text(text, encoding="utf-8")
        print(f"Wrote {args.outfile} ({args.format}, {len(text)} bytes)")
    else:
        sys.stdout.write(text)


if __name__ == "__main__":
    main()
