"""
Tests for loading machine configurations from text and JSON.
"""

import json

import pytest

from enigma_errors import ConfigError, InvalidCycle
from machine_config import (
    config_from_dict,
    config_to_dict,
    config_to_text,
    load_config,
    parse_config,
)
from rotor_and_reflector import RotorKind
from suites import historical_config

ENIGMA_I_CONF = """\
ABCDEFGHIJKLMNOPQRSTUVWXYZ
4 3
I   MQ  (AELTPHQXRU)(BKNW) (CMOY) (DFG) (IV) (JZ) (S)
II  ME  (FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)
iii MV  (ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)
B   R   (AY) (BR) (CU) (DH) (EQ) (FS) (GL) (IP) (JX) (KN) (MO) (TZ)
        (VW)
"""


def run_vector(cfg, names=("B", "I", "II", "III")):
    machine = cfg.build()
    machine.insert_rotors(list(names))
    machine.set_rotors("AAA")
    return machine.convert("AAAAA")


class TestTextFormat:

    def test_parse(self):
        cfg = parse_config(ENIGMA_I_CONF)
        assert cfg.alphabet == "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
        assert (cfg.num_rotors, cfg.pawls) == (4, 3)
        assert [d.name for d in cfg.rotors] == ["I", "II", "III", "B"]
        assert cfg.rotors[0].notches == "Q"
        assert cfg.rotors[3].kind is RotorKind.REFLECTOR
        assert cfg.rotors[3].cycles.endswith("(VW)")

    def test_cycles_match_wiring(self):
        assert run_vector(parse_config(ENIGMA_I_CONF)) == "BDZGO"

    def test_fixed_rotor(self):
        cfg = parse_config("ABCD 3 1  R R (AB) (CD)  F N (ABC)  M MA (AD)")
        kinds = [d.kind for d in cfg.rotors]
        assert kinds == [RotorKind.REFLECTOR, RotorKind.FIXED, RotorKind.MOVING]
        assert cfg.names(RotorKind.FIXED) == ["F"]

    def test_cycle_split_over_tokens(self):
        cfg = parse_config("ABCD 2 1  R R (AB C D)")
        assert cfg.rotors[0].cycles == "(AB C D)"

    def test_round_trip_through_text(self):
        original = historical_config()
        again = parse_config(config_to_text(original))
        assert [d.name for d in again.rotors] == [d.name for d in original.rotors]
        assert run_vector(parse_config(config_to_text(historical_config(4, 3)))) == "BDZGO"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "ABC 2",
            "ABC x 1",
            "ABC 3 3",
            "ABC 3 0",
            "AB(C 3 1",
            "AB*C 3 1",
            "ABC 3 1 X Q (AB)",
            "ABC 3 1 X RA (AB)",
            "ABC 3 1 X",
        ],
    )
    def test_bad_text(self, text):
        with pytest.raises(ConfigError):
            parse_config(text)

    def test_bad_cycles_surface_on_build(self):
        cfg = parse_config("ABC 2 1 R R (AB) (A)")
        with pytest.raises(InvalidCycle):
            cfg.build()


class TestJsonFormat:

    def test_round_trip(self):
        data = json.loads(json.dumps(config_to_dict(historical_config(4, 3))))
        assert run_vector(config_from_dict(data)) == "BDZGO"

    def test_cycles_entry(self):
        cfg = config_from_dict(
            {
                "alphabet": "ABCD",
                "slots": 2,
                "pawls": 1,
                "rotors": [{"name": "r", "kind": "Reflector", "cycles": "(AB) (CD)"}],
            }
        )
        assert cfg.rotors[0].name == "R"
        assert cfg.build().available_rotors["R"].reflecting()

    def test_missing_keys(self):
        with pytest.raises(ConfigError, match="pawls"):
            config_from_dict({"alphabet": "ABC", "slots": 2, "rotors": []})

    @pytest.mark.parametrize("data", [[1, 2], "ABC", None])
    def test_not_an_object(self, data):
        with pytest.raises(ConfigError, match="JSON object"):
            config_from_dict(data)

    @pytest.mark.parametrize(
        "data",
        [
            {"alphabet": 26, "slots": 3, "pawls": 1, "rotors": []},
            {"alphabet": "ABC", "slots": 3, "pawls": 1, "rotors": "B"},
            {"alphabet": "ABC", "slots": 3, "pawls": 1,
             "rotors": [{"name": "R", "kind": "reflector", "cycles": ["(AB)"]}]},
            {"alphabet": "ABC", "slots": 3, "pawls": 1,
             "rotors": [{"name": "M", "kind": "moving", "wiring": 7}]},
        ],
    )
    def test_wrongly_typed_fields(self, data):
        with pytest.raises(ConfigError):
            config_from_dict(data)

    @pytest.mark.parametrize(
        "entry", [{"kind": "moving"}, {"name": "X", "kind": "spinning"}, ["X", "moving"], 3]
    )
    def test_bad_rotor_entry(self, entry):
        with pytest.raises(ConfigError):
            config_from_dict({"alphabet": "ABC", "slots": 3, "pawls": 1, "rotors": [entry]})


class TestLoadConfig:

    def test_text_file(self, tmp_path):
        path = tmp_path / "enigma.conf"
        path.write_text(ENIGMA_I_CONF, encoding="utf-8")
        assert run_vector(load_config(path)) == "BDZGO"

    def test_json_file(self, tmp_path):
        path = tmp_path / "enigma.json"
        path.write_text(json.dumps(config_to_dict(historical_config(4, 3))), encoding="utf-8")
        assert load_config(path).num_rotors == 4

    def test_broken_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    @pytest.mark.parametrize("name", ["enigma.conf", "enigma.json"])
    def test_not_utf8(self, tmp_path, name):
        path = tmp_path / name
        path.write_bytes(b"AB\xfeC 3 1")
        with pytest.raises(ConfigError, match="UTF-8"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="could not open"):
            load_config(tmp_path / "nope.conf")
