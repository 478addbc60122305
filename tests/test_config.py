from __future__ import annotations

import unittest

import pytest
import yaml

from config import (
    DiskConfigError,
    SimConfig,
    apply_overrides,
    config_from_mapping,
    ensure_min_cfg,
    load_cfg,
    parse_zoning,
    validate,
)


class ValidateTests(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        cfg = validate(SimConfig())
        self.assertEqual(cfg.policy, "FIFO")
        self.assertEqual(cfg.window, -1)

    def test_window_zero_rejected(self) -> None:
        with self.assertRaises(DiskConfigError):
            validate(SimConfig(window=0))
        with self.assertRaises(DiskConfigError):
            validate(SimConfig(window=-3))

    def test_unknown_policy_rejected(self) -> None:
        with self.assertRaises(DiskConfigError):
            validate(SimConfig(policy="CSCAN"))

    def test_speeds(self) -> None:
        validate(SimConfig(seek_speed=2.0))
        validate(SimConfig(seek_speed=0.5))
        validate(SimConfig(seek_speed=16.0))
        validate(SimConfig(seek_speed=2.5))
        with self.assertRaises(DiskConfigError):
            validate(SimConfig(seek_speed=1.5))
        with self.assertRaises(DiskConfigError):
            validate(SimConfig(seek_speed=3.0))
        with self.assertRaises(DiskConfigError):
            validate(SimConfig(seek_speed=0.0))
        with self.assertRaises(DiskConfigError):
            validate(SimConfig(rotate_speed=-1.0))

    def test_bad_zoning_rejected(self) -> None:
        with self.assertRaises(DiskConfigError):
            validate(SimConfig(zoning="30,30"))


def test_parse_zoning_accepts_lists_and_strings() -> None:
    assert parse_zoning("30, 60 ,90") == [30.0, 60.0, 90.0]
    assert parse_zoning([10, 20, 40]) == [10.0, 20.0, 40.0]


def test_load_missing_file_gives_defaults(tmp_path) -> None:
    raw = load_cfg(str(tmp_path / "nope.yaml"))
    assert raw == {}
    assert config_from_mapping(raw) == SimConfig()


def test_yaml_round_trip(tmp_path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "disk": {"zoning": [30, 60, 90], "skew": 1, "rotate_speed": 3},
                "workload": {"addr": [18, 21, 13], "seed": 5},
                "policies": {"policy": "bsatf", "window": 2},
            }
        ),
        encoding="utf-8",
    )
    cfg = config_from_mapping(load_cfg(str(path)))
    assert cfg.zoning == "30,60,90"
    assert cfg.addr == "18,21,13"
    assert cfg.policy == "BSATF"
    assert cfg.window == 2
    assert cfg.skew == 1
    assert cfg.rotate_speed == 3.0
    assert cfg.seed == 5
    assert cfg.seek_speed == 1.0
    validate(cfg)


def test_non_mapping_yaml_rejected(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(DiskConfigError):
        load_cfg(str(path))


def test_bad_value_type_rejected() -> None:
    with pytest.raises(DiskConfigError):
        config_from_mapping({"policies": {"window": "wide"}})


def test_ensure_min_cfg_keeps_given_values() -> None:
    c = ensure_min_cfg({"policies": {"policy": "SSTF"}})
    assert c["policies"] == {"policy": "SSTF", "window": -1}
    assert c["disk"]["zoning"] == "30,30,30"


def test_overrides_skip_none() -> None:
    cfg = apply_overrides(SimConfig(), policy="satf", window=None, skew=2)
    assert cfg.policy == "SATF"
    assert cfg.window == -1
    assert cfg.skew == 2
    with pytest.raises(DiskConfigError):
        apply_overrides(SimConfig(), colour="blue")
