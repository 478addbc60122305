from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml


POLICIES = ("FIFO", "SSTF", "SATF", "BSATF")

# Radial layout (arm travel measured inward from the outer edge)
TRACK_WIDTH = 80.0
NUM_TRACKS = 3


class DiskConfigError(ValueError):
    """Configuration that cannot produce a simulation."""


@dataclass
class SimConfig:
    seed: int = 0
    addr: str = "-1"
    addr_desc: str = "5,-1,0"
    late_addr: str = "-1"
    late_addr_desc: str = "0,-1,0"
    policy: str = "FIFO"
    seek_speed: float = 1.0
    rotate_speed: float = 1.0
    skew: int = 0
    window: int = -1
    zoning: str = "30,30,30"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def split_csv(value: Union[str, Sequence[Any], None]) -> List[str]:
    """Split a comma-separated option; sequences (e.g. YAML lists) pass through."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value]
    text = str(value).strip()
    if not text:
        return []
    return [s.strip() for s in text.split(",")]


def _as_csv(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def parse_zoning(zoning: Union[str, Sequence[Any]]) -> List[float]:
    parts = split_csv(zoning)
    if len(parts) != NUM_TRACKS:
        raise DiskConfigError(
            f"zoning must have exactly {NUM_TRACKS} values, got {len(parts)} ({zoning!r})"
        )
    out: List[float] = []
    for p in parts:
        try:
            z = float(p)
        except ValueError:
            raise DiskConfigError(f"zoning values must be numbers, got {p!r}") from None
        if z <= 0.0:
            raise DiskConfigError(f"zoning values must be positive, got {p!r}")
        out.append(z)
    return out


def validate(cfg: SimConfig) -> SimConfig:
    """Reject configurations before any simulator state is built."""
    cfg.policy = str(cfg.policy).upper()
    if cfg.policy not in POLICIES:
        raise DiskConfigError(f"policy ({cfg.policy}) not implemented; choose one of {POLICIES}")
    if cfg.window == 0 or cfg.window < -1:
        raise DiskConfigError(
            f"scheduling window ({cfg.window}) must be positive or -1 (which means a full window)"
        )
    if cfg.seek_speed <= 0.0:
        raise DiskConfigError(f"seek speed must be positive, got {cfg.seek_speed}")
    if cfg.rotate_speed <= 0.0:
        raise DiskConfigError(f"rotate speed must be positive, got {cfg.rotate_speed}")
    # Checked against the 80-unit track pitch, so the arm lands exactly on a
    # seek position; fractional speeds above 1 must divide it too.
    if cfg.seek_speed > 1 and TRACK_WIDTH % cfg.seek_speed != 0:
        raise DiskConfigError(
            f"seek speed ({cfg.seek_speed:g}) must divide evenly into track width ({TRACK_WIDTH:g})"
        )
    parse_zoning(cfg.zoning)
    return cfg


# ------------------------------
# YAML loading
# ------------------------------
def load_cfg(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    if not isinstance(data, dict):
        raise DiskConfigError(f"config root must be a mapping: {path}")
    return data


def ensure_min_cfg(cfg: Dict[str, Any]) -> Dict[str, Any]:
    c = dict(cfg or {})
    disk = dict(c.get("disk", {}) or {})
    disk.setdefault("zoning", "30,30,30")
    disk.setdefault("skew", 0)
    disk.setdefault("seek_speed", 1.0)
    disk.setdefault("rotate_speed", 1.0)
    c["disk"] = disk

    wl = dict(c.get("workload", {}) or {})
    wl.setdefault("seed", 0)
    wl.setdefault("addr", "-1")
    wl.setdefault("addr_desc", "5,-1,0")
    wl.setdefault("late_addr", "-1")
    wl.setdefault("late_addr_desc", "0,-1,0")
    c["workload"] = wl

    pol = dict(c.get("policies", {}) or {})
    pol.setdefault("policy", "FIFO")
    pol.setdefault("window", -1)
    c["policies"] = pol
    return c


def config_from_mapping(cfg: Dict[str, Any]) -> SimConfig:
    c = ensure_min_cfg(cfg)
    disk, wl, pol = c["disk"], c["workload"], c["policies"]
    try:
        return SimConfig(
            seed=int(wl["seed"]),
            addr=_as_csv(wl["addr"]),
            addr_desc=_as_csv(wl["addr_desc"]),
            late_addr=_as_csv(wl["late_addr"]),
            late_addr_desc=_as_csv(wl["late_addr_desc"]),
            policy=str(pol["policy"]).upper(),
            seek_speed=float(disk["seek_speed"]),
            rotate_speed=float(disk["rotate_speed"]),
            skew=int(disk["skew"]),
            window=int(pol["window"]),
            zoning=_as_csv(disk["zoning"]),
        )
    except (TypeError, ValueError) as exc:
        raise DiskConfigError(f"bad config value: {exc}") from exc


def apply_overrides(cfg: SimConfig, **overrides: Optional[Any]) -> SimConfig:
    """Return a copy with every non-None override applied (CLI > file > default)."""
    values = cfg.to_dict()
    for key, val in overrides.items():
        if val is None:
            continue
        if key not in values:
            raise DiskConfigError(f"unknown config key: {key}")
        values[key] = val
    values["policy"] = str(values["policy"]).upper()
    return SimConfig(**values)
