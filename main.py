from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, List, Optional

from config import DiskConfigError, SimConfig, apply_overrides, config_from_mapping, load_cfg, validate
from simulator import DiskSimulator, SimulationResult


# ------------------------------
# Output helpers
# ------------------------------
def _ensure_dir(p: str) -> None:
    d = os.path.dirname(p)
    if d:
        os.makedirs(d, exist_ok=True)


def _join(blocks: List[int]) -> str:
    return ",".join(str(b) for b in blocks)


def echo_options(cfg: SimConfig, compute: bool) -> List[str]:
    return [
        f"OPTIONS seed {cfg.seed}",
        f"OPTIONS addr {cfg.addr}",
        f"OPTIONS addrDesc {cfg.addr_desc}",
        f"OPTIONS seekSpeed {cfg.seek_speed:g}",
        f"OPTIONS rotateSpeed {cfg.rotate_speed:g}",
        f"OPTIONS skew {cfg.skew}",
        f"OPTIONS window {cfg.window}",
        f"OPTIONS policy {cfg.policy}",
        f"OPTIONS compute {str(compute).lower()}",
        f"OPTIONS zoning {cfg.zoning}",
        f"OPTIONS lateAddr {cfg.late_addr}",
        f"OPTIONS lateAddrDesc {cfg.late_addr_desc}",
        "",
    ]


def format_result(res: SimulationResult, compute: bool) -> List[str]:
    lines = [f"REQUESTS {_join(res['requests'])}", ""]
    if res["late_requests"]:
        lines += [f"LATE REQUESTS {_join(res['late_requests'])}", ""]
    if not compute:
        lines += [
            "",
            "For the requests above, compute the seek, rotate, and transfer times.",
            "Use -c to see the answers.",
            "",
        ]
        return lines
    for r in res["stats"]:
        lines.append(
            f"Block: {r.block:3d}  Seek:{r.seek:3d}  Rotate:{r.rotate:3d}  "
            f"Transfer:{r.transfer:3d}  Total:{r.total:4d}"
        )
    t = res["totals"]
    lines += [
        "",
        f"TOTALS      Seek:{t.seek:3d}  Rotate:{t.rotate:3d}  Transfer:{t.transfer:3d}  Total:{t.total:4d}",
        "",
    ]
    return lines


def export_stats_csv(sim: DiskSimulator, *, out_dir: str) -> str:
    path = os.path.join(out_dir, "request_stats.csv")
    _ensure_dir(path)
    sim.stats.to_frame().to_csv(path, index=False)
    return path


def _mk_logger(level: str, log_file: Optional[str]) -> logging.Logger:
    logger = logging.getLogger("disksim")
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    handler: logging.Handler
    if log_file:
        _ensure_dir(log_file)
        handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    for old in logger.handlers:
        old.close()
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


# ------------------------------
# Runner
# ------------------------------
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Simulate seek, rotation and transfer times of a three-track disk")
    p.add_argument("--config", default="config.yaml", help="Path to YAML config")
    p.add_argument("-s", "--seed", type=int, default=None, help="Random seed")
    p.add_argument("-a", "--addr", default=None, help="Request list (comma-separated); -1 means random")
    p.add_argument("-A", "--addr-desc", dest="addr_desc", default=None,
                   help="Random request description: num,maxRequest,minRequest (max -1 = max block)")
    p.add_argument("-l", "--late-addr", dest="late_addr", default=None, help="Late request list; -1 means random")
    p.add_argument("-L", "--late-addr-desc", dest="late_addr_desc", default=None,
                   help="Random late request description, same format as --addr-desc")
    p.add_argument("-p", "--policy", default=None, help="Scheduling policy: FIFO, SSTF, SATF, BSATF")
    p.add_argument("-S", "--seek-speed", dest="seek_speed", type=float, default=None, help="Arm speed per tick")
    p.add_argument("-R", "--rotate-speed", dest="rotate_speed", type=float, default=None,
                   help="Degrees of rotation per tick")
    p.add_argument("-o", "--skew", type=int, default=None, help="Track skew in sectors")
    p.add_argument("-w", "--window", type=int, default=None, help="Scheduling window (-1 = whole queue)")
    p.add_argument("-z", "--zoning", default=None, help="Angular sector width per track (outer,middle,inner)")
    p.add_argument("-c", "--compute", action="store_true", help="Print the answers")
    p.add_argument("--out-dir", default=None, help="Write request_stats.csv here")
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    p.add_argument("--log-file", default=None, help="Write log records to this file instead of stderr")
    return p


def resolve_config(args: argparse.Namespace) -> SimConfig:
    cfg = config_from_mapping(load_cfg(args.config))
    cfg = apply_overrides(
        cfg,
        seed=args.seed,
        addr=args.addr,
        addr_desc=args.addr_desc,
        late_addr=args.late_addr,
        late_addr_desc=args.late_addr_desc,
        policy=args.policy,
        seek_speed=args.seek_speed,
        rotate_speed=args.rotate_speed,
        skew=args.skew,
        window=args.window,
        zoning=args.zoning,
    )
    return validate(cfg)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger: Any = _mk_logger(args.log_level, args.log_file)
    try:
        cfg = resolve_config(args)
        sim = DiskSimulator(cfg, logger=logger)
    except DiskConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print("\n".join(echo_options(cfg, args.compute)))
    res = sim.run()
    print("\n".join(format_result(res, args.compute)))
    if args.out_dir:
        path = export_stats_csv(sim, out_dir=args.out_dir)
        logger.info("wrote %s", path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
