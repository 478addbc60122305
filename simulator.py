from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

import numpy as np

from config import SimConfig, validate
from geometry import DiskGeometry
from mechanics import ArmController, RotationController
from reqgen import make_requests, make_rng
from reqstate import ReqState, Request
from scheduler import Scheduler
from stats import RequestStats, StatsAggregator, TotalStats


class TickResult(TypedDict):
    tick: int
    angle: float
    state: Optional[str]
    completed_block: Optional[int]
    done: bool


class SimulationResult(TypedDict):
    success: bool
    ticks: int
    requests: List[int]
    late_requests: List[int]
    dispatch_order: List[int]
    stats: List[RequestStats]
    totals: TotalStats
    metrics: Dict[str, Any]


@dataclass
class DiskContext:
    """Everything that belongs to one physical device."""

    geometry: DiskGeometry
    arm: ArmController
    platter: RotationController
    queue: List[Request] = field(default_factory=list)
    late: deque = field(default_factory=deque)
    clock: int = 0
    completed: int = 0
    current: Optional[Request] = None

    def enqueue(self, block: int) -> Request:
        req = Request(block=int(block), index=len(self.queue))
        self.queue.append(req)
        return req


class DiskSimulator:
    def __init__(
        self,
        cfg: SimConfig,
        *,
        rng: Optional[np.random.Generator] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self.cfg = validate(cfg)
        self.logger = logger
        geometry = DiskGeometry(cfg.zoning, cfg.skew)
        if rng is None:
            rng = make_rng(cfg.seed)
        self.requests: List[int] = make_requests(cfg.addr, cfg.addr_desc, geometry.max_block, rng)
        self.late_requests: List[int] = make_requests(
            cfg.late_addr, cfg.late_addr_desc, geometry.max_block, rng
        )
        self.ctx = DiskContext(
            geometry=geometry,
            arm=ArmController(geometry, cfg.seek_speed),
            platter=RotationController(cfg.rotate_speed),
            late=deque(self.late_requests),
        )
        for b in self.requests:
            self.ctx.enqueue(b)
        self.scheduler = Scheduler(cfg.policy, geometry, cfg.window, logger=logger)
        self.stats = StatsAggregator()
        self.dispatch_order: List[int] = []
        self.done: bool = False
        self._started: bool = False
        self.metrics: Dict[str, Any] = {
            "dispatches": 0,
            "shortcuts": 0,
            "late_admitted": 0,
            "last_estimate_total": None,
            "window": self.scheduler.window.current,
        }

    # -----------------
    # Public API
    # -----------------
    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self._next_io(prev=None)

    def run(self, max_ticks: Optional[int] = None) -> SimulationResult:
        self.start()
        budget = float("inf") if max_ticks is None else int(max_ticks)
        while not self.done and self.ctx.clock < budget:
            self.tick()
        if self.logger is not None:
            t = self.stats.totals()
            self.logger.info(
                "simulation %s ticks=%s seek=%s rotate=%s transfer=%s total=%s",
                "done" if self.done else "stopped",
                self.ctx.clock,
                t.seek,
                t.rotate,
                t.transfer,
                t.total,
            )
        return SimulationResult(
            success=self.done,
            ticks=self.ctx.clock,
            requests=list(self.requests),
            late_requests=list(self.late_requests),
            dispatch_order=list(self.dispatch_order),
            stats=self.stats.rows(),
            totals=self.stats.totals(),
            metrics=dict(self.metrics),
        )

    def tick(self) -> TickResult:
        """Advance the platter one step and run the current request's phase tests."""
        self.start()
        ctx = self.ctx
        if self.done:
            return TickResult(tick=ctx.clock, angle=ctx.platter.angle, state=None, completed_block=None, done=True)
        ctx.clock += 1
        ctx.platter.tick()
        req = ctx.current
        completed_block: Optional[int] = None
        if req is None or not req.active:
            raise RuntimeError("simulator has pending requests but nothing dispatched")
        now = ctx.clock
        geo = ctx.geometry
        if req.state is ReqState.SEEK:
            req.advance(now, on_track=ctx.arm.tick())
        if req.state is ReqState.ROTATE:
            half = geo.half_width(geo.track_of(req.block))
            req.advance(now, aligned=ctx.platter.done_with_rotation(geo.angle_of(req.block), half))
        if req.state is ReqState.XFER:
            half = geo.half_width(geo.track_of(req.block))
            if req.advance(now, transferred=ctx.platter.done_with_transfer(geo.angle_of(req.block), half)):
                completed_block = req.block
                self._complete(req)
        state = ctx.current.state.name if (ctx.current is not None and not self.done) else None
        return TickResult(
            tick=ctx.clock,
            angle=ctx.platter.angle,
            state=state,
            completed_block=completed_block,
            done=self.done,
        )

    # -----------------
    # Internals
    # -----------------
    def _complete(self, req: Request) -> None:
        ctx = self.ctx
        ctx.completed += 1
        row = self.stats.record(req)
        if self.logger is not None:
            self.logger.debug(
                "complete tick=%s block=%s seek=%s rotate=%s transfer=%s total=%s",
                ctx.clock,
                row.block,
                row.seek,
                row.rotate,
                row.transfer,
                row.total,
            )
        self.scheduler.on_completion(ctx.completed, len(ctx.queue))
        self.metrics["window"] = self.scheduler.window.current
        self._next_io(prev=req)

    def _next_io(self, prev: Optional[Request]) -> None:
        ctx = self.ctx
        if ctx.completed == len(ctx.queue):
            self.done = True
            ctx.current = None
            return
        sel = self.scheduler.select(ctx.queue, ctx.arm, ctx.platter)
        req = sel.request
        now = ctx.clock
        ctx.current = req
        self.dispatch_order.append(req.block)
        self.metrics["dispatches"] += 1
        self.metrics["last_estimate_total"] = sel.estimate.total
        req.advance(now, dispatched=True)
        track = ctx.geometry.track_of(req.block)
        req.advance(now, on_track=ctx.arm.plan_seek(track))
        if self.logger is not None:
            self.logger.debug(
                "dispatch tick=%s block=%s index=%s track=%s arm_track=%s",
                now,
                req.block,
                req.index,
                track,
                ctx.arm.track,
            )
        if prev is not None and req.state is ReqState.ROTATE and ctx.geometry.is_adjacent_sector(prev.block, req.block):
            # Head already sits at the leading edge of the next sector
            req.advance(now, aligned=True)
            self.metrics["shortcuts"] += 1
            if self.logger is not None:
                self.logger.debug("adjacent_sector tick=%s prev=%s next=%s", now, prev.block, req.block)
        self._admit_late()

    def _admit_late(self) -> None:
        ctx = self.ctx
        if not ctx.late:
            return
        block = ctx.late.popleft()
        req = ctx.enqueue(block)
        self.metrics["late_admitted"] += 1
        if self.logger is not None:
            self.logger.debug("late_admit tick=%s block=%s index=%s", ctx.clock, block, req.index)


def simulate(cfg: SimConfig, *, logger: Optional[Any] = None, max_ticks: Optional[int] = None) -> SimulationResult:
    return DiskSimulator(cfg, logger=logger).run(max_ticks=max_ticks)
