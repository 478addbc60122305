from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from config import POLICIES, DiskConfigError
from geometry import DiskGeometry
from mechanics import ArmController, RotationController
from reqstate import Request


UNBOUNDED = -1


class SchedulerError(RuntimeError):
    """No candidate could be chosen although requests are still pending."""


@dataclass(frozen=True)
class AccessEstimate:
    seek: float
    rotate: float
    transfer: float

    @property
    def total(self) -> float:
        return self.seek + self.rotate + self.transfer


@dataclass(frozen=True)
class Selection:
    request: Request
    estimate: AccessEstimate


def estimate_access(
    geometry: DiskGeometry,
    arm: ArmController,
    platter: RotationController,
    block: int,
) -> AccessEstimate:
    """Predicted seek + rotate + transfer time to service ``block`` from the current position."""
    track = geometry.track_of(block)
    angle = geometry.angle_of(block)
    half = geometry.half_width(track)
    seek_est = arm.seek_estimate(track)
    arrival = platter.angle_after(seek_est)
    rot_dist = (angle - half) - arrival
    while rot_dist < 0.0:
        rot_dist += 360.0
    rot_dist = rot_dist % 360.0
    return AccessEstimate(
        seek=seek_est,
        rotate=rot_dist / platter.speed,
        transfer=(2.0 * half) / platter.speed,
    )


def is_window_admission(completed: int, fair_window: int) -> bool:
    """BSATF admits the next batch each time a full fairness window has completed."""
    return fair_window > 0 and completed > 0 and completed % fair_window == 0


class SchedulingWindow:
    """How many queue slots (in enqueue order) a policy may look at."""

    def __init__(self, window: int = UNBOUNDED, fair_window: int = UNBOUNDED) -> None:
        if window == 0 or window < UNBOUNDED:
            raise DiskConfigError(
                f"scheduling window ({window}) must be positive or -1 (which means a full window)"
            )
        self.configured = int(window)
        self.fair = int(fair_window)
        self.current = int(window)

    @classmethod
    def for_policy(cls, policy: str, window: int) -> "SchedulingWindow":
        fair = window if (policy == "BSATF" and window != UNBOUNDED) else UNBOUNDED
        return cls(window, fair_window=fair)

    @property
    def unbounded(self) -> bool:
        return self.current <= UNBOUNDED

    def visible(self, queue_len: int) -> int:
        if self.unbounded:
            return queue_len
        return min(self.current, queue_len)

    def on_completion(self, completed: int, queue_len: int) -> bool:
        """Update after a completion; returns True when a fairness batch was admitted."""
        if self.unbounded:
            return False
        if self.fair != UNBOUNDED:
            if is_window_admission(completed, self.fair):
                self.current += self.fair
                return True
            return False
        if self.current < queue_len:
            self.current += 1
        return False


class Scheduler:
    def __init__(
        self,
        policy: str,
        geometry: DiskGeometry,
        window: int = UNBOUNDED,
        *,
        logger: Optional[Any] = None,
    ) -> None:
        policy = str(policy).upper()
        if policy not in POLICIES:
            raise DiskConfigError(f"policy ({policy}) not implemented; choose one of {POLICIES}")
        self.policy = policy
        self.geometry = geometry
        self.window = SchedulingWindow.for_policy(policy, window)
        self.logger = logger

    # -----------------
    # Public API
    # -----------------
    def visible(self, queue: Sequence[Request]) -> List[Request]:
        return list(queue[: self.window.visible(len(queue))])

    def select(
        self,
        queue: Sequence[Request],
        arm: ArmController,
        platter: RotationController,
    ) -> Selection:
        if self.policy == "FIFO":
            cands = self._oldest_pending(queue)
        elif self.policy == "SSTF":
            cands = self.sstf_candidates(self.visible(queue), arm.track)
        else:
            cands = self.visible(queue)
        sel = self.satf(cands, arm, platter)
        if sel is None:
            raise SchedulerError(
                f"{self.policy} found no candidate with {sum(1 for r in queue if r.pending)} "
                f"pending of {len(queue)} (window={self.window.current})"
            )
        if self.logger is not None:
            self.logger.debug(
                "select policy=%s block=%s index=%s est_total=%.3f",
                self.policy,
                sel.request.block,
                sel.request.index,
                sel.estimate.total,
            )
        return sel

    def on_completion(self, completed: int, queue_len: int) -> None:
        if self.window.on_completion(completed, queue_len) and self.logger is not None:
            self.logger.debug(
                "window_admission completed=%s window=%s", completed, self.window.current
            )

    # -----------------
    # Policies
    # -----------------
    @staticmethod
    def _oldest_pending(queue: Iterable[Request]) -> List[Request]:
        for r in queue:
            if r.pending:
                return [r]
        return []

    def sstf_candidates(self, reqs: Iterable[Request], arm_track: int) -> List[Request]:
        """Pending requests on the track(s) nearest the arm."""
        pending = [r for r in reqs if r.pending]
        if not pending:
            return []
        dist = {r.index: abs(arm_track - self.geometry.track_of(r.block)) for r in pending}
        nearest = min(dist.values())
        return [r for r in pending if dist[r.index] == nearest]

    def satf(
        self,
        reqs: Iterable[Request],
        arm: ArmController,
        platter: RotationController,
    ) -> Optional[Selection]:
        best: Optional[Selection] = None
        for r in reqs:
            if not r.pending:
                continue
            est = estimate_access(self.geometry, arm, platter, r.block)
            if best is None or est.total < best.estimate.total:
                best = Selection(request=r, estimate=est)
        return best
