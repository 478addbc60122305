from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple


class ReqState(IntEnum):
    NULL = 0
    SEEK = 1
    ROTATE = 2
    XFER = 3
    DONE = 4


class InvalidTransition(RuntimeError):
    pass


def next_state(
    state: ReqState,
    *,
    dispatched: bool = False,
    on_track: bool = False,
    aligned: bool = False,
    transferred: bool = False,
) -> ReqState:
    """Lifecycle step as a pure function of the measured conditions.

    Each state only looks at the condition that ends it; anything else keeps
    the state unchanged. DONE is terminal.
    """
    if state is ReqState.NULL and dispatched:
        return ReqState.SEEK
    if state is ReqState.SEEK and on_track:
        return ReqState.ROTATE
    if state is ReqState.ROTATE and aligned:
        return ReqState.XFER
    if state is ReqState.XFER and transferred:
        return ReqState.DONE
    return state


@dataclass
class Request:
    block: int
    index: int
    state: ReqState = ReqState.NULL
    seek_begin: Optional[int] = None
    rotate_begin: Optional[int] = None
    xfer_begin: Optional[int] = None
    done_at: Optional[int] = None
    history: List[Tuple[ReqState, int]] = field(default_factory=list)

    @property
    def pending(self) -> bool:
        return self.state is not ReqState.DONE

    @property
    def active(self) -> bool:
        return self.state not in (ReqState.NULL, ReqState.DONE)

    def enter(self, state: ReqState, now: int) -> None:
        """Move forward to ``state`` at tick ``now`` and stamp the phase start."""
        if state <= self.state:
            raise InvalidTransition(
                f"request {self.index} (block {self.block}) cannot go {self.state.name} -> {state.name}"
            )
        self.state = state
        self.history.append((state, int(now)))
        if state is ReqState.SEEK:
            self.seek_begin = int(now)
        elif state is ReqState.ROTATE:
            self.rotate_begin = int(now)
        elif state is ReqState.XFER:
            self.xfer_begin = int(now)
        elif state is ReqState.DONE:
            self.done_at = int(now)

    def advance(self, now: int, **conditions: bool) -> bool:
        """Apply :func:`next_state`; returns True when the state changed."""
        nxt = next_state(self.state, **conditions)
        if nxt is self.state:
            return False
        self.enter(nxt, now)
        return True

    def visited(self) -> List[ReqState]:
        return [s for (s, _) in self.history]

    def stamps(self) -> Dict[str, Optional[int]]:
        return {
            "seek_begin": self.seek_begin,
            "rotate_begin": self.rotate_begin,
            "xfer_begin": self.xfer_begin,
            "done_at": self.done_at,
        }
