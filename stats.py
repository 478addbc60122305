from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List

import pandas as pd

from reqstate import ReqState, Request


STATS_COLUMNS = ["index", "block", "seek", "rotate", "transfer", "total"]


@dataclass(frozen=True)
class RequestStats:
    index: int
    block: int
    seek: int
    rotate: int
    transfer: int
    total: int


@dataclass(frozen=True)
class TotalStats:
    seek: int
    rotate: int
    transfer: int
    total: int


def request_stats(req: Request) -> RequestStats:
    if req.state is not ReqState.DONE:
        raise ValueError(f"request {req.index} is not complete ({req.state.name})")
    seek_begin = int(req.seek_begin)  # type: ignore[arg-type]
    rotate_begin = int(req.rotate_begin)  # type: ignore[arg-type]
    xfer_begin = int(req.xfer_begin)  # type: ignore[arg-type]
    done_at = int(req.done_at)  # type: ignore[arg-type]
    return RequestStats(
        index=req.index,
        block=req.block,
        seek=rotate_begin - seek_begin,
        rotate=xfer_begin - rotate_begin,
        transfer=done_at - xfer_begin,
        total=done_at - seek_begin,
    )


class StatsAggregator:
    def __init__(self) -> None:
        self._rows: List[RequestStats] = []
        self.seek_total = 0
        self.rotate_total = 0
        self.transfer_total = 0
        self.time_total = 0

    def __len__(self) -> int:
        return len(self._rows)

    def record(self, req: Request) -> RequestStats:
        row = request_stats(req)
        self._rows.append(row)
        self.seek_total += row.seek
        self.rotate_total += row.rotate
        self.transfer_total += row.transfer
        self.time_total += row.total
        return row

    def rows(self) -> List[RequestStats]:
        return list(self._rows)

    def totals(self) -> TotalStats:
        return TotalStats(
            seek=self.seek_total,
            rotate=self.rotate_total,
            transfer=self.transfer_total,
            total=self.time_total,
        )

    def to_records(self) -> List[Dict[str, Any]]:
        return [asdict(r) for r in self._rows]

    def to_frame(self) -> pd.DataFrame:
        """Per-request rows in completion order."""
        return pd.DataFrame(self.to_records(), columns=STATS_COLUMNS)
