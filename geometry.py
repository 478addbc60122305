from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

from config import NUM_TRACKS, TRACK_WIDTH, parse_zoning


# Every block angle is rotated by this much once the layout is built, so the
# platter's 0-degree start lines up with the rotate/transfer targets.
CALIBRATION_OFFSET = 180.0
# Skew multiplier per track depth (outer, middle, inner)
SKEW_DEPTH = (0, 1, 2)


@dataclass(frozen=True)
class Block:
    id: int
    track: int
    angle: float


@dataclass(frozen=True)
class Track:
    index: int
    center: float
    half_width: float
    begin: int
    end: int


def normalize_angle(a: float) -> float:
    """Map any angle into [0, 360)."""
    a = a % 360.0
    if a >= 360.0:
        a -= 360.0
    return a


def track_center(track: int) -> float:
    return TRACK_WIDTH * track + TRACK_WIDTH / 2.0


class DiskGeometry:
    """Block layout of a three-track platter.

    Track ``t`` holds blocks at successive multiples of its sector width;
    inner tracks are skewed by ``width * skew * depth``. Ids run contiguously
    from the outer track inward.
    """

    def __init__(self, zoning: Union[str, Sequence[float]], skew: int = 0) -> None:
        self.zones: List[float] = parse_zoning(zoning)
        self.skew = int(skew)
        self.tracks: Dict[int, Track] = {}
        self._blocks: List[Block] = []
        self._build()

    def _build(self) -> None:
        raw: List[Tuple[int, int, float]] = []
        next_id = 0
        for t in range(NUM_TRACKS):
            width = self.zones[t]
            offset = width * self.skew * SKEW_DEPTH[t]
            first = next_id
            k = 0
            while k * width < 360.0:
                raw.append((next_id, t, k * width + offset))
                next_id += 1
                k += 1
            self.tracks[t] = Track(
                index=t,
                center=track_center(t),
                half_width=width / 2.0,
                begin=first,
                end=next_id - 1,
            )
        self._blocks = [
            Block(id=b, track=t, angle=normalize_angle(a + CALIBRATION_OFFSET))
            for (b, t, a) in raw
        ]

    # -----------------
    # Lookups
    # -----------------
    @property
    def max_block(self) -> int:
        return self._blocks[-1].id

    @property
    def num_blocks(self) -> int:
        return len(self._blocks)

    def blocks(self) -> List[Block]:
        return list(self._blocks)

    def block(self, block: int) -> Block:
        if not 0 <= block <= self.max_block:
            raise IndexError(f"block must be in [0,{self.max_block}], got {block}")
        return self._blocks[block]

    def track_of(self, block: int) -> int:
        return self.block(block).track

    def angle_of(self, block: int) -> float:
        return self.block(block).angle

    def half_width(self, track: int) -> float:
        return self.tracks[track].half_width

    def track_range(self, track: int) -> Tuple[int, int]:
        tr = self.tracks[track]
        return (tr.begin, tr.end)

    def seek_position(self, track: int) -> float:
        """Arm x1 when parked over ``track``."""
        return self.tracks[track].center - TRACK_WIDTH / 2.0

    def is_adjacent_sector(self, prev_block: int, next_block: int) -> bool:
        """True when ``next_block`` is the sector right after ``prev_block`` on the same track."""
        t = self.track_of(prev_block)
        if self.track_of(next_block) != t:
            return False
        begin, end = self.track_range(t)
        if prev_block == end and next_block == begin:
            return True
        return prev_block + 1 == next_block
