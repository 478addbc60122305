from __future__ import annotations

from typing import Any, List, Optional, Sequence, Union

import numpy as np

from config import DiskConfigError, split_csv


ADDR_DESC_HELP = (
    "The address description must be a comma-separated list of length three, without spaces. "
    'For example, "10,100,0" would indicate that 10 addresses should be generated, with '
    "100 as the maximum value, and 0 as the minimum. A max of -1 means just use the highest "
    "possible value as the max address to generate."
)


def make_rng(seed: Optional[int]) -> np.random.Generator:
    return np.random.default_rng(None if seed is None else int(seed))


def parse_addr_desc(addr_desc: Union[str, Sequence[Any]]) -> tuple[int, int, int]:
    """Return (count, max, min) from a ``count,max,min`` descriptor."""
    parts = split_csv(addr_desc)
    if len(parts) != 3:
        raise DiskConfigError(f"Bad address description ({addr_desc}). {ADDR_DESC_HELP}")
    try:
        count, hi, lo = (int(p) for p in parts)
    except ValueError:
        raise DiskConfigError(f"Bad address description ({addr_desc}). {ADDR_DESC_HELP}") from None
    return count, hi, lo


def is_generated(addr: Union[str, Sequence[Any], None]) -> bool:
    parts = split_csv(addr)
    return not parts or parts == ["-1"]


def make_requests(
    addr: Union[str, Sequence[Any], None],
    addr_desc: Union[str, Sequence[Any]],
    max_block: int,
    rng: np.random.Generator,
) -> List[int]:
    """Resolve one request list.

    ``addr == "-1"`` means synthesize from ``addr_desc`` (count,max,min) with
    ``rng``; otherwise ``addr`` is the explicit comma-separated block list.
    """
    if is_generated(addr):
        count, hi, lo = parse_addr_desc(addr_desc)
        if hi == -1:
            hi = max_block
        if count < 0:
            raise DiskConfigError(f"address count must be non-negative, got {count}")
        if count == 0:
            return []
        if lo < 0 or lo > hi or hi > max_block:
            raise DiskConfigError(
                f"address range must satisfy 0 <= min <= max <= {max_block}, got min={lo} max={hi}"
            )
        draws = rng.integers(lo, hi, size=count, endpoint=True)
        return [int(x) for x in draws]

    out: List[int] = []
    for p in split_csv(addr):
        try:
            b = int(p)
        except ValueError:
            raise DiskConfigError(f"addresses must be integers, got {p!r}") from None
        if not 0 <= b <= max_block:
            raise DiskConfigError(f"address {b} out of range [0,{max_block}]")
        out.append(b)
    return out
