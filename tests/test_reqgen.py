from __future__ import annotations

import pytest

from config import DiskConfigError
from reqgen import is_generated, make_requests, make_rng, parse_addr_desc


def test_explicit_list() -> None:
    assert make_requests("8, 11,2", "5,-1,0", 35, make_rng(0)) == [8, 11, 2]
    assert make_requests([1, 2], "5,-1,0", 35, make_rng(0)) == [1, 2]


def test_explicit_block_out_of_range() -> None:
    with pytest.raises(DiskConfigError):
        make_requests("8,36", "5,-1,0", 35, make_rng(0))
    with pytest.raises(DiskConfigError):
        make_requests("8,x", "5,-1,0", 35, make_rng(0))


def test_generated_uses_max_block_when_max_is_minus_one() -> None:
    reqs = make_requests("-1", "2000,-1,0", 35, make_rng(3))
    assert len(reqs) == 2000
    assert all(0 <= b <= 35 for b in reqs)
    assert max(reqs) == 35


def test_generated_bounds_are_inclusive() -> None:
    assert make_requests("-1", "6,10,10", 35, make_rng(1)) == [10] * 6
    reqs = make_requests("-1", "500,12,11", 35, make_rng(9))
    assert set(reqs) == {11, 12}


def test_same_seed_same_requests() -> None:
    a = make_requests("-1", "10,-1,0", 35, make_rng(42))
    b = make_requests("-1", "10,-1,0", 35, make_rng(42))
    assert a == b


def test_zero_count_descriptor_is_empty() -> None:
    assert make_requests("-1", "0,-1,0", 35, make_rng(0)) == []


@pytest.mark.parametrize("desc", ["5,10", "5,10,0,1", "a,b,c", "", "5,2,8", "-1,10,0", "5,40,0"])
def test_bad_descriptor_is_fatal(desc: str) -> None:
    with pytest.raises(DiskConfigError):
        make_requests("-1", desc, 35, make_rng(0))


def test_parse_addr_desc() -> None:
    assert parse_addr_desc("10,100,0") == (10, 100, 0)
    assert parse_addr_desc(["3", "-1", "2"]) == (3, -1, 2)


def test_is_generated() -> None:
    assert is_generated("-1")
    assert is_generated(None)
    assert not is_generated("4")
