from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union
import json
import re
import numpy as np
from pathlib import Path

from .errors import AlmanacParseError
from .index_map import Interval, MappingRule, MappingStage

_MAP_HEADER = re.compile(r"^(.+?)\s+map:$")
_SEED_LINE = re.compile(r"^([^:\s]+):(.*)$")
U64_MAX = 2 ** 64 - 1

@dataclass
class Almanac:
    seeds: List[int]
    stages: List[MappingStage]

def _parse_ints(text: str, line_no: int, line: str) -> List[int]:
    out = []
    for tok in text.split():
        if not (tok.isascii() and tok.isdigit()):
            raise AlmanacParseError("expected an unsigned integer, got %r" % tok, line_no, line)
        value = int(tok)
        if value > U64_MAX:
            raise AlmanacParseError("%s does not fit in 64 unsigned bits" % tok, line_no, line)
        out.append(value)
    return out

def parse_almanac(text: str, overlap_policy: str = "reject") -> Almanac:
    """Parse the seed line and every '<label> map:' block, failing on anything unexpected."""
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise AlmanacParseError("missing seed line", 1, lines[0] if lines else "")
    m = _SEED_LINE.match(lines[0].strip())
    if m is None:
        raise AlmanacParseError("seed line must look like '<label>: n n ...'", 1, lines[0])
    seeds = _parse_ints(m.group(2), 1, lines[0])
    if not seeds:
        raise AlmanacParseError("seed line has no values", 1, lines[0])

    stages: List[MappingStage] = []
    name = None
    rules: List[MappingRule] = []
    header_no = 0

    def close_block():
        if name is None:
            return
        if not rules:
            raise AlmanacParseError("map block %r has no rules" % name, header_no, lines[header_no - 1])
        stages.append(MappingStage.build(name, rules, overlap_policy))

    for line_no, raw in enumerate(lines[1:], start=2):
        ln = raw.strip()
        if not ln:
            continue
        header = _MAP_HEADER.match(ln)
        if header is not None:
            close_block()
            name, rules, header_no = header.group(1), [], line_no
            continue
        if name is None:
            raise AlmanacParseError("rule line outside of a map block", line_no, raw)
        nums = _parse_ints(ln, line_no, raw)
        if len(nums) != 3:
            raise AlmanacParseError("rule line needs 'destination source length'", line_no, raw)
        rules.append(MappingRule.from_line(*nums))
    close_block()

    if not stages:
        raise AlmanacParseError("no map blocks found")
    return Almanac(seeds, stages)

def load_almanac(path: Union[str, Path], overlap_policy: str = "reject") -> Almanac:
    return parse_almanac(Path(path).read_text(encoding="utf-8"), overlap_policy)

def seeds_as_points(seeds: Sequence[int]) -> List[Interval]:
    return [Interval.from_length(s, 1) for s in seeds]

def seeds_as_ranges(seeds: Sequence[int]) -> List[Interval]:
    """Read seeds as (start, length) pairs: 79 14 55 13 -> [79, 93), [55, 68)."""
    if len(seeds) % 2:
        raise AlmanacParseError("seed ranges need an even number of values, got %d" % len(seeds))
    return [Interval.from_length(seeds[i], seeds[i + 1]) for i in range(0, len(seeds), 2)]

def intervals_to_array(spans: Sequence[Interval]) -> np.ndarray:
    return np.array([[iv.start, iv.end] for iv in spans], dtype=np.uint64).reshape(-1, 2)

def save_intervals_json(spans: Sequence[Interval], path: Union[str, Path]):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([[int(iv.start), int(iv.end)] for iv in spans], f, ensure_ascii=False, indent=2)

def save_trace_json(trace: Sequence[Tuple[str, List[Interval]]], path: Union[str, Path]):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    data = [{"stage": name, "intervals": [[iv.start, iv.end] for iv in spans]} for name, spans in trace]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

def save_intervals_npy(spans: Sequence[Interval], path: Union[str, Path]):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    np.save(str(path), intervals_to_array(spans))
