from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .errors import EmptyResultError, RuleOverlapError

logger = logging.getLogger(__name__)

OVERLAP_POLICIES = ("reject", "first_wins")


@dataclass(frozen=True)
class Interval:
    """Half-open integer range [start, end). start == end is the empty interval."""
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError("Interval bounds must be non-negative: [%d, %d)" % (self.start, self.end))
        if self.start > self.end:
            raise ValueError("Interval start (%d) must be <= end (%d)" % (self.start, self.end))

    @staticmethod
    def from_length(start: int, length: int) -> "Interval":
        return Interval(start, start + length)

    def __str__(self) -> str:
        return "[%d, %d)" % (self.start, self.end)

    def length(self) -> int:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, v: int) -> bool:
        return self.start <= v < self.end

    def intersect(self, other: "Interval") -> "Interval":
        s = max(self.start, other.start)
        e = min(self.end, other.end)
        if e <= s:
            # disjoint: clamp to an empty interval instead of a reversed one
            return Interval(s, s)
        return Interval(s, e)

    def shift(self, offset: int) -> "Interval":
        return Interval(self.start + offset, self.end + offset)


def normalize_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Drop empties, sort, and merge overlapping or touching intervals."""
    xs = sorted((iv for iv in intervals if not iv.is_empty()), key=lambda iv: (iv.start, iv.end))
    if not xs:
        return []
    merged = []
    cs, ce = xs[0].start, xs[0].end
    for iv in xs[1:]:
        if iv.start <= ce:
            ce = max(ce, iv.end)
        else:
            merged.append(Interval(cs, ce))
            cs, ce = iv.start, iv.end
    merged.append(Interval(cs, ce))
    return merged


def minimum_start(intervals: Iterable[Interval]) -> int:
    starts = [iv.start for iv in intervals if not iv.is_empty()]
    if not starts:
        raise EmptyResultError("no positions left after the final stage")
    return min(starts)


@dataclass(frozen=True)
class MappingRule:
    """Translate every value of `source` by a fixed offset into `destination`."""
    source: Interval
    destination: Interval

    def __post_init__(self):
        if self.source.length() != self.destination.length():
            raise ValueError(
                "rule source %s and destination %s differ in length" % (self.source, self.destination)
            )

    @staticmethod
    def from_line(destination_start: int, source_start: int, length: int) -> "MappingRule":
        return MappingRule(
            Interval.from_length(source_start, length),
            Interval.from_length(destination_start, length),
        )

    def __str__(self) -> str:
        return "%s -> %s" % (self.source, self.destination)

    @property
    def offset(self) -> int:
        return self.destination.start - self.source.start

    def translate(self, v: int) -> Optional[int]:
        if self.source.contains(v):
            return v + self.offset
        return None

    def translate_interval(self, iv: Interval) -> Optional[Tuple[Interval, Interval, Interval]]:
        """Split `iv` against this rule.

        Returns None when nothing of `iv` falls in `source`, otherwise
        (translated overlap, uncovered left part, uncovered right part).
        The left and right parts may be empty.
        """
        overlap = iv.intersect(self.source)
        if overlap.is_empty():
            return None
        left = Interval(iv.start, overlap.start)
        right = Interval(overlap.end, max(overlap.end, iv.end))
        return overlap.shift(self.offset), left, right


def find_overlaps(rules: Iterable[MappingRule]) -> List[Tuple[MappingRule, MappingRule]]:
    """Pairs of rules (in declaration order) whose non-empty sources overlap."""
    indexed = sorted(
        ((i, r) for i, r in enumerate(rules) if not r.source.is_empty()),
        key=lambda t: t[1].source.start,
    )
    pairs = []
    active: List[Tuple[int, MappingRule]] = []
    for i, rule in indexed:
        active = [(j, r) for (j, r) in active if r.source.end > rule.source.start]
        for j, other in active:
            pairs.append((other, rule) if j < i else (rule, other))
        active.append((i, rule))
    return pairs


@dataclass(frozen=True)
class MappingStage:
    """One named layer of rules, e.g. "seed-to-soil". Unmatched values pass through."""
    name: str
    rules: Tuple[MappingRule, ...]

    @staticmethod
    def build(name: str, rules: Iterable[MappingRule], overlap_policy: str = "reject") -> "MappingStage":
        if overlap_policy not in OVERLAP_POLICIES:
            raise ValueError("unknown overlap policy %r" % (overlap_policy,))
        stage = MappingStage(name, tuple(rules))
        overlaps = find_overlaps(stage.rules)
        if overlaps:
            first, second = overlaps[0]
            if overlap_policy == "reject":
                raise RuleOverlapError(name, first, second)
            logger.warning(
                "stage %r: %d overlapping rule pair(s), first declared rule wins", name, len(overlaps)
            )
        return stage

    def lookup(self, v: int) -> int:
        for rule in self.rules:
            out = rule.translate(v)
            if out is not None:
                return out
        return v

    def lookup_array(self, values: np.ndarray) -> np.ndarray:
        """Vectorised lookup; same first-match semantics as lookup()."""
        values = np.asarray(values, dtype=np.int64)
        out = values.copy()
        done = np.zeros(values.shape, dtype=bool)
        for rule in self.rules:
            hit = ~done & (values >= rule.source.start) & (values < rule.source.end)
            out[hit] = values[hit] + rule.offset
            done |= hit
        return out

    def lookup_intervals(self, intervals: Iterable[Interval]) -> List[Interval]:
        return split_intervals(intervals, self)


# -----------------------------
# Range splitting
# -----------------------------
def split_interval(iv: Interval, stage: MappingStage) -> List[MappingRule]:
    """Partition `iv` against the rules of `stage`.

    Each returned rule maps one piece of `iv` to where the stage sends it:
    pieces covered by a stage rule carry that rule's offset, uncovered
    pieces map to themselves. The sources partition `iv` exactly and are
    returned sorted by start.
    """
    if iv.is_empty():
        return []
    pieces: List[MappingRule] = []
    pending = [iv]
    for rule in stage.rules:
        if not pending:
            break
        uncovered = []
        for part in pending:
            res = rule.translate_interval(part)
            if res is None:
                uncovered.append(part)
                continue
            out, left, right = res
            pieces.append(MappingRule(out.shift(-rule.offset), out))
            # remainders are re-tested against the later rules
            for rest in (left, right):
                if not rest.is_empty():
                    uncovered.append(rest)
        pending = uncovered
    # pass-through
    pieces.extend(MappingRule(part, part) for part in pending)
    pieces.sort(key=lambda r: r.source.start)
    return pieces


def split_intervals(intervals: Iterable[Interval], stage: MappingStage) -> List[Interval]:
    out = []
    for iv in intervals:
        out.extend(piece.destination for piece in split_interval(iv, stage))
    return out

