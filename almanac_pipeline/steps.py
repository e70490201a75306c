from __future__ import annotations
import logging
from typing import Iterable, List, Sequence

import numpy as np

from .errors import EmptyResultError, VerificationError
from .index_map import Interval, MappingRule, MappingStage, split_interval

logger = logging.getLogger(__name__)

INT64_MAX = int(np.iinfo(np.int64).max)

# -----------------------------
# Stage re-expression
# -----------------------------
def segment_stage(stage: MappingStage, previous: MappingStage) -> MappingStage:
    """Re-express `stage` over the destination ranges reachable from `previous`.

    For a stage rule [s0, s1) and a previous destination [d0, d1) the sub-rule
    covers [max(s0, d0), min(s1, d1)) with the stage rule's offset. Reachable
    values no stage rule covers become identity sub-rules.
    """
    rules = []
    for prev_rule in previous.rules:
        rules.extend(split_interval(prev_rule.destination, stage))
    return MappingStage(stage.name, tuple(rules))


def segment_pipeline(seeds: Iterable[Interval], stages: Sequence[MappingStage]) -> List[MappingStage]:
    """Derived pipeline whose every stage only holds the reachable sub-rules."""
    current = MappingStage("seeds", tuple(MappingRule(iv, iv) for iv in seeds if not iv.is_empty()))
    derived = []
    for stage in stages:
        current = segment_stage(stage, current)
        logger.debug("segmented %r: %d rules -> %d reachable sub-rules",
                     stage.name, len(stage.rules), len(current.rules))
        derived.append(current)
    return derived

# -----------------------------
# Per-value reference (small inputs only)
# -----------------------------
def brute_force_minimum(seeds: Iterable[Interval], stages: Sequence[MappingStage],
                        max_values: int = 1_000_000) -> int:
    """Enumerate every seed value through every stage. Only for verification."""
    seeds = [iv for iv in seeds if not iv.is_empty()]
    total = sum(iv.length() for iv in seeds)
    if total > max_values:
        raise VerificationError("brute force over %d values exceeds max_values=%d" % (total, max_values))
    if not seeds:
        raise EmptyResultError("no seed values to enumerate")
    # lookup_array works in int64; every value it can see is bounded by these ends
    bounds = [iv.end for iv in seeds]
    bounds += [max(r.source.end, r.destination.end) for stage in stages for r in stage.rules]
    if max(bounds) > INT64_MAX:
        raise VerificationError("brute force only supports values below 2**63, got %d" % max(bounds))
    best = None
    for iv in seeds:
        values = np.arange(iv.start, iv.end, dtype=np.int64)
        for stage in stages:
            values = stage.lookup_array(values)
        low = int(values.min())
        best = low if best is None else min(best, low)
    return best
