from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import PipelineConfig
from .errors import VerificationError
from .index_map import Interval, MappingStage, minimum_start, normalize_intervals
from .io_utils import parse_almanac, seeds_as_points, seeds_as_ranges
from .steps import brute_force_minimum, segment_pipeline

logger = logging.getLogger(__name__)

@dataclass
class PipelineResult:
    seeds: List[Interval]
    # interval set after every stage, in stage order
    trace: List[Tuple[str, List[Interval]]]
    final: List[Interval]
    answer: int

class AlmanacPipeline:
    def __init__(self, seeds: Sequence[int], stages: Sequence[MappingStage],
                 config: Optional[PipelineConfig] = None):
        self.cfg = config or PipelineConfig()
        self.seeds = list(seeds)
        self.stages = tuple(stages)

    @classmethod
    def from_text(cls, text: str, config: Optional[PipelineConfig] = None) -> "AlmanacPipeline":
        cfg = config or PipelineConfig()
        almanac = parse_almanac(text, cfg.stages.overlap_policy)
        return cls(almanac.seeds, almanac.stages, cfg)

    # -----------------------------
    # Seed sets
    # -----------------------------
    def seed_points(self) -> List[Interval]:
        return seeds_as_points(self.seeds)

    def seed_ranges(self) -> List[Interval]:
        return seeds_as_ranges(self.seeds)

    def seed_intervals(self) -> List[Interval]:
        mode = self.cfg.seeds.mode
        if mode == "points":
            return self.seed_points()
        if mode == "ranges":
            return self.seed_ranges()
        raise ValueError("unknown seed mode %r" % (mode,))

    # -----------------------------
    # Point path
    # -----------------------------
    def run_point(self, v: int) -> int:
        for stage in self.stages:
            v = stage.lookup(v)
        return v

    # -----------------------------
    # Interval path
    # -----------------------------
    def _step(self, intervals: Iterable[Interval], stage: MappingStage) -> List[Interval]:
        out = stage.lookup_intervals(intervals)
        if self.cfg.stages.merge_adjacent:
            return normalize_intervals(out)
        return [iv for iv in out if not iv.is_empty()]

    def run_intervals(self, seeds: Iterable[Interval]) -> List[Interval]:
        current = list(seeds)
        for stage in self.stages:
            current = self._step(current, stage)
        return current

    def answer(self, intervals: Iterable[Interval]) -> int:
        return minimum_start(intervals)

    def run(self, seeds: Optional[Iterable[Interval]] = None) -> PipelineResult:
        seeds = list(self.seed_intervals() if seeds is None else seeds)
        current = seeds
        trace = []
        for stage in self.stages:
            nxt = self._step(current, stage)
            logger.debug("stage %r: %d -> %d intervals", stage.name, len(current), len(nxt))
            trace.append((stage.name, nxt))
            current = nxt
        best = self.answer(current)
        logger.info("minimum final position %d from %d seed interval(s)", best, len(seeds))

        if self.cfg.verify.enabled:
            expected = brute_force_minimum(seeds, self.stages, self.cfg.verify.max_values)
            if expected != best:
                raise VerificationError(
                    "interval answer %d differs from enumerated answer %d" % (best, expected)
                )
            logger.info("verified against per-value enumeration")

        return PipelineResult(seeds=seeds, trace=trace, final=current, answer=best)

    def revise(self, seeds: Optional[Iterable[Interval]] = None) -> List[MappingStage]:
        """Derived pipeline: each stage restricted to what the seeds can reach."""
        seeds = self.seed_intervals() if seeds is None else seeds
        return segment_pipeline(seeds, self.stages)

def solve_part_one(text: str, config: Optional[PipelineConfig] = None) -> int:
    """Minimum final position over the individual seed values."""
    pipe = AlmanacPipeline.from_text(text, config)
    return min(pipe.run_point(s) for s in pipe.seeds)

def solve_part_two(text: str, config: Optional[PipelineConfig] = None) -> int:
    """Minimum final position over the (start, length) seed ranges."""
    pipe = AlmanacPipeline.from_text(text, config)
    return pipe.run(pipe.seed_ranges()).answer
