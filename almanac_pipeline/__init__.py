from .config import (
    SeedParams, StageParams, VerifyParams, PipelineConfig, load_config_yaml
)
from .errors import (
    AlmanacError, AlmanacParseError, RuleOverlapError, EmptyResultError, VerificationError
)
from .index_map import (
    Interval, MappingRule, MappingStage, normalize_intervals, minimum_start, find_overlaps,
    split_interval, split_intervals
)
from .steps import segment_stage, segment_pipeline, brute_force_minimum
from .pipeline import AlmanacPipeline, PipelineResult, solve_part_one, solve_part_two
from .plotting import plot_interval_flow
from .io_utils import (
    Almanac, parse_almanac, load_almanac, seeds_as_points, seeds_as_ranges,
    intervals_to_array, save_intervals_json, save_intervals_npy, save_trace_json
)
