from dataclasses import dataclass, field
from typing import Literal
import yaml

@dataclass
class SeedParams:
    mode: Literal["points", "ranges"] = "ranges"   # 'ranges' reads the seed line as (start, length) pairs

@dataclass
class StageParams:
    overlap_policy: Literal["reject", "first_wins"] = "reject"
    merge_adjacent: bool = True     # merge touching intervals between stages

@dataclass
class VerifyParams:
    enabled: bool = False           # cross-check against per-value enumeration
    max_values: int = 1_000_000

@dataclass
class PipelineConfig:
    log_level: str = "INFO"
    seeds: SeedParams = field(default_factory=SeedParams)
    stages: StageParams = field(default_factory=StageParams)
    verify: VerifyParams = field(default_factory=VerifyParams)

def load_config_yaml(path: str) -> PipelineConfig:
    """Load config from a YAML file into PipelineConfig dataclasses."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    def merge_dataclass(dc_cls, values):
        obj = dc_cls()
        for k, v in (values or {}).items():
            if hasattr(obj, k):
                if isinstance(getattr(obj, k), bool) and not isinstance(v, bool):
                    raise ValueError("%s.%s must be true or false, got %r" % (dc_cls.__name__, k, v))
                setattr(obj, k, v)
        return obj

    cfg = PipelineConfig(
        log_level=str(data.get("log_level", "INFO")).upper(),
        seeds=merge_dataclass(SeedParams, data.get("seeds")),
        stages=merge_dataclass(StageParams, data.get("stages")),
        verify=merge_dataclass(VerifyParams, data.get("verify")),
    )
    if cfg.seeds.mode not in ("points", "ranges"):
        raise ValueError("seeds.mode must be 'points' or 'ranges', got %r" % (cfg.seeds.mode,))
    return cfg
