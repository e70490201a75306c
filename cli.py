#!/usr/bin/env python3
import argparse, json, logging, sys
from pathlib import Path

from almanac_pipeline import (
    PipelineConfig, load_config_yaml, AlmanacPipeline, AlmanacError, plot_interval_flow,
    save_intervals_json, save_intervals_npy, save_trace_json
)

logger = logging.getLogger("almanac_pipeline.cli")

def build_argparser():
    ap = argparse.ArgumentParser(description="Almanac interval remapping pipeline")
    ap.add_argument("almanac", type=str, help="Text file with the seed line and '<label> map:' blocks")
    ap.add_argument("--part", type=int, choices=(1, 2), default=0,
                    help="1: seeds are single values, 2: seeds are (start, length) pairs")
    ap.add_argument("--config", type=str, default="", help="YAML config file (optional)")
    ap.add_argument("--overlap-policy", choices=("reject", "first_wins"), default=None,
                    help="What to do when rules of one map overlap")
    ap.add_argument("--no-merge", action="store_true", help="Keep adjacent intervals separate between stages")
    ap.add_argument("--verify", action="store_true", help="Cross-check against per-value enumeration")
    ap.add_argument("--output-dir", type=str, default="", help="Directory to store results")
    ap.add_argument("--write-trace", action="store_true", help="Save the interval set after every stage")
    ap.add_argument("--plot", action="store_true", help="Show plots interactively")
    ap.add_argument("--save-plots", action="store_true", help="Save plots as PNGs in output-dir")
    ap.add_argument("--log-level", type=str, default="", help="Override log level (DEBUG, INFO, ...)")
    return ap

def main(argv=None):
    args = build_argparser().parse_args(argv)

    if args.config:
        cfg = load_config_yaml(args.config)
    else:
        cfg = PipelineConfig()

    if args.part == 1:
        cfg.seeds.mode = "points"
    elif args.part == 2:
        cfg.seeds.mode = "ranges"
    if args.overlap_policy:
        cfg.stages.overlap_policy = args.overlap_policy
    if args.no_merge:
        cfg.stages.merge_adjacent = False
    if args.verify:
        cfg.verify.enabled = True
    if args.log_level:
        cfg.log_level = args.log_level.upper()

    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        pipe = AlmanacPipeline.from_text(Path(args.almanac).read_text(encoding="utf-8"), cfg)
        res = pipe.run()
    except AlmanacError as exc:
        logger.error("%s", exc)
        return 1

    if args.output_dir:
        out_dir = Path(args.output_dir); out_dir.mkdir(parents=True, exist_ok=True)
        save_intervals_json(res.final, out_dir / "final_intervals.json")
        save_intervals_npy(res.final, out_dir / "final_intervals.npy")
        if args.write_trace:
            save_trace_json(res.trace, out_dir / "trace.json")

    # Plots
    if args.plot or (args.save_plots and args.output_dir):
        plot_interval_flow(
            [("seeds", res.seeds)] + res.trace,
            title="Interval sets per stage (%s mode)" % cfg.seeds.mode,
            show=args.plot,
            save_path=str(Path(args.output_dir) / "plot_interval_flow.png") if args.save_plots and args.output_dir else None
        )

    # Summary
    summary = {
        "answer": int(res.answer),
        "mode": cfg.seeds.mode,
        "seed_intervals": len(res.seeds),
        "stages": len(pipe.stages),
        "final_intervals": len(res.final),
    }
    print(json.dumps(summary))
    return 0

if __name__ == "__main__":
    sys.exit(main())
