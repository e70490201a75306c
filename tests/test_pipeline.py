"""
Tests for almanac_pipeline.pipeline against the reference almanac.
"""

import pytest

from almanac_pipeline import (
    AlmanacPipeline,
    EmptyResultError,
    Interval,
    PipelineConfig,
    VerificationError,
    solve_part_one,
    solve_part_two,
)


@pytest.fixture
def pipe(example_text):
    return AlmanacPipeline.from_text(example_text)


class TestPointPath:
    def test_seed_79_through_first_stage(self, pipe):
        assert pipe.stages[0].name == "seed-to-soil"
        assert pipe.stages[0].lookup(79) == 81

    def test_reference_seed_locations(self, pipe):
        assert [pipe.run_point(s) for s in pipe.seeds] == [82, 43, 86, 35]

    def test_part_one(self, example_text):
        assert solve_part_one(example_text) == 35


class TestIntervalPath:
    def test_part_two(self, example_text):
        assert solve_part_two(example_text) == 46

    def test_seed_ranges(self, pipe):
        assert pipe.seed_ranges() == [Interval(79, 93), Interval(55, 68)]

    def test_run_uses_configured_mode(self, example_text):
        cfg = PipelineConfig()
        cfg.seeds.mode = "points"
        res = AlmanacPipeline.from_text(example_text, cfg).run()
        assert res.answer == 35
        assert res.seeds == [Interval(s, s + 1) for s in (79, 14, 55, 13)]

    def test_single_value_interval_matches_point_path(self, pipe):
        for v in range(0, 110):
            final = pipe.run_intervals([Interval(v, v + 1)])
            assert final == [Interval(pipe.run_point(v), pipe.run_point(v) + 1)]

    def test_answer_is_minimum_over_every_seed_value(self, pipe):
        seeds = pipe.seed_ranges()
        expected = min(pipe.run_point(v) for iv in seeds for v in range(iv.start, iv.end))
        assert pipe.answer(pipe.run_intervals(seeds)) == expected

    def test_trace_has_one_entry_per_stage(self, pipe):
        res = pipe.run()
        assert [name for name, _ in res.trace] == [s.name for s in pipe.stages]
        assert res.trace[-1][1] == res.final

    def test_merging_does_not_change_answer(self, example_text):
        cfg = PipelineConfig()
        cfg.stages.merge_adjacent = False
        unmerged = AlmanacPipeline.from_text(example_text, cfg).run()
        merged = AlmanacPipeline.from_text(example_text).run()
        assert unmerged.answer == merged.answer == 46
        assert len(unmerged.final) >= len(merged.final)

    def test_value_count_preserved_without_merging(self, example_text):
        cfg = PipelineConfig()
        cfg.stages.merge_adjacent = False
        pipe = AlmanacPipeline.from_text(example_text, cfg)
        res = pipe.run()
        assert sum(iv.length() for iv in res.final) == 27

    def test_verify_enabled(self, example_text):
        cfg = PipelineConfig()
        cfg.verify.enabled = True
        assert AlmanacPipeline.from_text(example_text, cfg).run().answer == 46

    def test_empty_seed_ranges_is_error(self, example_text):
        text = example_text.replace("seeds: 79 14 55 13", "seeds: 79 0 55 0")
        with pytest.raises(EmptyResultError):
            solve_part_two(text)

    def test_values_beyond_int64_use_interval_path(self):
        text = "seeds: 18446744073709551000 3\n\na-to-b map:\n0 18446744073709551001 1\n"
        pipe = AlmanacPipeline.from_text(text)
        assert pipe.run().answer == 0

    def test_verify_refuses_values_beyond_int64(self):
        text = "seeds: 18446744073709551000 3\n\na-to-b map:\n0 18446744073709551001 1\n"
        cfg = PipelineConfig()
        cfg.verify.enabled = True
        with pytest.raises(VerificationError):
            AlmanacPipeline.from_text(text, cfg).run()

    def test_unknown_seed_mode(self, example_text):
        cfg = PipelineConfig()
        cfg.seeds.mode = "point"
        with pytest.raises(ValueError):
            AlmanacPipeline.from_text(example_text, cfg).run()

    def test_reparse_is_idempotent(self, example_text):
        a = AlmanacPipeline.from_text(example_text)
        b = AlmanacPipeline.from_text(example_text)
        assert a.stages == b.stages
        assert a.run().answer == b.run().answer


class TestRevise:
    def test_revise_agrees_with_run(self, pipe):
        derived = pipe.revise()
        assert [s.name for s in derived] == [s.name for s in pipe.stages]
        assert min(r.destination.start for r in derived[-1].rules) == pipe.run().answer

    def test_revise_leaves_pipeline_unchanged(self, pipe):
        before = pipe.stages
        pipe.revise()
        assert pipe.stages == before
