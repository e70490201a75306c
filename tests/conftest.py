import sys
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

# Add the repo root to sys.path so we can import almanac_pipeline and cli
ROOT = Path(__file__).resolve().parent.parent
if ROOT.as_posix() not in sys.path:
    sys.path.insert(0, ROOT.as_posix())

EXAMPLE_ALMANAC = """\
seeds: 79 14 55 13

seed-to-soil map:
50 98 2
52 50 48

soil-to-fertilizer map:
0 15 37
37 52 2
39 0 15

fertilizer-to-water map:
49 53 8
0 11 42
42 0 7
57 7 4

water-to-light map:
88 18 7
18 25 70

light-to-temperature map:
45 77 23
81 45 19
68 64 13

temperature-to-humidity map:
0 69 1
1 0 69

humidity-to-location map:
60 56 37
56 93 4
"""


@pytest.fixture
def example_text():
    """The reference almanac: 4 seeds, 7 maps."""
    return EXAMPLE_ALMANAC


@pytest.fixture
def example_file(tmp_path: Path):
    path = tmp_path / "almanac.txt"
    path.write_text(EXAMPLE_ALMANAC, encoding="utf-8")
    return path
