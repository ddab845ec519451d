#!/usr/bin/env python3
"""
Tests for window binning and summary statistics.
"""

import math
import random

import pandas as pd
import pytest

from variant_density.core.binning import (
    bin_positions,
    bins_to_frame,
    count_in_range,
    read_bin_counts,
    summarize_counts,
    window_count,
    write_bin_counts,
)


def test_two_full_windows():
    """Positions on both edges of each window land in that window."""
    bins = bin_positions([0, 399, 400, 799], genome_length=800, window_size=400)

    assert len(bins) == 2
    assert [b.count for b in bins] == [2, 2]
    assert [b.start for b in bins] == [0, 400]
    assert [b.end for b in bins] == [400, 800]
    assert [b.window_label for b in bins] == ["[0,400)", "[400,800)"]


def test_empty_positions_give_zero_windows():
    bins = bin_positions([], genome_length=800, window_size=400)

    assert len(bins) == 2
    assert all(b.count == 0 for b in bins)

    summary = summarize_counts(bins)
    assert summary.median == 0
    assert summary.top_quantile == 0
    assert summary.max_count == 0
    assert summary.total == 0


def test_partial_last_window():
    """The last window is shortened but its midpoint is not adjusted."""
    bins = bin_positions([850, 999], genome_length=1000, window_size=400)

    assert [b.start for b in bins] == [0, 400, 800]
    assert bins[-1].end == 1000
    assert bins[-1].end - bins[-1].start == 200
    assert bins[-1].midpoint == 1000.0
    assert bins[-1].count == 2


def test_midpoints_use_real_division():
    bins = bin_positions([], genome_length=9, window_size=3)
    assert [b.midpoint for b in bins] == [1.5, 4.5, 7.5]


def test_out_of_range_positions_are_dropped():
    positions = [-5, -1, 0, 799, 800, 1500]
    bins = bin_positions(positions, genome_length=800, window_size=400)

    assert sum(b.count for b in bins) == 2
    assert count_in_range(positions, 800) == (2, 4)


def test_positions_beyond_int64_are_dropped():
    positions = [1, 2**63, 2**70, -(2**64)]
    bins = bin_positions(positions, genome_length=800, window_size=400)

    assert [b.count for b in bins] == [1, 0]
    assert count_in_range(positions, 800) == (1, 3)


def test_windows_cover_genome_without_gaps():
    rng = random.Random(7)
    for _ in range(50):
        genome_length = rng.randint(1, 5000)
        window_size = rng.randint(1, 700)
        positions = [rng.randint(-100, genome_length + 100) for _ in range(200)]

        bins = bin_positions(positions, genome_length, window_size)

        assert len(bins) == math.ceil(genome_length / window_size)
        assert bins[0].start == 0
        assert bins[-1].end == genome_length
        for previous, current in zip(bins, bins[1:]):
            assert previous.end == current.start
        expected = sum(1 for p in positions if 0 <= p < genome_length)
        assert sum(b.count for b in bins) == expected


def test_binning_is_order_independent_and_repeatable():
    positions = [5, 900, 410, 12, 399, 401, 650]
    first = bin_positions(positions, 1000, 400)
    again = bin_positions(positions, 1000, 400)
    shuffled = bin_positions(list(reversed(positions)), 1000, 400)

    assert first == again
    assert first == shuffled


def test_window_larger_than_genome():
    bins = bin_positions([0, 99], genome_length=100, window_size=400)

    assert len(bins) == 1
    assert bins[0].end == 100
    assert bins[0].midpoint == 200.0
    assert bins[0].count == 2


@pytest.mark.parametrize("genome_length,window_size", [(0, 400), (800, 0), (-1, 10)])
def test_invalid_dimensions(genome_length, window_size):
    with pytest.raises(ValueError):
        bin_positions([1, 2], genome_length, window_size)


def test_window_count():
    assert window_count(800, 400) == 2
    assert window_count(1000, 400) == 3
    assert window_count(151000, 400) == 378


def test_summary_uses_linear_interpolation():
    """Counts 0..9 give median 4.5 and 0.95 quantile 8.55."""
    bins = bin_positions(
        [w * 10 for w in range(10) for _ in range(w)],
        genome_length=100,
        window_size=10
    )
    assert [b.count for b in bins] == list(range(10))

    summary = summarize_counts(bins)
    assert summary.median == pytest.approx(4.5)
    assert summary.top_quantile == pytest.approx(8.55)
    assert summary.quantile == 0.95
    assert summary.max_count == 9
    assert summary.total == 45


def test_summary_of_no_windows():
    summary = summarize_counts([])
    assert summary.median == 0
    assert summary.top_quantile == 0


def test_bins_to_frame_columns():
    bins = bin_positions([1, 401], 800, 400)
    df = bins_to_frame(bins)

    assert list(df.columns) == ["window", "count", "start", "end", "midpoint"]
    assert df["count"].tolist() == [1, 1]
    assert df["midpoint"].tolist() == [200.0, 600.0]


def test_bins_to_frame_empty():
    df = bins_to_frame([])
    assert df.empty
    assert list(df.columns) == ["window", "count", "start", "end", "midpoint"]


def test_write_and_read_bin_counts(tmp_path, logger):
    bins = bin_positions([1, 2, 450, 999], 1000, 400)
    output_file = tmp_path / "out" / "bin_counts.csv"

    write_bin_counts(bins, output_file, logger)

    df = pd.read_csv(output_file)
    assert len(df) == 3
    assert df.iloc[0]["window"] == "[0,400)"
    assert df.iloc[2]["end"] == 1000
    assert read_bin_counts(output_file) == bins


def test_write_bin_counts_overwrites(tmp_path, logger):
    output_file = tmp_path / "bin_counts.csv"
    output_file.write_text("stale\n")

    write_bin_counts(bin_positions([], 800, 400), output_file, logger)

    assert pd.read_csv(output_file)["count"].tolist() == [0, 0]


def test_read_bin_counts_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="missing.csv"):
        read_bin_counts(tmp_path / "missing.csv")


def test_read_bin_counts_missing_columns(tmp_path):
    table = tmp_path / "bad.csv"
    table.write_text("window,count\n[0,400),3\n")

    with pytest.raises(ValueError, match="missing columns"):
        read_bin_counts(table)
