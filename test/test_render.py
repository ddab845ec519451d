#!/usr/bin/env python3
"""
Tests for drawing and compositing the figure.
"""

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pytest

from variant_density.core.binning import bin_positions, summarize_counts
from variant_density.core.charts import (
    build_annotation_chart,
    build_density_chart,
    place_region_labels,
)
from variant_density.core.render import (
    draw_annotation_chart,
    draw_density_chart,
    render_figure,
)
from variant_density.models.features import CDSFeature, RegionDefinition


@pytest.fixture
def charts():
    bins = bin_positions([5, 10, 4000, 4100, 9000], genome_length=12000, window_size=400)
    summary = summarize_counts(bins)
    regions = place_region_labels(
        [RegionDefinition(label="Region1", start=3000, end=5000, label_x=3500,
                          label_y_fraction=0.9)],
        summary.max_count
    )
    features = [
        CDSFeature(start=100, end=2000, strand="+", gene_name="LD008", highlight=True),
        CDSFeature(start=2500, end=6000, strand="-", gene_name="LD009"),
    ]
    density = build_density_chart(bins, regions, summary, 12000, 400)
    annotation = build_annotation_chart(features, regions, 12000)
    return density, annotation


def test_draw_density_chart(charts):
    density, _ = charts
    fig, ax = plt.subplots()
    try:
        draw_density_chart(ax, density)

        assert len(ax.patches) == len(density.bars) + len(density.spans)
        assert ax.get_xlim() == (0.0, 12000.0)
        assert [t.get_text() for t in ax.texts] == ["Region1"]
        assert list(ax.get_xticks()) == [0, 5000, 10000]
        assert ax.get_ylabel() == "Mutations per Kb"
    finally:
        plt.close(fig)


def test_draw_annotation_chart(charts):
    _, annotation = charts
    fig, ax = plt.subplots()
    try:
        draw_annotation_chart(ax, annotation)

        assert list(ax.get_yticks()) == [-1, 1]
        assert [t.get_text() for t in ax.get_yticklabels()] == ["-", "+"]
        assert ax.get_ylabel() == ""
    finally:
        plt.close(fig)


@pytest.mark.parametrize("name", ["figure.pdf", "figure.png"])
def test_render_figure_writes_file(charts, tmp_path, logger, name):
    density, annotation = charts
    output_file = tmp_path / "plots" / name

    result = render_figure(density, annotation, output_file, logger)

    assert result == output_file
    assert output_file.exists()
    assert output_file.stat().st_size > 0


def test_render_figure_canvas_and_ratio(charts, tmp_path, logger, mocker):
    density, annotation = charts
    subplots = mocker.spy(plt, "subplots")

    render_figure(density, annotation, tmp_path / "figure.png", logger,
                  figsize=(16, 5), height_ratios=(4, 1))

    _, kwargs = subplots.call_args
    assert kwargs["figsize"] == (16, 5)
    assert kwargs["gridspec_kw"] == {"height_ratios": [4, 1]}


def test_render_empty_charts(tmp_path, logger):
    bins = bin_positions([], 800, 400)
    summary = summarize_counts(bins)
    density = build_density_chart(bins, [], summary, 800, 400)
    annotation = build_annotation_chart([], [], 800)

    output_file = render_figure(density, annotation, tmp_path / "empty.pdf", logger)

    assert output_file.exists()
