"""
Fixed-width binning of variant positions along a genome.
"""

from pathlib import Path
from typing import Iterable, List, Tuple
import numpy as np
import pandas as pd
import structlog

from ..models.features import BinCount, BinSummary


SUMMARY_COLUMNS = ["window", "count", "start", "end", "midpoint"]


def _in_range(positions: Iterable[int], genome_length: int) -> Tuple[np.ndarray, int]:
    """Positions inside [0, genome_length) as an array, plus how many fell outside."""
    pos = list(positions)
    inside = [p for p in pos if 0 <= p < genome_length]
    return np.asarray(inside, dtype=np.int64), len(pos) - len(inside)


def window_count(genome_length: int, window_size: int) -> int:
    """Number of windows needed to cover [0, genome_length)."""
    if genome_length <= 0:
        raise ValueError("Genome length must be positive")
    if window_size <= 0:
        raise ValueError("Window size must be positive")
    return -(-genome_length // window_size)


def bin_positions(
    positions: Iterable[int],
    genome_length: int,
    window_size: int
) -> List[BinCount]:
    """
    Count positions in half-open windows covering [0, genome_length).

    Window ``i`` spans ``[i * window_size, min((i + 1) * window_size, genome_length))``.
    Positions below zero or at/after ``genome_length`` are not counted. Every
    window is returned, in order, including those with a zero count. The
    midpoint is ``start + window_size / 2`` for every window, the last one
    included even when it is shorter.

    Args:
        positions: Genomic positions, in any order
        genome_length: Genome length in bp
        window_size: Window width in bp

    Returns:
        One BinCount per window, ascending by start
    """
    n_windows = window_count(genome_length, window_size)
    in_range, _ = _in_range(positions, genome_length)
    counts = np.bincount(in_range // window_size, minlength=n_windows)

    bins = []
    for i in range(n_windows):
        start = i * window_size
        end = min(start + window_size, genome_length)
        bins.append(BinCount(
            window_label=f"[{start},{end})",
            start=start,
            end=end,
            midpoint=start + window_size / 2,
            count=int(counts[i])
        ))
    return bins


def count_in_range(positions: Iterable[int], genome_length: int) -> Tuple[int, int]:
    """Return (positions inside the genome, positions outside it)."""
    inside, outside = _in_range(positions, genome_length)
    return int(inside.size), outside


def summarize_counts(bins: List[BinCount], quantile: float = 0.95) -> BinSummary:
    """
    Median and upper quantile of the per-window counts.

    The quantile uses linear interpolation between order statistics
    (rank ``quantile * (n - 1)``). With no windows both values are 0.
    """
    counts = np.asarray([b.count for b in bins], dtype=float)
    if counts.size == 0:
        return BinSummary(median=0.0, top_quantile=0.0, quantile=quantile,
                          max_count=0, total=0)
    return BinSummary(
        median=float(np.median(counts)),
        top_quantile=float(np.quantile(counts, quantile)),
        quantile=quantile,
        max_count=int(counts.max()),
        total=int(counts.sum())
    )


def bins_to_frame(bins: List[BinCount]) -> pd.DataFrame:
    """Convert bins to a table with one row per window."""
    rows = [
        {
            "window": b.window_label,
            "count": b.count,
            "start": b.start,
            "end": b.end,
            "midpoint": b.midpoint,
        }
        for b in bins
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def write_bin_counts(
    bins: List[BinCount],
    output_file: Path,
    logger: structlog.BoundLogger
) -> Path:
    """Write the per-window table as CSV, replacing any existing file."""
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    df = bins_to_frame(bins)
    df.to_csv(output_file, index=False)
    logger.info(f"Bin counts saved to {output_file}",
                output_file=str(output_file),
                n_windows=len(df))
    return output_file


def read_bin_counts(input_file: Path) -> List[BinCount]:
    """
    Read a per-window table written by write_bin_counts.

    Raises:
        FileNotFoundError: The table does not exist
        ValueError: The table is missing columns or holds invalid values
    """
    input_file = Path(input_file)
    if not input_file.exists():
        raise FileNotFoundError(f"Bin counts file not found: {input_file}")
    try:
        df = pd.read_csv(input_file)
    except pd.errors.EmptyDataError:
        raise ValueError(f"Bin counts file {input_file} is empty") from None
    except pd.errors.ParserError as e:
        raise ValueError(f"Bin counts file {input_file} could not be parsed: {e}") from e

    missing = [col for col in SUMMARY_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(
            f"Bin counts file {input_file} is missing columns: {', '.join(missing)}"
        )

    return [
        BinCount(
            window_label=str(row["window"]),
            start=int(row["start"]),
            end=int(row["end"]),
            midpoint=float(row["midpoint"]),
            count=int(row["count"])
        )
        for _, row in df.iterrows()
    ]
