#!/usr/bin/env python3
"""
Shared fixtures for the variant density tests.
"""

import gzip
import sys
from pathlib import Path

import pytest
import structlog

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


VCF_HEADER = (
    "##fileformat=VCFv4.2\n"
    "##contig=<ID=TEST0001,length=1000>\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\n"
)

VCF_RECORDS = [
    ("TEST0001", 10, "A", "G"),
    ("TEST0001", 399, "C", "T"),
    ("TEST0001", 400, "AT", "A"),       # deletion
    ("TEST0001", 450, "G", "GTT"),      # insertion
    ("TEST0001", 799, "T", "C"),
    ("TEST0001", 950, "G", "A,C"),      # multi-allelic SNV
    ("TEST0001", 1200, "A", "T"),       # beyond the genome
]


def write_vcf(path: Path, records=VCF_RECORDS, compress: bool = False) -> Path:
    """Write a minimal VCF with the given (chrom, pos, ref, alt) records."""
    lines = [VCF_HEADER]
    for chrom, pos, ref, alt in records:
        lines.append(f"{chrom}\t{pos}\t.\t{ref}\t{alt}\t50\tPASS\t.\n")
    text = "".join(lines)
    if compress:
        with gzip.open(path, "wt") as handle:
            handle.write(text)
    else:
        path.write_text(text)
    return path


def _feature(key: str, location: str, qualifiers) -> str:
    lines = [f"     {key:<16}{location}"]
    for name, value in qualifiers:
        lines.append(f"{' ' * 21}/{name}=\"{value}\"")
    return "\n".join(lines)


def write_genbank(path: Path, cds=None, length: int = 120) -> Path:
    """
    Write a single-record GenBank file.

    ``cds`` is a list of (location, qualifiers) pairs.
    """
    if cds is None:
        cds = [
            ("1..30", [("gene", "LD008"), ("product", "protein one")]),
            ("complement(41..70)", [("gene", "LD010")]),
            ("81..110", [("locus_tag", "TEST_003")]),
        ]
    features = [_feature("source", f"1..{length}", [("organism", "synthetic construct")])]
    features.append(_feature("gene", "1..30", [("gene", "LD008")]))
    features.extend(_feature("CDS", loc, quals) for loc, quals in cds)

    sequence = "a" * length
    origin = []
    for offset in range(0, length, 60):
        chunk = sequence[offset:offset + 60]
        groups = " ".join(chunk[i:i + 10] for i in range(0, len(chunk), 10))
        origin.append(f"{offset + 1:>9} {groups}")

    text = "\n".join([
        f"LOCUS       {'TEST0001':<16} {length:>11} bp    {'DNA':<6}  {'linear':<8} VRL 01-JAN-2020",
        "DEFINITION  Synthetic test genome.",
        "ACCESSION   TEST0001",
        "VERSION     TEST0001.1",
        "KEYWORDS    .",
        "SOURCE      synthetic construct",
        "  ORGANISM  synthetic construct",
        "            other sequences.",
        "FEATURES             Location/Qualifiers",
        *features,
        "ORIGIN",
        *origin,
        "//",
        "",
    ])
    path.write_text(text)
    return path


@pytest.fixture
def logger():
    """Create a test logger."""
    return structlog.get_logger()


@pytest.fixture
def vcf_file(tmp_path):
    """A small plain-text VCF."""
    return write_vcf(tmp_path / "variants.vcf")


@pytest.fixture
def genbank_file(tmp_path):
    """A small GenBank file with three CDS features."""
    return write_genbank(tmp_path / "genome.gb")
