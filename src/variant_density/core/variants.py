"""
Variant loading from VCF files.
"""

from pathlib import Path
from typing import Iterable, List
import gzip
import structlog

from ..models.features import VariantRecord


def _open_vcf(vcf_file: Path):
    """Open a plain or gzip-compressed VCF file for reading text."""
    if vcf_file.suffix in (".gz", ".bgz"):
        return gzip.open(vcf_file, "rt")
    return open(vcf_file, "r")


def load_variants(vcf_file: Path, logger: structlog.BoundLogger) -> List[VariantRecord]:
    """
    Read every variant record from a VCF file.

    Args:
        vcf_file: Path to a .vcf or .vcf.gz file
        logger: Logger instance

    Returns:
        Variant records in file order

    Raises:
        FileNotFoundError: The VCF file does not exist
        ValueError: The file is not a readable VCF
    """
    vcf_file = Path(vcf_file)
    logger.info("Reading variants", vcf_file=str(vcf_file))

    if not vcf_file.exists():
        raise FileNotFoundError(f"VCF file not found: {vcf_file}")

    records = []
    try:
        with _open_vcf(vcf_file) as vcf_in:
            for line_number, line in enumerate(vcf_in, start=1):
                if line.startswith("#") or not line.strip():
                    continue
                fields = line.rstrip("\n").split("\t")
                if len(fields) < 5:
                    raise ValueError(
                        f"Malformed VCF record in {vcf_file} at line {line_number}: "
                        f"expected at least 5 columns, found {len(fields)}"
                    )
                try:
                    position = int(fields[1])
                except ValueError:
                    raise ValueError(
                        f"Malformed VCF record in {vcf_file} at line {line_number}: "
                        f"POS '{fields[1]}' is not an integer"
                    ) from None
                alt = [] if fields[4] == "." else fields[4].split(",")
                records.append(VariantRecord(
                    chrom=fields[0],
                    position=position,
                    ref=fields[3],
                    alt=alt
                ))
    except (gzip.BadGzipFile, UnicodeDecodeError) as e:
        raise ValueError(f"VCF file {vcf_file} could not be decoded: {e}") from e

    if not records:
        logger.warning("No variant records found", vcf_file=str(vcf_file))
    else:
        logger.info(f"Read {len(records)} variant records",
                    vcf_file=str(vcf_file),
                    n_records=len(records))
    return records


def filter_variants(
    records: Iterable[VariantRecord],
    snv_only: bool,
    logger: structlog.BoundLogger
) -> List[VariantRecord]:
    """
    Select the variants to count.

    All variant types are counted unless ``snv_only`` is set.
    """
    records = list(records)
    if not snv_only:
        logger.info("Counting all variant types", n_records=len(records))
        return records

    snvs = [record for record in records if record.is_snv]
    logger.info("Filtered variants to SNVs",
                n_records=len(records),
                n_snvs=len(snvs))
    return snvs


def extract_positions(records: Iterable[VariantRecord]) -> List[int]:
    """Return the genomic position of each record."""
    return [record.position for record in records]
