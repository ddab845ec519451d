"""
CDS feature loading from GenBank annotations.
"""

from pathlib import Path
from typing import Iterable, List, Optional
from Bio import SeqIO
import structlog

from ..models.features import CDSFeature


def _strand_symbol(strand: Optional[int]) -> str:
    if strand == 1:
        return "+"
    if strand == -1:
        return "-"
    return "."


def _gene_name(qualifiers: dict) -> Optional[str]:
    """Gene name from the /gene qualifier, falling back to /locus_tag."""
    for key in ("gene", "locus_tag"):
        values = qualifiers.get(key)
        if values:
            return values[0]
    return None


def load_cds_features(
    genbank_file: Path,
    highlighted_genes: Iterable[str],
    logger: structlog.BoundLogger
) -> List[CDSFeature]:
    """
    Read the CDS features of every record in a GenBank file.

    Coordinates are 1-based and inclusive. Features spanning a join are
    reduced to their outermost extent.

    Args:
        genbank_file: GenBank flat file
        highlighted_genes: Gene names to flag as highlighted
        logger: Logger instance

    Returns:
        CDS features in file order

    Raises:
        FileNotFoundError: The GenBank file does not exist
        ValueError: The file could not be parsed as GenBank, or a CDS
            location could not be read
    """
    genbank_file = Path(genbank_file)
    logger.info("Reading CDS annotations", genbank_file=str(genbank_file))

    if not genbank_file.exists():
        raise FileNotFoundError(f"GenBank file not found: {genbank_file}")

    features = []
    n_records = 0
    try:
        for record in SeqIO.parse(str(genbank_file), "genbank"):
            n_records += 1
            for feat in record.features:
                if feat.type != "CDS":
                    continue
                # Biopython leaves the location unset when it cannot parse it
                if feat.location is None:
                    raise ValueError(f"CDS location in record {record.id} is unreadable")
                features.append(CDSFeature(
                    start=int(feat.location.start) + 1,
                    end=int(feat.location.end),
                    strand=_strand_symbol(feat.location.strand),
                    gene_name=_gene_name(feat.qualifiers)
                ))
    except ValueError as e:
        raise ValueError(f"GenBank file {genbank_file} could not be parsed: {e}") from e

    if n_records == 0:
        raise ValueError(f"No GenBank records found in {genbank_file}")

    unstranded = [f for f in features if f.y == 0]
    if unstranded:
        logger.warning("CDS features without strand drawn on the strand separator",
                       genbank_file=str(genbank_file),
                       n_unstranded=len(unstranded))

    features = mark_highlighted(features, highlighted_genes)
    logger.info(f"Read {len(features)} CDS features",
                genbank_file=str(genbank_file),
                n_records=n_records,
                n_highlighted=sum(f.highlight for f in features))
    return features


def mark_highlighted(
    features: Iterable[CDSFeature],
    highlighted_genes: Iterable[str]
) -> List[CDSFeature]:
    """Flag every feature whose gene name is in the highlighted set."""
    genes = set(highlighted_genes)
    return [
        feature.model_copy(update={"highlight": feature.gene_name in genes})
        for feature in features
    ]
