"""
Configuration settings for the variant density figure.
"""

import configparser
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ..models.features import RegionDefinition


def _default_regions() -> List[RegionDefinition]:
    return [
        RegionDefinition(label="Region1", start=5000, end=6700,
                         color="#FFA500", label_x=5500, label_y_fraction=0.87),
        RegionDefinition(label="Region2", start=7950, end=8360,
                         color="#FFA500", label_x=8230, label_y_fraction=0.96),
        RegionDefinition(label="Region3", start=136000, end=141000,
                         color="#FFA500", label_x=135500, label_y_fraction=0.95),
    ]


def _default_highlighted_genes() -> List[str]:
    return ["LD008", "LD009", "LD011", "LD012",
            "LD144", "LD145", "LD146", "LD147"]


class DensityConfig(BaseSettings):
    """Configuration for one variant density run."""

    # Inputs
    vcf_file: Path = Field(default=Path("vcf/gfavariants.vcf"), description="Variant VCF file")
    genbank_file: Path = Field(default=Path("KX894508.gb"), description="GenBank annotation file")

    # Outputs
    output_dir: Path = Field(default=Path("."), description="Output directory")
    summary_name: str = Field(default="bin_counts.csv", description="Per-window summary table")
    figure_name: str = Field(default="PVG_paper_Figure2.pdf", description="Combined figure")

    # Binning
    genome_length: int = Field(default=151000, description="Total genome length in bp")
    window_size: int = Field(default=400, description="Window size in bp")
    quantile: float = Field(default=0.95, description="Upper reference line quantile")
    snv_only: bool = Field(default=False, description="Count only single-nucleotide variants")

    # Highlights
    regions: List[RegionDefinition] = Field(
        default_factory=_default_regions,
        description="Regions highlighted on both charts"
    )
    highlighted_genes: List[str] = Field(
        default_factory=_default_highlighted_genes,
        description="Gene names highlighted on the annotation chart"
    )

    # Figure
    figure_width: float = Field(default=16.0, description="Figure width in inches")
    figure_height: float = Field(default=5.0, description="Figure height in inches")
    density_height_ratio: float = Field(default=4.0, description="Relative height of the density chart")
    annotation_height_ratio: float = Field(default=1.0, description="Relative height of the CDS chart")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Log file path")

    @field_validator('genome_length', 'window_size')
    @classmethod
    def validate_lengths(cls, v):
        """Validate genome length and window size are positive."""
        if v <= 0:
            raise ValueError("Genome length and window size must be positive")
        return v

    @field_validator('quantile')
    @classmethod
    def validate_quantile(cls, v):
        """Validate that the quantile is between 0 and 1."""
        if not 0 <= v <= 1:
            raise ValueError("Quantile must be between 0 and 1")
        return v

    @field_validator('figure_width', 'figure_height',
                     'density_height_ratio', 'annotation_height_ratio')
    @classmethod
    def validate_figure_sizes(cls, v):
        """Validate figure dimensions and height ratios are positive."""
        if v <= 0:
            raise ValueError("Figure dimensions and height ratios must be positive")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v

    model_config = {
        "env_prefix": "VARIANT_DENSITY_",
        "case_sensitive": False,
        "env_file": ".env",
        "extra": "ignore"
    }

    def get_summary_path(self) -> Path:
        """Get the per-window summary table path."""
        return self.output_dir / self.summary_name

    def get_figure_path(self) -> Path:
        """Get the combined figure path."""
        return self.output_dir / self.figure_name

    def get_height_ratios(self) -> List[float]:
        """Get the density:annotation height ratios."""
        return [self.density_height_ratio, self.annotation_height_ratio]

    def ensure_directories(self) -> None:
        """Ensure the output directory exists."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def validate_setup(
        self,
        require_vcf: bool = True,
        require_annotation: bool = True
    ) -> List[str]:
        """Validate that the required input files exist."""
        errors = []

        required_files = []
        if require_vcf:
            required_files.append(self.vcf_file)
        if require_annotation:
            required_files.append(self.genbank_file)

        for file_path in required_files:
            if not file_path.exists():
                errors.append(f"Required file not found: {file_path}")

        return errors

    def region_warnings(self) -> List[str]:
        """Regions that end past the genome; they are still drawn."""
        return [
            f"Region '{region.label}' ends at {region.end}, "
            f"beyond genome length {self.genome_length}"
            for region in self.regions
            if region.end > self.genome_length
        ]


def load_density_config(config_file_path: Path, **overrides: Any) -> DensityConfig:
    """
    Load a DensityConfig from an INI file.

    Recognised sections are ``[Paths]`` (VCF_FILE, GENBANK_FILE, OUTPUT_DIR,
    SUMMARY_NAME, FIGURE_NAME), ``[Parameters]`` (GENOME_LENGTH, WINDOW_SIZE,
    QUANTILE, SNV_ONLY, HIGHLIGHTED_GENES, FIGURE_WIDTH, FIGURE_HEIGHT,
    DENSITY_HEIGHT_RATIO, ANNOTATION_HEIGHT_RATIO, LOG_LEVEL) and one
    ``[Region:<label>]`` section per highlighted region. When any region
    section is present the default regions are replaced.

    Keyword overrides are applied last.
    """
    config_elem = configparser.ConfigParser()
    config_read = config_elem.read(config_file_path)
    # Raise an error if the file was specified but not found/readable
    if not config_read:
        raise FileNotFoundError(
            f"Configuration file not found or empty: {config_file_path}"
        )

    values: Dict[str, Any] = {}

    if config_elem.has_section('Paths'):
        paths = config_elem['Paths']
        for key in ('VCF_FILE', 'GENBANK_FILE', 'OUTPUT_DIR', 'LOG_FILE'):
            if key in paths:
                values[key.lower()] = Path(paths[key])
        for key in ('SUMMARY_NAME', 'FIGURE_NAME'):
            if key in paths:
                values[key.lower()] = paths[key]

    if config_elem.has_section('Parameters'):
        params = config_elem['Parameters']
        for key in ('GENOME_LENGTH', 'WINDOW_SIZE'):
            if key in params:
                values[key.lower()] = params.getint(key)
        for key in ('QUANTILE', 'FIGURE_WIDTH', 'FIGURE_HEIGHT',
                    'DENSITY_HEIGHT_RATIO', 'ANNOTATION_HEIGHT_RATIO'):
            if key in params:
                values[key.lower()] = params.getfloat(key)
        if 'SNV_ONLY' in params:
            values['snv_only'] = params.getboolean('SNV_ONLY')
        if 'LOG_LEVEL' in params:
            values['log_level'] = params['LOG_LEVEL']
        if 'HIGHLIGHTED_GENES' in params:
            values['highlighted_genes'] = [
                gene.strip()
                for gene in params['HIGHLIGHTED_GENES'].split(',')
                if gene.strip()
            ]

    regions = []
    for section in config_elem.sections():
        if not section.startswith('Region:'):
            continue
        region = config_elem[section]
        regions.append(RegionDefinition(
            label=section.split(':', 1)[1].strip(),
            start=region.getint('START'),
            end=region.getint('END'),
            color=region.get('COLOR', '#FFA500'),
            label_x=region.getfloat('LABEL_X'),
            label_y_fraction=region.getfloat('LABEL_Y_FRACTION', 0.95),
        ))
    if regions:
        values['regions'] = regions

    values.update({k: v for k, v in overrides.items() if v is not None})

    return DensityConfig(**values)
