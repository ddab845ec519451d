"""
Main pipeline class for the variant density figure.
"""

import time
from pathlib import Path
from typing import List, Optional
import structlog

from ..config.settings import DensityConfig
from ..models.features import BinCount, BinSummary, CDSFeature, DensityResult
from ..utils import PipelineLogger, log_error, log_file_operation
from . import annotation, binning, charts, render, variants


class DensityPipeline:
    """Load variants and annotations, bin, summarize and draw the figure."""

    def __init__(
        self,
        config: DensityConfig,
        logger: structlog.BoundLogger,
        require_vcf: bool = True,
        require_annotation: bool = True
    ):
        """
        Initialize the pipeline.

        Args:
            config: Run configuration
            logger: Structured logger instance
            require_vcf: Whether the VCF file must exist
            require_annotation: Whether the GenBank file must exist

        Raises:
            RuntimeError: Required inputs are missing
        """
        self.config = config
        self.logger = logger

        # Validate setup
        errors = self.config.validate_setup(require_vcf=require_vcf,
                                            require_annotation=require_annotation)
        if errors:
            error_msg = "Pipeline setup validation failed:\n" + \
                "\n".join(f"  - {e}" for e in errors)
            raise RuntimeError(error_msg)

        for warning in self.config.region_warnings():
            self.logger.warning(warning)

        # Ensure the output directory exists
        self.config.ensure_directories()

        self.logger.info("Pipeline initialized successfully",
                         config_summary=self._get_config_summary())

    def run(self) -> DensityResult:
        """
        Run every stage: variants, bins, summary table, annotation, figure.

        Returns:
            DensityResult describing the run and its outputs
        """
        start_time = time.time()
        with PipelineLogger(self.logger, "density_pipeline") as plog:
            plog.add_context(vcf_file=str(self.config.vcf_file),
                             genbank_file=str(self.config.genbank_file))
            try:
                result = self._bin_and_write()
                features = self._load_annotation()
                result.figure_file = self._render(result.bins, result.summary, features)
                result.cds_features = len(features)
                result.highlighted_features = sum(f.highlight for f in features)
            except Exception as e:
                log_error(self.logger, e, context={"operation": "density_pipeline"})
                raise
            result.processing_time = time.time() - start_time
            plog.log_progress("Density figure completed",
                              **result.get_summary_stats())
        return result

    def run_binning(self) -> DensityResult:
        """Load variants, bin them and write the summary table only."""
        start_time = time.time()
        with PipelineLogger(self.logger, "density_binning") as plog:
            plog.add_context(vcf_file=str(self.config.vcf_file))
            try:
                result = self._bin_and_write()
            except Exception as e:
                log_error(self.logger, e, context={"operation": "density_binning"})
                raise
            result.processing_time = time.time() - start_time
        return result

    def render_from_table(self, summary_file: Optional[Path] = None) -> DensityResult:
        """
        Re-draw the figure from an existing summary table.

        Args:
            summary_file: Table written by a previous run, defaults to the
                configured summary path
        """
        start_time = time.time()
        summary_file = Path(summary_file or self.config.get_summary_path())
        with PipelineLogger(self.logger, "density_render") as plog:
            plog.add_context(summary_file=str(summary_file))
            try:
                bins = binning.read_bin_counts(summary_file)
                summary = binning.summarize_counts(bins, self.config.quantile)
                features = self._load_annotation()
                figure_file = self._render(bins, summary, features)
            except Exception as e:
                log_error(self.logger, e, context={"operation": "density_render"})
                raise
        return DensityResult(
            bins=bins,
            summary=summary,
            variants_counted=summary.total,
            cds_features=len(features),
            highlighted_features=sum(f.highlight for f in features),
            summary_file=summary_file,
            figure_file=figure_file,
            processing_time=time.time() - start_time,
        )

    def _bin_and_write(self) -> DensityResult:
        """Load, filter and bin the variants, then write the summary table."""
        with PipelineLogger(self.logger, "load_variants"):
            records = variants.load_variants(self.config.vcf_file, self.logger)
            selected = variants.filter_variants(records, self.config.snv_only, self.logger)
            positions = variants.extract_positions(selected)

        with PipelineLogger(self.logger, "bin_variants") as plog:
            plog.add_context(genome_length=self.config.genome_length,
                             window_size=self.config.window_size)
            bins = binning.bin_positions(positions,
                                         self.config.genome_length,
                                         self.config.window_size)
            counted, dropped = binning.count_in_range(positions, self.config.genome_length)
            if dropped:
                plog.log_progress("Positions outside the genome were not counted",
                                  n_dropped=dropped)
            summary = binning.summarize_counts(bins, self.config.quantile)
            plog.log_progress("Window counts summarized",
                              n_windows=len(bins),
                              median=summary.median,
                              top_quantile=summary.top_quantile)

        summary_file = binning.write_bin_counts(bins, self.config.get_summary_path(), self.logger)
        log_file_operation(self.logger, "written", summary_file)

        return DensityResult(
            bins=bins,
            summary=summary,
            variants_loaded=len(records),
            variants_counted=counted,
            variants_dropped=dropped,
            summary_file=summary_file,
        )

    def _load_annotation(self) -> List[CDSFeature]:
        with PipelineLogger(self.logger, "load_annotation"):
            return annotation.load_cds_features(self.config.genbank_file,
                                                self.config.highlighted_genes,
                                                self.logger)

    def _render(
        self,
        bins: List[BinCount],
        summary: BinSummary,
        features: List[CDSFeature]
    ) -> Path:
        """Build both chart descriptions and composite them into the figure."""
        with PipelineLogger(self.logger, "render_figure"):
            regions = charts.place_region_labels(self.config.regions, summary.max_count)
            density_chart = charts.build_density_chart(bins, regions, summary,
                                                       self.config.genome_length,
                                                       self.config.window_size)
            annotation_chart = charts.build_annotation_chart(features, regions,
                                                             self.config.genome_length)
            figure_file = render.render_figure(
                density_chart,
                annotation_chart,
                self.config.get_figure_path(),
                self.logger,
                figsize=(self.config.figure_width, self.config.figure_height),
                height_ratios=self.config.get_height_ratios(),
            )
        log_file_operation(self.logger, "written", figure_file)
        return figure_file

    def _get_config_summary(self) -> dict:
        """Get a summary of the configuration."""
        return {
            "vcf_file": str(self.config.vcf_file),
            "genbank_file": str(self.config.genbank_file),
            "output_dir": str(self.config.output_dir),
            "genome_length": self.config.genome_length,
            "window_size": self.config.window_size,
            "snv_only": self.config.snv_only,
            "n_regions": len(self.config.regions),
            "n_highlighted_genes": len(self.config.highlighted_genes),
        }
