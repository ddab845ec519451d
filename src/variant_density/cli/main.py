"""
Main command-line interface for the variant density figure.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional
import click
import configparser
from rich.console import Console
from rich.table import Table

from ..config.settings import DensityConfig, load_density_config
from ..core.pipeline import DensityPipeline
from ..models.features import DensityResult
from ..utils import setup_logging
from .. import __version__


console = Console()


def input_options(func):
    """Options shared by the commands that build a DensityConfig."""
    options = [
        click.option(
            "--config",
            help="INI configuration file path",
            type=click.Path(exists=True, path_type=Path),
        ),
        click.option(
            "--vcf",
            help="Variant VCF file (.vcf or .vcf.gz)",
            type=click.Path(path_type=Path),
        ),
        click.option(
            "--genbank",
            help="GenBank annotation file",
            type=click.Path(path_type=Path),
        ),
        click.option(
            "--output-dir",
            help="Output directory for the summary table and figure",
            type=click.Path(path_type=Path),
        ),
        click.option(
            "--genome-length",
            help="Genome length in bp",
            type=int,
        ),
        click.option(
            "--window-size",
            help="Window size in bp",
            type=int,
        ),
        click.option(
            "--snv-only/--all-variants",
            default=None,
            help="Count only single-nucleotide variants (default: all variants)",
        ),
        click.option(
            "--log-level",
            type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
            help="Logging level",
        ),
        click.option(
            "--log-file",
            help="Log file path",
            type=click.Path(path_type=Path),
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="Variant Density")
def cli():
    """Variant Density - Binned variant density overlaid on CDS annotations."""
    pass


@cli.command()
@input_options
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show the configuration without running the pipeline",
)
def run(dry_run: bool, **options):
    """Bin variants, write the summary table and draw the figure."""
    density_config = _load_config_or_exit(**options)

    if dry_run:
        display_config_summary(density_config)
        console.print("[yellow]Dry run mode - no actual processing will occur[/yellow]")
        return

    result = _run_or_exit(density_config, "run")
    display_results(result)


@cli.command(name="bin")
@input_options
def bin_command(**options):
    """Bin variants and write the summary table only."""
    density_config = _load_config_or_exit(**options)
    result = _run_or_exit(density_config, "bin")
    display_results(result)


@cli.command()
@input_options
@click.option(
    "--table",
    help="Summary table from a previous run (defaults to the configured path)",
    type=click.Path(exists=True, path_type=Path),
)
def render(table: Optional[Path], **options):
    """Draw the figure from an existing summary table."""
    density_config = _load_config_or_exit(**options)
    result = _run_or_exit(density_config, "render", table=table)
    display_results(result)


@cli.command()
@input_options
def validate(**options):
    """Validate the configuration and inputs."""
    density_config = _load_config_or_exit(**options)
    display_config_summary(density_config)

    for warning in density_config.region_warnings():
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    errors = density_config.validate_setup()
    if errors:
        console.print("[red]Configuration validation failed:[/red]")
        for error in errors:
            console.print(f"  [red]• {error}[/red]")
        sys.exit(1)

    console.print("[green]✓ Configuration is valid[/green]")


def build_config(
    config: Optional[Path] = None,
    vcf: Optional[Path] = None,
    genbank: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    genome_length: Optional[int] = None,
    window_size: Optional[int] = None,
    snv_only: Optional[bool] = None,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> DensityConfig:
    """Combine the INI file (if any) with command-line overrides."""
    overrides: Dict[str, Any] = {
        "vcf_file": vcf,
        "genbank_file": genbank,
        "output_dir": output_dir,
        "genome_length": genome_length,
        "window_size": window_size,
        "snv_only": snv_only,
        "log_level": log_level,
        "log_file": log_file,
    }
    if config:
        return load_density_config(config, **overrides)
    return DensityConfig(**{k: v for k, v in overrides.items() if v is not None})


def _load_config_or_exit(**options) -> DensityConfig:
    try:
        return build_config(**options)
    except configparser.Error as e:
        # Catch errors like malformed lines, etc.
        console.print(f"[red]Error reading configuration file {options.get('config')}: {e}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        sys.exit(1)


def _run_or_exit(density_config: DensityConfig, mode: str, table: Optional[Path] = None) -> DensityResult:
    """Run one pipeline mode, turning any failure into exit status 1."""
    logger = setup_logging(
        log_level=density_config.log_level,
        log_file=density_config.log_file,
        log_format="console"
    )

    try:
        pipeline = DensityPipeline(
            density_config,
            logger,
            require_vcf=mode != "render",
            require_annotation=mode != "bin",
        )
    except Exception as e:
        console.print(f"[red]Error initializing pipeline: {e}[/red]")
        logger.error("Pipeline initialization failed", error=str(e))
        sys.exit(1)

    try:
        with console.status("[bold green]Running pipeline..."):
            if mode == "bin":
                return pipeline.run_binning()
            if mode == "render":
                return pipeline.render_from_table(table)
            return pipeline.run()
    except Exception as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        logger.error("Pipeline execution failed", error=str(e))
        sys.exit(1)


def display_results(result: DensityResult):
    """Display run results in a formatted table."""

    console.print("\n[bold green]Pipeline Results[/bold green]")

    summary = result.get_summary_stats()

    table = Table(title="Variant Density Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Windows", str(summary["windows"]))
    table.add_row("Variants Loaded", str(summary["variants_loaded"]))
    table.add_row("Variants Counted", str(summary["variants_counted"]))
    table.add_row("Outside Genome", str(summary["variants_dropped"]))
    table.add_row("Median per Window", f"{summary['median']:.2f}")
    table.add_row(f"Q{result.summary.quantile:g} per Window", f"{summary['top_quantile']:.2f}")
    table.add_row("Max per Window", str(summary["max_count"]))
    table.add_row("CDS Features", str(summary["cds_features"]))
    table.add_row("Highlighted CDS", str(summary["highlighted_features"]))
    if result.summary_file:
        table.add_row("Summary Table", str(result.summary_file))
    if result.figure_file:
        table.add_row("Figure", str(result.figure_file))

    console.print(table)


def display_config_summary(config: DensityConfig):
    """Display configuration summary."""

    table = Table(title="Configuration Summary")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("VCF File", str(config.vcf_file))
    table.add_row("GenBank File", str(config.genbank_file))
    table.add_row("Output Directory", str(config.output_dir))
    table.add_row("Genome Length", f"{config.genome_length:,} bp")
    table.add_row("Window Size", f"{config.window_size:,} bp")
    table.add_row("Variants Counted", "SNVs only" if config.snv_only else "All types")
    table.add_row("Regions", ", ".join(
        f"{r.label} ({r.start}-{r.end})" for r in config.regions
    ) or "None")
    table.add_row("Highlighted Genes", ", ".join(config.highlighted_genes) or "None")

    console.print(table)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
