"""Command-line interface for the CO1 extraction tool."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .cli_utils import echo, secho, set_quiet_mode
from .co1_retriever import CO1Retriever
from .config import Config, create_example_config, get_default_config_path
from .error_handler import get_error_handler
from .input_parser import InputParser
from .logging_config import setup_logging
from .sequence_assembler import extract_co1_from_genbank, to_fasta_lines
from .storage import combine_fasta_files, write_lines


def _record_id_from_path(path: Path) -> str:
    """``genome_NC_012345.gb`` -> ``NC_012345``."""
    stem = path.stem
    if stem.startswith('genome_'):
        stem = stem[len('genome_'):]
    return stem


@click.group()
@click.option('--config', 'config_file', type=click.Path(exists=True), help='Configuration file path')
@click.option('--api-key', envvar='NCBI_API_KEY', help='NCBI API key for increased rate limits')
@click.option('--email', envvar='EMAIL', help='Email for NCBI')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress all output except errors')
@click.version_option(__version__, prog_name='co1-extract')
@click.pass_context
def cli(ctx, config_file, api_key, email, verbose, quiet):
    """Retrieve CO1 sequences from NCBI GenBank per taxonomic group.

    Examples:
        co1-extract run all_animal_order_taxids.txt --max-per-order 2
        co1-extract extract genome_NC_012920.gb
    """
    if quiet and verbose:
        click.echo("Error: Cannot use both --quiet and --verbose", err=True)
        sys.exit(1)

    set_quiet_mode(quiet)

    config_path = Path(config_file) if config_file else get_default_config_path()
    cfg = Config.from_file(config_path)
    cfg.merge_env_vars()
    cfg.merge_cli_args(
        api_key=api_key,
        email=email,
        log_level='DEBUG' if verbose else None
    )

    ctx.obj = {'config': cfg, 'quiet': quiet, 'verbose': verbose}


@cli.command()
@click.argument('taxid_file', type=click.Path(exists=True))
@click.option('--max-per-order', type=click.IntRange(min=1), help='Maximum CO1 sequences per taxon')
@click.option('--output-dir', type=click.Path(file_okay=False), help='Output directory')
@click.option('--combine/--no-combine', default=None, help='Combine per-taxon FASTA files at the end')
@click.option('--no-genbank', is_flag=True, help='Do not archive downloaded GenBank records')
@click.option('--error-report', type=click.Path(dir_okay=False), help='Write a JSON error report')
@click.pass_context
def run(ctx, taxid_file, max_per_order, output_dir, combine, no_genbank, error_report):
    """Retrieve CO1 sequences for every taxonomy ID in TAXID_FILE."""
    cfg = ctx.obj['config']
    cfg.merge_cli_args(
        max_per_order=max_per_order,
        output_dir=output_dir,
        combine=combine,
        no_genbank=no_genbank
    )

    setup_logging(cfg.logging, quiet=ctx.obj['quiet'])

    parser = InputParser()
    try:
        taxids = parser.parse_file(taxid_file)
    except Exception as e:
        echo(f"ERROR: Failed to parse input file: {e}", err=True)
        sys.exit(1)

    if not taxids:
        echo(f"ERROR: No taxonomy IDs found in {taxid_file}", err=True)
        sys.exit(1)

    echo(f"Read {len(taxids)} taxonomy IDs from {taxid_file}")

    retriever = CO1Retriever(cfg)
    report = retriever.process_taxids(taxids)
    stats = report.get_statistics()

    if cfg.output.combine:
        total = retriever.combine()
        echo(f"Combined file contains {total} sequences")

    if error_report:
        get_error_handler().export_error_report(error_report)
        echo(f"Error report written to: {error_report}")

    echo("")
    echo("=" * 60)
    echo(f"Orders processed: {stats['orders_processed']}")
    echo(f"Orders with sequences: {stats['orders_with_sequences']}")
    echo(f"CO1 sequences retrieved: {stats['total_retrieved']}")
    echo(f"CO1 features extracted from genomes: {stats['total_extracted_from_genomes']}")
    if stats['orders_failed']:
        secho(f"Orders failed: {stats['orders_failed']}", fg='yellow')
    echo(f"Output directory: {retriever.output.output_dir}")


@cli.command()
@click.argument('genbank_files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--id', 'record_id', help='Identifier used in FASTA headers (single file only)')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write FASTA to this file')
@click.pass_context
def extract(ctx, genbank_files, record_id, output):
    """Extract annotated CO1 regions from local GenBank records."""
    if ctx.obj['verbose']:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s - %(message)s')

    if record_id and len(genbank_files) > 1:
        click.echo("Error: --id can only be used with a single GenBank file", err=True)
        sys.exit(1)

    lines = []
    for genbank_file in genbank_files:
        path = Path(genbank_file)
        genbank_text = path.read_text(encoding='utf-8', errors='replace')
        records = extract_co1_from_genbank(genbank_text, record_id or _record_id_from_path(path))
        # FASTA owns stdout when no output file is given
        if not ctx.obj['quiet']:
            click.echo(f"{path.name}: {len(records)} CO1 feature(s)", err=not output)
        lines.extend(to_fasta_lines(records))

    if output:
        write_lines(Path(output), lines)
        echo(f"FASTA written to: {output}")
    else:
        for line in lines:
            click.echo(line)


@cli.command()
@click.argument('output_dir', type=click.Path(exists=True, file_okay=False))
@click.argument('combined_file', required=False, type=click.Path(dir_okay=False))
@click.pass_context
def combine(ctx, output_dir, combined_file):
    """Combine all FASTA files in OUTPUT_DIR into one file."""
    combined = combined_file or str(Path(output_dir) / ctx.obj['config'].output.combined_file)
    total = combine_fasta_files(output_dir, combined)

    if total == 0:
        echo(f"No FASTA files found in {output_dir}")
        return

    echo(f"Combined file contains {total} sequences")
    echo(f"Saved as: {combined}")


@cli.command('init-config')
@click.argument('path', required=False, type=click.Path(dir_okay=False))
def init_config(path):
    """Generate an example configuration file."""
    config_path = create_example_config(Path(path) if path else None)
    echo(f"Generated example configuration file: {config_path}")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
