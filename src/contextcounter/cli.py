"""
Command-line interface for contextcounter.
"""

import sys
from pathlib import Path

import click

from contextcounter.analyze import count_contexts
from contextcounter.config import LOG_LEVELS, load_settings
from contextcounter.logs import log_fatal, setup_logging


def _split_csv(ctx, param, value):
    """Flatten repeated comma-separated option values."""
    return tuple(name.strip() for item in value for name in item.split(",") if name.strip())


@click.group()
@click.version_option(package_name="contextcounter")
def cli():
    """Count frequency of di/tri/penta nucleotide contexts in a FASTA file."""
    pass


@cli.command()
@click.argument("fasta", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--outdir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Folder to write count files (default: contexts)",
)
@click.option("--print-counts", "-p", is_flag=True, help="Also print each count table to stdout")
@click.option("--header", is_flag=True, help="Start each table with a 'context<TAB>count' row")
@click.option(
    "--skip",
    multiple=True,
    callback=_split_csv,
    metavar="CONTIG1,CONTIG2",
    help="Comma-separated list of FASTA entries to skip (commonly chrX,chrY,chrM)",
)
@click.option(
    "--include",
    multiple=True,
    callback=_split_csv,
    metavar="CONTIG1,CONTIG2",
    help="Comma-separated list of FASTA entries to count (commonly all autosomes). "
    "If not supplied, all contigs except those given to --skip are counted",
)
@click.option("--workers", type=int, default=None, help="Worker processes (default: 1)")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: INFO)",
)
def count(fasta, outdir, print_counts, header, skip, include, workers, log_level):
    """Count pyrimidine-centred tri/penta and strand-collapsed dinucleotide contexts."""
    try:
        setup_logging(log_level or "INFO")
        settings = load_settings(
            fasta,
            outdir=outdir,
            print_counts=print_counts,
            header=header,
            skip=skip,
            include=include,
            workers=workers,
            log_level=log_level,
        )
        setup_logging(settings.log_level)
        count_contexts.run(settings)
    except Exception as e:
        log_fatal(e)
        click.echo(f"\n❌ Error: {e}", err=True)
        sys.exit(1)


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
