"""
Count nucleotide contexts across a FASTA file.

One pass over the records feeds every requested context table. With more
than one worker, records are split into chunks that are counted in separate
processes and the per-chunk tables are summed afterwards.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from multiprocessing import Pool
from pathlib import Path

from contextcounter.config import RunSettings
from contextcounter.core.counts import ContextCounter, ContextType
from contextcounter.core.table import render_table, table_filename, write_table
from contextcounter.prepare.fasta import (
    ContigFilter,
    SelectionTally,
    SequenceRecord,
    fasta_stem,
    read_records,
    select_records,
)

logger = logging.getLogger(__name__)

# Output order of the three tables
CONTEXT_TYPES = (
    ContextType.TRINUCLEOTIDE,
    ContextType.PENTANUCLEOTIDE,
    ContextType.DINUCLEOTIDE,
)

Counters = dict[ContextType, ContextCounter]


def new_counters(context_types: Iterable[ContextType] = CONTEXT_TYPES) -> Counters:
    """All-zero counters, one per context type."""
    return {ctx: ContextCounter.for_context(ctx) for ctx in context_types}


def count_records(
    records: Iterable[SequenceRecord], context_types: Iterable[ContextType] = CONTEXT_TYPES
) -> Counters:
    """Count every record into fresh counters (serial)."""
    counters = new_counters(context_types)
    for _name, seq in records:
        for counter in counters.values():
            counter.update(seq)
    return counters


def process_record_chunk(args) -> Counters:
    """
    Count one chunk of records in a worker process.

    Args:
        args: Tuple of (chunk_records, context_types, chunk_id)

    Returns:
        Counters private to this chunk
    """
    chunk_records, context_types, chunk_id = args
    logger.debug("[Chunk %d] Counting %d contigs", chunk_id, len(chunk_records))
    return count_records(chunk_records, context_types)


def split_into_chunks(records: Sequence[SequenceRecord], num_chunks: int) -> list[list]:
    """Split records into at most num_chunks contiguous chunks."""
    if not records:
        return []
    chunk_size = (len(records) + num_chunks - 1) // num_chunks  # Ceiling division
    return [list(records[i : i + chunk_size]) for i in range(0, len(records), chunk_size)]


def merge_counters(results: Iterable[Counters], context_types: Iterable[ContextType]) -> Counters:
    """Sum per-chunk counters element-wise."""
    merged = new_counters(context_types)
    for counters in results:
        for ctx, counter in counters.items():
            merged[ctx].merge(counter)
    return merged


def count_contexts(
    fasta_path: Path,
    contig_filter: ContigFilter | None = None,
    context_types: Sequence[ContextType] = CONTEXT_TYPES,
    workers: int = 1,
) -> Counters:
    """
    Count strand-collapsed contexts for every selected contig in a FASTA file.

    Args:
        fasta_path: Input FASTA (optionally gzipped)
        contig_filter: Contig blacklist/whitelist (default: count everything)
        context_types: Which tables to build
        workers: Number of worker processes (1 = count in this process)

    Returns:
        Finished counter per context type
    """
    contig_filter = contig_filter if contig_filter is not None else ContigFilter()
    start_time = time.time()
    logger.info("Fasta File: [%s]", fasta_path)

    tally = SelectionTally()
    records = select_records(read_records(fasta_path), contig_filter, tally)

    if workers <= 1:
        counters = count_records(records, context_types)
    else:
        record_list = list(records)
        chunks = split_into_chunks(record_list, workers)
        args_list = [(chunk, tuple(context_types), i + 1) for i, chunk in enumerate(chunks)]
        logger.info(
            "Counting %d contigs in %d chunks with %d workers", tally.counted, len(chunks), workers
        )
        with Pool(processes=workers) as pool:
            results = pool.map(process_record_chunk, args_list)
        counters = merge_counters(results, context_types)

    elapsed = time.time() - start_time
    logger.info(
        "Counted %d contigs (%d skipped) in %.1f seconds", tally.counted, tally.skipped, elapsed
    )
    for ctx, counter in counters.items():
        logger.info("  %s: %s valid windows", ctx.label, f"{counter.total:,}")
    return counters


def run(settings: RunSettings) -> dict[ContextType, Path]:
    """
    Count all three context tables and write them to the output folder.

    Returns:
        Written table path per context type
    """
    outdir = settings.outdir
    try:
        outdir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OSError(f"Failed to create output directory: {outdir}") from e

    prefix = outdir / fasta_stem(settings.fasta)

    counters = count_contexts(
        settings.fasta,
        contig_filter=settings.contig_filter,
        context_types=CONTEXT_TYPES,
        workers=settings.workers,
    )

    if settings.print_counts:
        for counter in counters.values():
            print(render_table(counter, header=settings.header))

    logger.info("Writing files to: %s", outdir.resolve())
    written = {}
    for ctx, counter in counters.items():
        written[ctx] = write_table(counter, table_filename(prefix, ctx), header=settings.header)
        logger.info("✓ %s", written[ctx])
    return written
