"""
FASTA record source and contig selection.

Records are yielded as ``(contig_name, sequence_bytes)`` with the sequence
untouched: soft-masked (lowercase) bases are left for the counter to reject.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from Bio.SeqIO.FastaIO import SimpleFastaParser

logger = logging.getLogger(__name__)

SequenceRecord = tuple[str, bytes]


def fasta_stem(fasta_path: Path) -> str:
    """File name without FASTA/gzip suffixes (genome.fa.gz -> genome)."""
    path = Path(fasta_path)
    if path.suffix == ".gz":
        path = path.with_suffix("")
    if not path.stem:
        raise ValueError(f"Invalid FASTA file stem: {fasta_path}")
    return path.stem


def read_records(fasta_path: Path) -> Iterator[SequenceRecord]:
    """
    Stream records from a (optionally gzipped) FASTA file.

    Lines are decoded as latin-1 so every byte maps to one character and
    back; bytes that are not valid text end up as uncountable bases.

    Args:
        fasta_path: Path to the FASTA file

    Yields:
        (contig name, raw sequence bytes)
    """
    fasta_path = Path(fasta_path)
    if not fasta_path.is_file():
        raise FileNotFoundError(f"FASTA file not found: {fasta_path}")

    opener = gzip.open if fasta_path.suffix == ".gz" else open
    try:
        with opener(fasta_path, "rt", encoding="latin-1") as handle:
            for title, seq in SimpleFastaParser(handle):
                name = title.split(None, 1)[0] if title.strip() else ""
                yield name, seq.encode("latin-1")
    except (OSError, ValueError) as e:
        raise ValueError(f"Failed to read FASTA file: {fasta_path}") from e


@dataclass(frozen=True)
class ContigFilter:
    """
    Which contigs to count.

    ``skip`` is a blacklist (commonly chrX, chrY, chrM). ``include`` is a
    whitelist: when set, every contig not listed is skipped. Setting both
    is rejected because the whitelist already excludes everything else.
    """

    skip: frozenset[str] = field(default_factory=frozenset)
    include: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        object.__setattr__(self, "skip", frozenset(self.skip))
        object.__setattr__(self, "include", frozenset(self.include))
        if self.skip and self.include:
            raise ValueError(
                "There is no reason to set both skip and include arguments. "
                "Whitelisting contigs with include automatically blacklists all others"
            )

    def skip_reason(self, contig_name: str) -> str | None:
        """Why a contig is excluded, or None if it should be counted."""
        if contig_name in self.skip:
            return "in blacklist"
        if self.include and contig_name not in self.include:
            return "not in whitelist"
        return None

    def accepts(self, contig_name: str) -> bool:
        return self.skip_reason(contig_name) is None


@dataclass
class SelectionTally:
    """Running count of contigs passed on and skipped by select_records."""

    counted: int = 0
    skipped: int = 0


def select_records(
    records: Iterable[SequenceRecord],
    contig_filter: ContigFilter,
    tally: SelectionTally | None = None,
) -> Iterator[SequenceRecord]:
    """Drop records the filter rejects, logging each decision."""
    tally = tally if tally is not None else SelectionTally()
    for name, seq in records:
        reason = contig_filter.skip_reason(name)
        if reason is not None:
            logger.info("Contig: %s (skipped: %s)", name, reason)
            tally.skipped += 1
            continue
        tally.counted += 1
        logger.info("Contig: %s (%s bp)", name, f"{len(seq):,}")
        yield name, seq
