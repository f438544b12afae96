"""
Strand-collapsed nucleotide context counting (di/tri/penta-nucleotides).

A k-mer and its reverse complement are counted as one category:

- odd k (3, 5): the category is the orientation whose centre base is a
  pyrimidine (C or T), the usual convention for mutational signatures
- even k (2): the category is the lexicographically smaller of the k-mer
  and its reverse complement (same rule as ``min(x, rc)`` in TNF binning)

Any window containing a byte outside ``ACGT`` (N, lowercase, IUPAC codes)
is uncountable and silently dropped.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from itertools import product

import numpy as np
from numba import njit
from numpy.typing import NDArray

SUPPORTED_K = (2, 3, 5)

_COMPLEMENT = bytes.maketrans(b"ACGT", b"TGCA")
_VALID = frozenset(b"ACGT")
_PURINES = frozenset(b"AG")

# Nucleotide encoding: A=0, C=1, G=2, T=3 (numeric order == lexicographic order)
_MAP = np.full(256, -1, dtype=np.int16)
_MAP[ord("A")] = 0
_MAP[ord("C")] = 1
_MAP[ord("G")] = 2
_MAP[ord("T")] = 3

CountArray = NDArray[np.int64]
ByteArray = NDArray[np.uint8]


def as_bytes(sequence: bytes | bytearray | memoryview | str) -> bytes:
    """Coerce a sequence to bytes; non-ASCII characters become '?' (uncountable)."""
    if isinstance(sequence, str):
        return sequence.encode("ascii", errors="replace")
    return bytes(sequence)


def reverse_complement(kmer: bytes | str) -> bytes:
    """Reverse complement (A<->T, C<->G). Non-ACGT bytes are kept as they are."""
    return as_bytes(kmer).translate(_COMPLEMENT)[::-1]


def canonicalize(kmer: bytes | str) -> bytes | None:
    """
    Map a raw k-mer to its canonical category.

    Args:
        kmer: Raw k-mer bytes (case-sensitive, no normalisation)

    Returns:
        Canonical category as bytes, or None if the k-mer is empty or
        contains anything other than A, C, G, T
    """
    kmer = as_bytes(kmer)
    if not kmer or not _VALID.issuperset(kmer):
        return None

    rc = reverse_complement(kmer)
    if len(kmer) % 2:
        return rc if kmer[len(kmer) // 2] in _PURINES else kmer
    return min(kmer, rc)


@lru_cache(maxsize=None)
def enumerate_categories(k: int) -> tuple[str, ...]:
    """All canonical categories for k, sorted lexicographically."""
    _check_k(k)
    kmers = ("".join(p).encode("ascii") for p in product("ACGT", repeat=k))
    return tuple(sorted({canonicalize(kmer).decode("ascii") for kmer in kmers}))


@lru_cache(maxsize=None)
def _canonical_index(k: int) -> CountArray:
    """Category position for every 2-bit encoded raw k-mer (4**k entries)."""
    position = {cat.encode("ascii"): i for i, cat in enumerate(enumerate_categories(k))}
    index = np.empty(4**k, dtype=np.int64)
    for code, p in enumerate(product("ACGT", repeat=k)):
        index[code] = position[canonicalize("".join(p))]
    index.setflags(write=False)
    return index


def _check_k(k: int) -> None:
    if k not in SUPPORTED_K:
        raise ValueError(f"Unsupported k-mer length {k}; expected one of {SUPPORTED_K}")


@njit(cache=True)
def _count_kmers(seq_bytes: ByteArray, k: int, canon_idx: CountArray, counts: CountArray) -> None:
    """Add every valid stride-1 window of seq_bytes to counts (in place)."""
    mask = (1 << (2 * k)) - 1
    code = 0
    valid = 0

    for i in range(seq_bytes.size):
        v = _MAP[seq_bytes[i]]
        if v == -1:  # Reset window on ambiguous base
            valid = 0
            continue
        code = ((code << 2) | v) & mask
        if valid < k - 1:
            valid += 1
            continue
        counts[canon_idx[code]] += 1


class ContextType(Enum):
    """The three context tables produced per run, valued by k."""

    DINUCLEOTIDE = 2
    TRINUCLEOTIDE = 3
    PENTANUCLEOTIDE = 5

    @property
    def k(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower()


class ContextCounter:
    """
    Fixed table of canonical category -> count for one k-mer length.

    Every category is present from construction, so rendering is complete
    and order-stable even for contexts never observed. Counts only grow.

    A counter is not safe to mutate from several threads at once; give each
    worker its own counter and combine them with :meth:`merge`.
    """

    def __init__(self, k: int):
        _check_k(k)
        self.k = k
        self.categories = enumerate_categories(k)
        self.counts: CountArray = np.zeros(len(self.categories), dtype=np.int64)
        self._position = {cat.encode("ascii"): i for i, cat in enumerate(self.categories)}

    @classmethod
    def for_context(cls, context_type: ContextType) -> ContextCounter:
        return cls(context_type.k)

    def increment(self, kmer: bytes | str) -> bool:
        """
        Count one raw k-mer.

        Returns:
            True if the k-mer was counted, False if it was uncountable
        """
        kmer = as_bytes(kmer)
        if len(kmer) != self.k:
            raise ValueError(f"Expected a {self.k}-mer, got {len(kmer)} bytes: {kmer!r}")
        category = canonicalize(kmer)
        if category is None:
            return False
        self.counts[self._position[category]] += 1
        return True

    def update(self, sequence: bytes | str) -> int:
        """
        Count every window of a whole sequence record.

        Equivalent to calling :meth:`increment` on each window from
        ``windows.scan(sequence, k)``, but runs in a compiled loop.

        Returns:
            Number of valid windows added
        """
        seq_bytes = np.frombuffer(as_bytes(sequence), dtype=np.uint8)
        before = self.total
        _count_kmers(seq_bytes, self.k, _canonical_index(self.k), self.counts)
        return self.total - before

    def merge(self, other: ContextCounter) -> ContextCounter:
        """Add another counter's counts into this one (element-wise)."""
        if other.k != self.k:
            raise ValueError(f"Cannot merge a k={other.k} counter into a k={self.k} counter")
        self.counts += other.counts
        return self

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    def render(self) -> list[tuple[str, int]]:
        """Ordered (category, count) pairs, lexicographic by category."""
        return [(cat, int(n)) for cat, n in zip(self.categories, self.counts)]

    def __getitem__(self, category: bytes | str) -> int:
        return int(self.counts[self._position[as_bytes(category)]])

    def __len__(self) -> int:
        return len(self.categories)

    def __repr__(self) -> str:
        return f"ContextCounter(k={self.k}, categories={len(self)}, total={self.total})"
