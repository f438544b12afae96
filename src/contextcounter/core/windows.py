"""Sliding-window k-mer extraction."""

from collections.abc import Iterator

from contextcounter.core.counts import as_bytes


def scan(sequence: bytes | str, k: int) -> Iterator[bytes]:
    """
    Yield every overlapping window of length k, left to right (stride 1).

    Windows are raw slices: nothing is filtered or normalised here.
    A sequence shorter than k yields nothing.
    """
    if k < 1:
        raise ValueError(f"Window size must be positive, got {k}")
    data = as_bytes(sequence)
    for i in range(len(data) - k + 1):
        yield data[i : i + k]


def count_windows(length: int, k: int) -> int:
    """Number of windows scan() yields for a sequence of the given length."""
    return max(length - k + 1, 0)
