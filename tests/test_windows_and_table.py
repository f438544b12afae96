"""Tests for window scanning and table rendering."""

from pathlib import Path

import pytest

from contextcounter.core.counts import ContextCounter, ContextType
from contextcounter.core.table import render_table, table_filename, write_table
from contextcounter.core.windows import count_windows, scan


def test_scan_overlapping_windows_in_order():
    assert list(scan(b"ACGTAC", 3)) == [b"ACG", b"CGT", b"GTA", b"TAC"]


def test_scan_keeps_invalid_bytes():
    assert list(scan(b"AN A", 2)) == [b"AN", b"N ", b" A"]


@pytest.mark.parametrize("seq,k", [(b"", 2), (b"", 5), (b"AC", 5), (b"ACGT", 5)])
def test_scan_short_sequence_is_empty(seq, k):
    assert list(scan(seq, k)) == []
    assert count_windows(len(seq), k) == 0


def test_scan_is_restartable():
    seq = b"ACGTTA"
    assert list(scan(seq, 2)) == list(scan(seq, 2))
    assert len(list(scan(seq, 2))) == count_windows(len(seq), 2) == 5


def test_scan_rejects_non_positive_k():
    with pytest.raises(ValueError):
        list(scan(b"ACGT", 0))


def test_render_table_rows():
    counter = ContextCounter(2)
    counter.update(b"ACGT")  # AC, CG, GT -> AC, CG, AC
    text = render_table(counter)
    lines = text.splitlines()
    assert len(lines) == 10
    assert lines[0] == "AA\t0"
    assert lines[1] == "AC\t2"
    assert "CG\t1" in lines
    assert text.endswith("\n")


def test_render_table_header():
    text = render_table(ContextCounter(3), header=True)
    lines = text.splitlines()
    assert lines[0] == "context\tcount"
    assert len(lines) == 33


def test_render_is_idempotent_and_deterministic():
    a = ContextCounter(5)
    a.update(b"ACGTTGCAAGGTCCA")
    first = render_table(a)
    assert render_table(a) == first
    assert a.render() == a.render()

    b = ContextCounter(5)
    b.update(b"ACGTTGCAAGGTCCA")
    assert render_table(b) == first


def test_rendered_counts_sum_to_valid_windows():
    counter = ContextCounter(3)
    added = counter.update(b"ACGNNTTAGCA")
    total = sum(int(line.split("\t")[1]) for line in render_table(counter).splitlines())
    assert total == added == counter.total


def test_table_filename():
    path = table_filename(Path("contexts/genome"), ContextType.TRINUCLEOTIDE)
    assert path == Path("contexts/genome_trinucleotide.tsv")


def test_write_table(tmp_path):
    counter = ContextCounter(2)
    counter.update(b"AAAA")
    path = write_table(counter, tmp_path / "x_dinucleotide.tsv")
    assert path.read_text() == render_table(counter)


def test_write_table_unwritable(tmp_path):
    with pytest.raises(OSError, match="Failed to write context table"):
        write_table(ContextCounter(2), tmp_path / "missing" / "x.tsv")
