"""Tests for the command-line interface."""

from click.testing import CliRunner

from contextcounter.cli import cli


def test_count_command(fasta_file, tmp_path):
    outdir = tmp_path / "contexts"
    result = CliRunner().invoke(
        cli, ["count", str(fasta_file), "-o", str(outdir), "--skip", "chrX,chrM"]
    )
    assert result.exit_code == 0, result.output
    for label in ("dinucleotide", "trinucleotide", "pentanucleotide"):
        assert (outdir / f"genome_{label}.tsv").exists()
    rows = (outdir / "genome_trinucleotide.tsv").read_text().splitlines()
    assert sum(int(row.split("\t")[1]) for row in rows) == 12


def test_count_repeated_include_and_print(fasta_file, tmp_path):
    result = CliRunner().invoke(
        cli,
        [
            "count",
            str(fasta_file),
            "-o",
            str(tmp_path / "out"),
            "--include",
            "chr1",
            "--include",
            "chr2",
            "--print-counts",
            "--header",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "context\tcount" in result.output
    assert "ACG\t" in result.output
    table = (tmp_path / "out" / "genome_trinucleotide.tsv").read_text()
    assert table.startswith("context\tcount\n")


def test_count_rejects_skip_and_include(fasta_file, tmp_path):
    result = CliRunner().invoke(
        cli,
        ["count", str(fasta_file), "-o", str(tmp_path), "--skip", "chrX", "--include", "chr1"],
    )
    assert result.exit_code == 1
    assert "❌ Error" in result.output
    assert not list(tmp_path.glob("*.tsv"))


def test_count_missing_fasta(tmp_path):
    result = CliRunner().invoke(cli, ["count", str(tmp_path / "missing.fa")])
    assert result.exit_code != 0


def test_config_error_is_logged_with_prefix(fasta_file, tmp_path):
    result = CliRunner().invoke(
        cli,
        ["count", str(fasta_file), "-o", str(tmp_path), "--skip", "chrX", "--include", "chr1"],
    )
    assert result.exit_code == 1
    assert "ERROR contextcounter] Fatal Error: There is no reason" in result.output
