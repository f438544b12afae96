"""Shared fixtures for contextcounter tests."""

import logging

import pytest


@pytest.fixture
def fasta_file(tmp_path):
    """Small multi-contig FASTA with an N run, soft-masking and a mitochondrial contig."""
    path = tmp_path / "genome.fa"
    path.write_text(
        ">chr1 first contig\n"
        "ACGTAC\n"
        "GTTCAG\n"
        ">chr2\n"
        "NNACGTacgtAC\n"
        ">chrX\n"
        "TTTCCCGGGAAA\n"
        ">chrM\n"
        "AC\n"
    )
    return path


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("contextcounter")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
