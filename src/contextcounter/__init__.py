"""
Strand-collapsed nucleotide context counting for FASTA files.

The counting engine lives in ``contextcounter.core``; ``contextcounter.cli``
wires it to FASTA input and TSV output.
"""
