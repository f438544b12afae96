"""
Tab-separated rendering of context counts.

One row per canonical category, in the counter's lexicographic order::

    ACA\t1204
    ACC\t988
"""

from pathlib import Path

from contextcounter.core.counts import ContextCounter, ContextType

HEADER = ("context", "count")


def render_table(counter: ContextCounter, header: bool = False) -> str:
    """Render a counter as newline-terminated ``<category>\\t<count>`` rows."""
    rows = [HEADER] if header else []
    rows.extend(counter.render())
    return "".join(f"{category}\t{count}\n" for category, count in rows)


def table_filename(prefix: Path, context_type: ContextType) -> Path:
    """``<outdir>/<stem>`` -> ``<outdir>/<stem>_<label>.tsv``."""
    return prefix.with_name(f"{prefix.name}_{context_type.label}.tsv")


def write_table(counter: ContextCounter, path: Path, header: bool = False) -> Path:
    """Write the rendered table to path."""
    try:
        path.write_text(render_table(counter, header=header))
    except OSError as e:
        raise OSError(f"Failed to write context table: {path}") from e
    return path
