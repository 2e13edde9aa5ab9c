"""Tab-separated mapping file writer and reader."""

from pathlib import Path
from typing import Iterable, Mapping

import polars as pl
import structlog

logger = structlog.get_logger()

MAPPING_SCHEMA = {"key": pl.Utf8, "value": pl.Utf8}


def _write_pairs(keys: list[str], values: list[str], path: Path) -> int:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # Each run replaces the file rather than appending to a previous one
    path.unlink(missing_ok=True)

    df = pl.DataFrame({"key": keys, "value": values}, schema=MAPPING_SCHEMA)
    df = df.sort(["key", "value"])
    df.write_csv(
        path,
        separator="\t",
        include_header=False,
        quote_style="never",
        line_terminator="\n",
    )

    logger.info("mapping_file_written", path=str(path), line_count=df.height)
    return df.height


def write_mapping_file(mappings: Mapping[str, Iterable[str]], path: Path | str) -> int:
    """Write a multi-valued mapping as one ``key<TAB>value`` line per pair.

    Args:
        mappings: key -> values (e.g. source protein -> target proteins)
        path: Destination file; replaced if it exists

    Returns:
        Number of lines written
    """
    keys: list[str] = []
    values: list[str] = []
    for key, key_values in mappings.items():
        for value in key_values:
            keys.append(key)
            values.append(value)
    return _write_pairs(keys, values, Path(path))


def write_gene_name_file(gene_names: Mapping[str, str], path: Path | str) -> int:
    """Write accession -> gene name pairs, one ``accession<TAB>name`` line each."""
    return _write_pairs(list(gene_names.keys()), list(gene_names.values()), Path(path))


def read_mapping_file(path: Path | str) -> dict[str, set[str]]:
    """Read a file written by write_mapping_file back into key -> {values}."""
    path = Path(path)
    if path.stat().st_size == 0:
        return {}

    df = pl.read_csv(
        path,
        separator="\t",
        has_header=False,
        new_columns=["key", "value"],
        quote_char=None,
        infer_schema_length=0,
    )

    mappings: dict[str, set[str]] = {}
    for key, value in df.iter_rows():
        mappings.setdefault(key, set()).add(value)
    return mappings
