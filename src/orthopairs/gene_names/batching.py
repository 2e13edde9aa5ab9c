"""Collect UniProt accessions from homolog mappings and split them into batches."""

import math
from typing import Iterable, Mapping

UNIPROT_NAMESPACE = "UniProtKB"
DEFAULT_BATCH_SIZE = 500


def extract_uniprot_accessions(mappings: Mapping[str, Iterable[str]]) -> set[str]:
    """Return the distinct UniProt accessions among the mapping values.

    Values look like ``UniProtKB=Q8CCP0``; the namespace is stripped. Values
    from other namespaces cannot be looked up and are skipped.
    """
    accessions: set[str] = set()
    for values in mappings.values():
        for value in values:
            if UNIPROT_NAMESPACE not in value:
                continue
            _, _, accession = value.partition("=")
            if accession:
                accessions.add(accession)
    return accessions


def partition_accessions(
    accessions: Iterable[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[frozenset[str]]:
    """Split accessions into disjoint batches of at most batch_size.

    Produces ceil(n / batch_size) batches; every batch but the last holds
    exactly batch_size accessions. Membership order is not defined.

    Raises:
        ValueError: If batch_size is less than 1
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    unique = sorted(set(accessions))
    batch_count = math.ceil(len(unique) / batch_size)
    return [
        frozenset(unique[i * batch_size:(i + 1) * batch_size])
        for i in range(batch_count)
    ]
