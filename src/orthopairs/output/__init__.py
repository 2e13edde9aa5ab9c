"""Output generation: tab-separated mapping files."""

from orthopairs.output.writers import (
    read_mapping_file,
    write_gene_name_file,
    write_mapping_file,
)

__all__ = [
    "read_mapping_file",
    "write_gene_name_file",
    "write_mapping_file",
]
