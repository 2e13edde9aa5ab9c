"""Orthopairs: PANTHER homology mapping files with UniProt gene names."""

__version__ = "0.1.0"
