"""Provenance tracking for release runs."""

from orthopairs.persistence.provenance import ProvenanceTracker

__all__ = ["ProvenanceTracker"]
