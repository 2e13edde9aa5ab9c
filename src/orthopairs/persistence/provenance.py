"""Provenance tracking for release runs."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class ProvenanceTracker:
    """
    Tracks provenance metadata for a release run.

    Records pipeline version, release number, config hash, input files
    and processing steps so that a set of mapping files can be traced back
    to the run that produced them.
    """

    def __init__(self, pipeline_version: str, config: "OrthopairsConfig"):
        """
        Initialize provenance tracker.

        Args:
            pipeline_version: Pipeline version string (e.g., "0.1.0")
            config: OrthopairsConfig instance
        """
        self.pipeline_version = pipeline_version
        self.config_hash = config.config_hash()
        self.release_number = config.release_number
        self.source_species = config.source_species
        self.processing_steps = []
        self.created_at = datetime.now(timezone.utc)

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """
        Record a processing step.

        Args:
            step_name: Name of the processing step
            details: Optional dictionary of additional details
        """
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def get_steps(self) -> list[dict]:
        return self.processing_steps

    def create_metadata(self) -> dict:
        """
        Create full provenance metadata dictionary.

        Returns:
            Dictionary with all provenance information
        """
        return {
            "pipeline_version": self.pipeline_version,
            "release_number": self.release_number,
            "source_species": self.source_species,
            "config_hash": self.config_hash,
            "created_at": self.created_at.isoformat(),
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Save provenance metadata as a JSON sidecar file.

        Args:
            output_path: Path to the main output (file or release directory).
                         Sidecar will be saved as {path}.provenance.json

        Returns:
            Path of the written sidecar
        """
        output_path = Path(output_path)
        sidecar_path = output_path.with_name(f"{output_path.name}.provenance.json")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)

        metadata = self.create_metadata()
        with open(sidecar_path, "w") as f:
            json.dump(metadata, f, indent=2, default=str)
        return sidecar_path

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        with open(sidecar_path) as f:
            return json.load(f)

    @classmethod
    def from_config(
        cls,
        config: "OrthopairsConfig",
        version: Optional[str] = None
    ) -> "ProvenanceTracker":
        """
        Create ProvenanceTracker from an OrthopairsConfig.

        Args:
            config: OrthopairsConfig instance
            version: Pipeline version string. If None, uses orthopairs.__version__
        """
        if version is None:
            from orthopairs import __version__
            version = __version__

        return cls(version, config)
