"""Pydantic models for pipeline configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


UNIPROT_ID_MAPPING_URL = "https://rest.uniprot.org/idmapping"
PANTHER_ORTHOLOG_BASE_URL = "http://data.pantherdb.org/ftp/ortholog/current_release"


class APIConfig(BaseModel):
    """Configuration for the UniProt ID mapping client."""

    base_url: str = Field(
        default=UNIPROT_ID_MAPPING_URL,
        description="Base URL of the UniProt ID mapping REST service",
    )
    batch_size: int = Field(
        default=500,
        ge=1,
        le=100000,
        description="Maximum number of accessions submitted per mapping job",
    )
    max_attempts: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Attempts per batch before the batch is declared failed",
    )
    poll_interval_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Delay between job status polls",
    )
    retry_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Base delay after a transient failure (grows linearly per attempt)",
    )
    timeout_seconds: int = Field(
        default=30,
        ge=1,
        description="Request timeout in seconds",
    )


class OrthopairsConfig(BaseModel):
    """Main pipeline configuration."""

    release_number: int = Field(
        ...,
        ge=1,
        description="Reactome release number; output goes to <output_dir>/<release_number>",
    )
    output_dir: Path = Field(
        default=Path("."),
        description="Directory under which the release directory is created",
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding (or receiving) the PANTHER dump files",
    )
    source_species: str = Field(
        default="hsap",
        description="Species key all homologs are mapped from",
    )
    species_config: Path = Field(
        default=Path("Species.json"),
        description="Path to the species configuration JSON",
    )
    panther_files: list[str] = Field(
        default_factory=lambda: ["QfO_Genome_Orthologs.tar.gz", "Orthologs_HCOP.tar.gz"],
        description="PANTHER ortholog dump archives, relative to data_dir",
    )
    panther_base_url: str | None = Field(
        default=None,
        description="Where to download missing dumps from (None = never download)",
    )
    api: APIConfig = Field(
        default_factory=APIConfig,
        description="UniProt ID mapping client configuration",
    )

    @field_validator("output_dir", "data_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    @field_validator("panther_files")
    @classmethod
    def require_panther_files(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one PANTHER ortholog file is required")
        return v

    @property
    def release_dir(self) -> Path:
        """Directory the mapping files for this release are written to."""
        return self.output_dir / str(self.release_number)

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        useful for telling apart runs made with different settings.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
