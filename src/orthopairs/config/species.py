"""Species configuration: Reactome species keys and their PANTHER names.

Species.json maps a 4-letter Reactome species key to its metadata::

    {
      "hsap": {"name": ["Homo sapiens"], "panther_name": "HUMAN"},
      "mmus": {"name": ["Mus musculus"], "panther_name": "MOUSE"}
    }

PANTHER uses its own species mnemonics, so every lookup between the dump
files and the output file names goes through this registry.
"""

import json
from pathlib import Path
from typing import Iterator

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from orthopairs.exceptions import ConfigurationError

logger = structlog.get_logger()


class SpeciesConfig(BaseModel):
    """Metadata for one species.

    Attributes:
        name: Display names; the first one is the preferred name
        panther_name: Species tag used in the PANTHER dump files (e.g. MOUSE)
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    name: list[str] = Field(..., min_length=1, description="Species display names")
    panther_name: str = Field(..., min_length=1, description="PANTHER species mnemonic")

    @field_validator("name", mode="before")
    @classmethod
    def coerce_single_name(cls, v):
        if isinstance(v, str):
            return [v]
        return v

    @property
    def display_name(self) -> str:
        return self.name[0]


class SpeciesRegistry:
    """Read-only lookup from species key to SpeciesConfig."""

    def __init__(self, species: dict[str, SpeciesConfig]):
        self._species = dict(species)

    def __contains__(self, key: str) -> bool:
        return key in self._species

    def __iter__(self) -> Iterator[str]:
        return iter(self._species)

    def __len__(self) -> int:
        return len(self._species)

    def get(self, key: str) -> SpeciesConfig:
        """Return the config for a species key.

        Raises:
            ConfigurationError: If the key is not configured
        """
        try:
            return self._species[key]
        except KeyError:
            raise ConfigurationError(
                f"Species '{key}' not found in species configuration"
            ) from None

    def panther_name(self, key: str) -> str:
        return self.get(key).panther_name

    def display_name(self, key: str) -> str:
        return self.get(key).display_name

    def target_keys(self, source_key: str) -> list[str]:
        """All configured species keys except the source species, in file order."""
        self.get(source_key)
        return [key for key in self._species if key != source_key]

    def target_panther_names(self, source_key: str) -> set[str]:
        return {self._species[key].panther_name for key in self.target_keys(source_key)}

    @classmethod
    def from_dict(cls, data: dict) -> "SpeciesRegistry":
        """Build a registry from the parsed Species.json content.

        Raises:
            ConfigurationError: If an entry is missing required fields
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Species configuration must be a JSON object")

        species = {}
        for key, entry in data.items():
            try:
                species[key] = SpeciesConfig.model_validate(entry)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid species entry '{key}': {e}") from e
        return cls(species)


def load_species_registry(path: Path | str) -> SpeciesRegistry:
    """Load Species.json into a SpeciesRegistry.

    Raises:
        ConfigurationError: If the file is missing or is not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Species configuration not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Species configuration {path} is not valid JSON: {e}") from e

    registry = SpeciesRegistry.from_dict(data)
    logger.info("species_registry_loaded", path=str(path), species_count=len(registry))
    return registry
