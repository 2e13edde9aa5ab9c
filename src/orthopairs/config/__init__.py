from .loader import load_config, load_config_with_overrides
from .schema import OrthopairsConfig, APIConfig
from .species import SpeciesConfig, SpeciesRegistry, load_species_registry

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "OrthopairsConfig",
    "APIConfig",
    "SpeciesConfig",
    "SpeciesRegistry",
    "load_species_registry",
]
