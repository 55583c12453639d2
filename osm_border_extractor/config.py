"""Configuration for border extraction runs."""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Any

import osmium
import osmium.index
import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("csv", "geojsonseq")

# EPSG codes we know how to produce. 900913 is the historic "Google" code.
SUPPORTED_EPSG = {4326: 4326, 3857: 3857, 900913: 3857}


@dataclass
class Config:
    """Configuration class for border extraction parameters."""
    # Output parameters
    output_format: str = "csv"
    epsg: int = 3857
    include_neutral: bool = True
    overwrite: bool = False

    # Processing parameters
    location_index: str = "sparse_mem_array"

    # Logging / reporting parameters
    max_warnings: int = 500
    verbose: bool = False
    debug: bool = False

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'Config':
        """Load configuration from YAML file."""
        with open(yaml_path, 'r') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"{yaml_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{yaml_path}: expected a mapping at the top level")

        config_dict = {}

        # Map YAML sections to Config attributes
        if 'output' in data:
            output = data['output'] or {}
            config_dict.update({
                'output_format': output.get('format', 'csv'),
                'epsg': _to_int(output.get('epsg', 3857), 'output.epsg'),
                'include_neutral': bool(output.get('include_neutral', True)),
                'overwrite': bool(output.get('overwrite', False)),
            })

        if 'processing' in data:
            processing = data['processing'] or {}
            config_dict.update({
                'location_index': processing.get('location_index', 'sparse_mem_array'),
            })

        if 'logging' in data:
            log_section = data['logging'] or {}
            config_dict.update({
                'max_warnings': _to_int(log_section.get('max_warnings', 500), 'logging.max_warnings'),
                'verbose': bool(log_section.get('verbose', False)),
                'debug': bool(log_section.get('debug', False)),
            })

        return cls(**config_dict)

    def validate(self) -> None:
        """Raise ConfigError if any value is out of range."""
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Unknown output format '{self.output_format}' "
                f"(expected one of: {', '.join(OUTPUT_FORMATS)})")
        if self.epsg not in SUPPORTED_EPSG:
            raise ConfigError(
                f"Unsupported EPSG code {self.epsg} "
                f"(supported: {', '.join(str(c) for c in sorted(SUPPORTED_EPSG))})")
        if self.max_warnings <= 0:
            raise ConfigError("max_warnings must be a positive number")
        if self.location_index not in osmium.index.map_types():
            raise ConfigError(f"Unknown location index type '{self.location_index}'")
        if self.output_format == "geojsonseq" and self.epsg != 4326:
            logger.warning(f"GeoJSON output with EPSG:{self.epsg} coordinates is not RFC 7946 conformant")

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _to_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
