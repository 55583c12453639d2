"""Writers for classified border lines."""

import abc
import logging
from typing import Dict, TextIO, Type

import geojson

from .config import Config
from .geometry import to_ewkb_hex
from .model import ClassificationRecord

logger = logging.getLogger(__name__)


def escape(value: str) -> str:
    """Escape a value for PostgreSQL COPY text format (as osm2pgsql does)."""
    return (value.replace("\\", "\\\\")
                 .replace("\n", "\\n")
                 .replace("\r", "\\r")
                 .replace("\t", "\\t"))


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_set(values) -> str:
    """Render codes as a PostgreSQL array literal, e.g. ``{A,B}``."""
    return "{" + ",".join(escape(v) for v in values) + "}"


class Outputter(abc.ABC):
    """Takes the information for one way and writes it out."""

    def __init__(self, stream: TextIO, config: Config):
        self.stream = stream
        self.config = config
        self.lines_written = 0

    @abc.abstractmethod
    def output_line(self, record: ClassificationRecord) -> None:
        """Write one classified way."""

    def close(self) -> None:
        self.stream.flush()

    def __enter__(self) -> 'Outputter':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class CsvOutputter(Outputter):
    """Tab separated lines suitable for PostgreSQL COPY."""

    def output_line(self, record: ClassificationRecord) -> None:
        fields = [
            str(record.way_id),
            str(record.admin_level),
            format_bool(record.dividing_line),
        ]
        if self.config.include_neutral:
            fields.append(format_bool(record.neutral))
        fields.extend([
            format_bool(record.disputed),
            format_set(record.disputed_by),
            format_set(record.claimed_by),
            format_bool(record.maritime),
            to_ewkb_hex(record.geometry, self.config.epsg),
        ])
        self.stream.write("\t".join(fields) + "\n")
        self.lines_written += 1


class GeoJsonSeqOutputter(Outputter):
    """One GeoJSON Feature per line."""

    def output_line(self, record: ClassificationRecord) -> None:
        properties = {
            'admin_level': record.admin_level,
            'dividing_line': record.dividing_line,
            'disputed': record.disputed,
            'disputed_by': list(record.disputed_by),
            'claimed_by': list(record.claimed_by),
            'maritime': record.maritime,
        }
        if self.config.include_neutral:
            properties['neutral'] = record.neutral

        line = geojson.LineString(list(record.geometry.coords))
        feature = geojson.Feature(id=record.way_id, geometry=line, properties=properties)
        self.stream.write(geojson.dumps(feature, sort_keys=True) + "\n")
        self.lines_written += 1


OUTPUTTERS: Dict[str, Type[Outputter]] = {
    "csv": CsvOutputter,
    "geojsonseq": GeoJsonSeqOutputter,
}


def create_outputter(config: Config, stream: TextIO) -> Outputter:
    """Create the outputter for the configured format."""
    outputter_class = OUTPUTTERS[config.output_format]
    logger.debug(f"Writing {config.output_format} output with {outputter_class.__name__}")
    return outputter_class(stream, config)
