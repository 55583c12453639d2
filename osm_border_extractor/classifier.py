"""
Pass 4: derive the border attributes of a way from its own tags and the
tags of its parent relations.
"""

import logging
import string
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .collector import RelationStore, WayRelationIndex
from .errors import GeometryError
from .geometry import GeometryBuilder
from .model import ADMIN_LEVELS, ClassificationRecord, ResolvedWay, Tags
from .stats import RunStats

logger = logging.getLogger(__name__)

# Characters stripped from both ends of each territory code
TERRITORY_STRIP_CHARS = string.whitespace + '"'

# Own tags that mark a way as disputed
DISPUTED_TAGS = (
    ("disputed", "yes"),
    ("dispute", "yes"),
    ("border_status", "dispute"),
    ("boundary", "disputed"),
)

# Own tags that mark a way as maritime
MARITIME_TAGS = (
    ("maritime", "yes"),
    ("natural", "coastline"),
    ("boundary_type", "maritime"),
)


@dataclass(frozen=True)
class BorderAttributes:
    """Tag-derived fields of a boundary way, everything except geometry."""
    admin_level: int
    dividing_line: bool
    neutral: bool
    disputed: bool
    disputed_by: Tuple[str, ...]
    claimed_by: Tuple[str, ...]
    maritime: bool


def parse_territories(value: Optional[str]) -> Tuple[str, ...]:
    """Split a ``;`` separated list of territory codes into a sorted unique tuple."""
    if not value:
        return ()
    tokens = (token.strip(TERRITORY_STRIP_CHARS) for token in value.split(";"))
    return tuple(sorted({token for token in tokens if token}))


def _has_any(tags: Tags, candidates: Iterable[Tuple[str, str]]) -> bool:
    return any(tags.has_tag(key, value) for key, value in candidates)


def aggregate_tags(way_tags: Tags, parent_tags: Iterable[Tags]) -> Optional[BorderAttributes]:
    """Combine a way's tags with its parents' tags.

    ``parent_tags`` must be in relation discovery order. Returns None when no
    parent has a recognized admin_level, such a way is not a border line.
    """
    disputed = _has_any(way_tags, DISPUTED_TAGS) or "disputed_by" in way_tags
    disputed_by = parse_territories(way_tags.get("disputed_by"))
    maritime = _has_any(way_tags, MARITIME_TAGS)

    neutral = False
    levels = []
    claimed = []
    for tags in parent_tags:
        boundary = tags.get("boundary")
        if boundary == "administrative":
            neutral = True
        elif boundary == "claim":
            disputed = True

        level = ADMIN_LEVELS.get(tags.get("admin_level", ""))
        if level is not None:
            levels.append(level)

        claimed.extend(parse_territories(tags.get("claimed_by")))

    if not levels:
        return None

    claimed_by = ()
    if claimed:
        # A territory already listed as disputing the line is not repeated as a claimant
        claimed_by = tuple(sorted(set(claimed) - set(disputed_by)))

    levels.sort()
    dividing_line = any(a == b for a, b in zip(levels, levels[1:]))

    return BorderAttributes(
        admin_level=levels[0],
        dividing_line=dividing_line,
        neutral=neutral,
        disputed=disputed,
        disputed_by=disputed_by,
        claimed_by=claimed_by,
        maritime=maritime,
    )


class WayClassifier:
    """Turns resolved boundary ways into output records."""

    def __init__(self, relations: RelationStore, index: WayRelationIndex,
                 geometry_builder: GeometryBuilder, stats: RunStats):
        self.relations = relations
        self.index = index
        self.geometry_builder = geometry_builder
        self.stats = stats

    def parent_tags(self, way_id: int) -> Iterable[Tags]:
        for offset in self.index.parents(way_id):
            yield self.relations.get(offset).tags

    def classify(self, way: ResolvedWay) -> Optional[ClassificationRecord]:
        """Return the record for a way, or None if the way is skipped."""
        attributes = aggregate_tags(way.tags, self.parent_tags(way.id))
        if attributes is None:
            logger.debug(f"Way {way.id}: no parent relation with a known admin_level, skipped")
            self.stats.count("ways_without_admin_level")
            return None

        try:
            geometry = self.geometry_builder.build(way)
        except GeometryError as e:
            self.stats.error(f"Geometry error on {e}")
            self.stats.count("geometry_errors")
            return None

        return ClassificationRecord(
            way_id=way.id,
            admin_level=attributes.admin_level,
            dividing_line=attributes.dividing_line,
            neutral=attributes.neutral,
            disputed=attributes.disputed,
            disputed_by=attributes.disputed_by,
            claimed_by=attributes.claimed_by,
            maritime=attributes.maritime,
            geometry=geometry,
        )
