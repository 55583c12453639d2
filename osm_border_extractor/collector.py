"""Pass 1: collect boundary relations and index their way members."""

import logging
import time
from typing import Dict, Iterator, List, Tuple

import osmium

from .model import RelationRecord, is_boundary_relation
from .stats import RunStats

logger = logging.getLogger(__name__)


class RelationStore:
    """Append-only arena of relation records addressed by integer offset.

    Records are never removed or replaced, so an offset handed out by
    ``append`` stays valid for the lifetime of the store.
    """

    def __init__(self):
        self._records: List[RelationRecord] = []

    def append(self, record: RelationRecord) -> int:
        self._records.append(record)
        return len(self._records) - 1

    def get(self, offset: int) -> RelationRecord:
        return self._records[offset]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RelationRecord]:
        return iter(self._records)


class WayRelationIndex:
    """Maps a way id to the store offsets of its parent relations.

    Offsets are kept in discovery order. A relation listing the same way
    twice produces two entries.
    """

    def __init__(self):
        self._parents: Dict[int, List[int]] = {}

    def add(self, way_id: int, offset: int) -> None:
        self._parents.setdefault(way_id, []).append(offset)

    def parents(self, way_id: int) -> Tuple[int, ...]:
        return tuple(self._parents.get(way_id, ()))

    def way_ids(self) -> Iterator[int]:
        return iter(self._parents)

    def __contains__(self, way_id: object) -> bool:
        return way_id in self._parents

    def __len__(self) -> int:
        return len(self._parents)


class RelationCollector(osmium.SimpleHandler):
    """OSM handler reading relations only and keeping the boundary ones."""

    def __init__(self, stats: RunStats):
        osmium.SimpleHandler.__init__(self)
        self.stats = stats
        self.store = RelationStore()
        self.index = WayRelationIndex()
        self.relations_seen = 0

    def relation(self, r):
        """Copy each relation out of the osmium buffer and observe it."""
        self.relations_seen += 1
        # Check the tags before copying members, most relations are dropped
        if r.tags.get("boundary") is None:
            return
        self.observe_relation(RelationRecord.from_osm(r))

    def observe_relation(self, record: RelationRecord) -> None:
        """Store a boundary relation and register it with each of its ways."""
        if not is_boundary_relation(record.tags):
            return

        # The relation and all of its way entries are added together so the
        # index never points at a relation that is only partly registered.
        offset = self.store.append(record)
        for way_id in record.way_refs():
            self.index.add(way_id, offset)

        logger.debug(f"Kept relation {record.id} ({record.tags.get('boundary')}) at offset {offset}")

    def read_relations(self, filename: str) -> None:
        """Run the relation pass over an OSM file."""
        start_time = time.time()
        logger.info(f"Reading relations from {filename} (pass 1)...")

        self.apply_file(filename)

        self.stats.count("relations_seen", self.relations_seen)
        self.stats.count("relations_kept", len(self.store))
        logger.info(f"Kept {len(self.store)} of {self.relations_seen} relations, "
                    f"referencing {len(self.index)} ways in {time.time() - start_time:.2f}s")
