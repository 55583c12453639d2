"""Pass 2: keep only the ways referenced by boundary relations."""

import logging
import time
from typing import Dict, Iterator, Set

import osmium

from .collector import WayRelationIndex
from .model import UnresolvedWay
from .stats import RunStats

logger = logging.getLogger(__name__)


class WayFilter(osmium.SimpleHandler):
    """OSM handler to buffer boundary member ways before node locations are known.

    The way -> relation index must be complete when this pass starts,
    otherwise ways of relations that were not seen yet would be dropped.
    """

    def __init__(self, index: WayRelationIndex, stats: RunStats):
        osmium.SimpleHandler.__init__(self)
        self.index = index
        self.stats = stats
        self._ways: Dict[int, UnresolvedWay] = {}
        self.needed_node_ids: Set[int] = set()
        self.ways_seen = 0

    def way(self, w):
        """Copy only the ways the index knows about."""
        self.ways_seen += 1
        if w.id in self.index:
            self.observe_way(UnresolvedWay.from_osm(w))

    def observe_way(self, way: UnresolvedWay) -> None:
        if way.id not in self.index:
            return
        if way.id in self._ways:
            self.stats.warning(f"Way {way.id} appears more than once in the input, keeping the first copy")
            return

        self._ways[way.id] = way
        self.needed_node_ids.update(way.node_refs)

    def ways(self) -> Iterator[UnresolvedWay]:
        """Buffered ways in input order."""
        return iter(self._ways.values())

    def __contains__(self, way_id: object) -> bool:
        return way_id in self._ways

    def __len__(self) -> int:
        return len(self._ways)

    def read_ways(self, filename: str) -> None:
        """Run the way filter pass over an OSM file."""
        start_time = time.time()
        logger.info(f"Reading ways from {filename} (pass 2)...")

        self.apply_file(filename)

        missing = len(self.index) - len(self._ways)
        if missing > 0:
            logger.info(f"{missing} ways referenced by boundary relations are not in the input")

        self.stats.count("ways_seen", self.ways_seen)
        self.stats.count("ways_kept", len(self._ways))
        logger.info(f"Kept {len(self._ways)} of {self.ways_seen} ways, "
                    f"referencing {len(self.needed_node_ids)} nodes in {time.time() - start_time:.2f}s")
