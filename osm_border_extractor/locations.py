"""Pass 3: node locations for the buffered ways."""

import logging
import time
from typing import AbstractSet, Dict, Tuple

import osmium
import osmium.index

from .errors import UnresolvedWayError
from .model import ResolvedWay, UnresolvedWay
from .stats import RunStats

logger = logging.getLogger(__name__)


class NodeLocationResolver(osmium.SimpleHandler):
    """OSM handler storing the locations of needed nodes in an osmium index.

    Only nodes referenced by a buffered way are stored. The index type is
    any name accepted by ``osmium.index.create_map``. Osmium location maps
    only take unsigned ids, so nodes with negative ids (as saved by editors
    such as JOSM) are kept in a plain dict.
    """

    def __init__(self, needed_node_ids: AbstractSet[int], stats: RunStats,
                 index_type: str = "sparse_mem_array"):
        osmium.SimpleHandler.__init__(self)
        self.needed_node_ids = needed_node_ids
        self.stats = stats
        self.locations = osmium.index.create_map(index_type)
        self.negative_locations: Dict[int, Tuple[float, float]] = {}
        self.nodes_seen = 0
        self.nodes_stored = 0

    def node(self, n):
        self.nodes_seen += 1
        if n.id not in self.needed_node_ids:
            return
        if not n.location.valid():
            logger.debug(f"Node {n.id} has an invalid location, not stored")
            return
        if n.id < 0:
            self.negative_locations[n.id] = (n.location.lon, n.location.lat)
        else:
            self.locations.set(n.id, n.location)
        self.nodes_stored += 1

    def read_nodes(self, filename: str) -> None:
        """Run the node pass over an OSM file."""
        start_time = time.time()
        logger.info(f"Reading nodes from {filename} (pass 3)...")

        self.apply_file(filename)

        self.stats.count("nodes_seen", self.nodes_seen)
        self.stats.count("nodes_stored", self.nodes_stored)
        logger.info(f"Stored {self.nodes_stored} of {len(self.needed_node_ids)} needed node locations "
                    f"({self.nodes_seen} nodes read) in {time.time() - start_time:.2f}s")

    def coordinate(self, way_id: int, ref: int) -> Tuple[float, float]:
        if ref < 0:
            if ref not in self.negative_locations:
                raise UnresolvedWayError(way_id, ref)
            return self.negative_locations[ref]
        try:
            location = self.locations.get(ref)
        except KeyError:
            raise UnresolvedWayError(way_id, ref) from None
        return (location.lon, location.lat)

    def resolve(self, way: UnresolvedWay) -> ResolvedWay:
        """Attach a (lon, lat) coordinate to every node of a way.

        Raises UnresolvedWayError if any node location is unknown.
        """
        coordinates = [self.coordinate(way.id, ref) for ref in way.node_refs]

        return ResolvedWay(id=way.id, tags=way.tags, coordinates=tuple(coordinates))
