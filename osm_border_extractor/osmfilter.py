"""
Write a reduced OSM file containing only boundary relations, their member
ways and the nodes of those ways. The result is a valid, much smaller input
for the border extractor.
"""

import logging
import time
from typing import Set

import osmium

from .model import Tags, is_boundary_relation
from .stats import RunStats

logger = logging.getLogger(__name__)


class BoundaryRelationWriter(osmium.SimpleHandler):
    """Copies boundary relations to the writer and remembers their ways."""

    def __init__(self, writer):
        osmium.SimpleHandler.__init__(self)
        self.writer = writer
        self.way_ids: Set[int] = set()
        self.written = 0

    def relation(self, r):
        if not is_boundary_relation(Tags.from_osm(r.tags)):
            return
        self.writer.add_relation(r)
        self.written += 1
        for member in r.members:
            if member.type == "w":
                self.way_ids.add(member.ref)


class MemberWayWriter(osmium.SimpleHandler):
    """Copies member ways to the writer and remembers their nodes."""

    def __init__(self, writer, way_ids: Set[int]):
        osmium.SimpleHandler.__init__(self)
        self.writer = writer
        self.way_ids = way_ids
        self.node_ids: Set[int] = set()
        self.written = 0

    def way(self, w):
        if w.id not in self.way_ids:
            return
        self.writer.add_way(w)
        self.written += 1
        self.node_ids.update(n.ref for n in w.nodes)


class MemberNodeWriter(osmium.SimpleHandler):
    """Copies the nodes of member ways to the writer."""

    def __init__(self, writer, node_ids: Set[int]):
        osmium.SimpleHandler.__init__(self)
        self.writer = writer
        self.node_ids = node_ids
        self.written = 0

    def node(self, n):
        if n.id in self.node_ids:
            self.writer.add_node(n)
            self.written += 1


def filter_boundaries(input_file: str, output_file: str, stats: RunStats) -> RunStats:
    """Copy the boundary subset of input_file into output_file.

    The output format is chosen by osmium from the file name suffix.
    """
    start_time = time.time()
    writer = osmium.SimpleWriter(output_file)
    try:
        logger.info("Reading relations (1st pass through input file)...")
        relations = BoundaryRelationWriter(writer)
        relations.apply_file(input_file)

        logger.info("Reading ways (2nd pass through input file)...")
        ways = MemberWayWriter(writer, relations.way_ids)
        ways.apply_file(input_file)

        logger.info("Reading nodes (3rd pass through input file)...")
        nodes = MemberNodeWriter(writer, ways.node_ids)
        nodes.apply_file(input_file)
    finally:
        writer.close()

    stats.count("relations_written", relations.written)
    stats.count("ways_written", ways.written)
    stats.count("nodes_written", nodes.written)
    logger.info(f"Wrote {relations.written} relations, {ways.written} ways and {nodes.written} nodes "
                f"to {output_file} in {time.time() - start_time:.2f}s")
    return stats
