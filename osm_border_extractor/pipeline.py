"""Four pass extraction: relations, ways, nodes, then classification."""

import logging
import time
from typing import Optional

from .classifier import WayClassifier
from .collector import RelationCollector
from .config import Config
from .errors import UnresolvedWayError
from .geometry import GeometryBuilder
from .locations import NodeLocationResolver
from .output import Outputter
from .stats import RunStats
from .waysfilter import WayFilter

logger = logging.getLogger(__name__)


class BorderExtractor:
    """Runs the passes over one input file and feeds an outputter.

    Each pass reads the whole file for one kind of OSM object and finishes
    before the next one starts: the relation index must be complete before
    ways are filtered, and the filtered ways decide which node locations are
    kept.
    """

    def __init__(self, config: Config, stats: Optional[RunStats] = None):
        self.config = config
        self.stats = stats if stats is not None else RunStats()
        self.geometry_builder = GeometryBuilder(config.epsg)

    def run(self, input_file: str, outputter: Outputter) -> RunStats:
        start_time = time.time()
        logger.debug(f"Configuration: {self.config.as_dict()}")

        # Pass 1: boundary relations and the way -> relation index
        collector = RelationCollector(self.stats)
        collector.read_relations(input_file)

        if not len(collector.store):
            logger.warning("No boundary relations found in the input file")

        # Pass 2: ways that belong to those relations
        way_filter = WayFilter(collector.index, self.stats)
        way_filter.read_ways(input_file)

        # Pass 3: locations of the nodes of those ways
        resolver = NodeLocationResolver(way_filter.needed_node_ids, self.stats,
                                        self.config.location_index)
        resolver.read_nodes(input_file)

        # Pass 4: classify buffered ways and write them out
        logger.info("Classifying boundary ways (pass 4)...")
        pass_start = time.time()
        classifier = WayClassifier(collector.store, collector.index, self.geometry_builder, self.stats)
        emitted = 0
        for way in way_filter.ways():
            try:
                resolved = resolver.resolve(way)
            except UnresolvedWayError as e:
                self.stats.warning(f"Skipping {e}")
                self.stats.count("ways_unresolved")
                continue

            record = classifier.classify(resolved)
            if record is None:
                continue

            outputter.output_line(record)
            emitted += 1

        self.stats.count("ways_emitted", emitted)
        logger.info(f"Wrote {emitted} boundary lines in {time.time() - pass_start:.2f}s")
        logger.info(f"All done in {time.time() - start_time:.2f}s")

        return self.stats
