"""Unit tests for the relation pass."""

from pathlib import Path

from osm_border_extractor.collector import RelationCollector, RelationStore, WayRelationIndex
from osm_border_extractor.model import Member, RelationRecord, Tags
from osm_border_extractor.stats import RunStats


def make_relation(rel_id, way_ids, **tags) -> RelationRecord:
    return RelationRecord(
        id=rel_id,
        tags=Tags(tags.items()),
        members=tuple(Member("w", way_id) for way_id in way_ids),
    )


class TestRelationStore:
    """Tests for the append-only relation store."""

    def test_offsets_are_stable(self) -> None:
        store = RelationStore()
        first = store.append(make_relation(1, []))
        second = store.append(make_relation(2, []))
        assert first != second
        assert store.get(first).id == 1
        assert store.get(second).id == 2
        assert len(store) == 2


class TestWayRelationIndex:
    """Tests for the way -> parent relation index."""

    def test_insertion_order_and_duplicates(self) -> None:
        index = WayRelationIndex()
        index.add(10, 3)
        index.add(10, 1)
        index.add(10, 3)
        assert index.parents(10) == (3, 1, 3)

    def test_unknown_way(self) -> None:
        index = WayRelationIndex()
        assert 10 not in index
        assert index.parents(10) == ()


class TestRelationCollector:
    """Tests for observe_relation and the relation pass."""

    def test_keeps_boundary_relations(self) -> None:
        collector = RelationCollector(RunStats())
        collector.observe_relation(make_relation(1, [10, 11], boundary="administrative", admin_level="4"))
        collector.observe_relation(make_relation(2, [11], boundary="claim"))
        collector.observe_relation(make_relation(3, [12], boundary="disputed"))

        assert len(collector.store) == 3
        for way_id, relation_ids in ((10, [1]), (11, [1, 2]), (12, [3])):
            assert way_id in collector.index
            parents = [collector.store.get(offset).id for offset in collector.index.parents(way_id)]
            assert parents == relation_ids

    def test_offsets_dereference_to_tags(self) -> None:
        collector = RelationCollector(RunStats())
        relation = make_relation(7, [10], boundary="administrative", admin_level="6")
        collector.observe_relation(relation)
        (offset,) = collector.index.parents(10)
        assert collector.store.get(offset).tags == relation.tags

    def test_ignores_other_relations(self) -> None:
        collector = RelationCollector(RunStats())
        collector.observe_relation(make_relation(1, [10], boundary="postal_code"))
        collector.observe_relation(make_relation(2, [11], type="multipolygon"))
        assert len(collector.store) == 0
        assert 10 not in collector.index
        assert 11 not in collector.index

    def test_ignores_non_way_members(self) -> None:
        collector = RelationCollector(RunStats())
        collector.observe_relation(RelationRecord(
            id=1,
            tags=Tags([("boundary", "administrative")]),
            members=(Member("n", 10), Member("r", 11), Member("w", 12)),
        ))
        assert list(collector.index.way_ids()) == [12]

    def test_read_relations(self, clean_osm: Path) -> None:
        stats = RunStats()
        collector = RelationCollector(stats)
        collector.read_relations(str(clean_osm))

        assert [r.id for r in collector.store] == [100, 101, 102, 103, 104]
        assert collector.relations_seen == 6
        assert stats.counts["relations_kept"] == 5
        assert 13 not in collector.index
        parents = [collector.store.get(offset).id for offset in collector.index.parents(10)]
        assert parents == [100, 101, 102]
