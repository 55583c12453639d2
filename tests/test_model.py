"""Unit tests for the shared record types."""

from osm_border_extractor.model import (
    ADMIN_LEVELS,
    Member,
    RelationRecord,
    Tags,
    is_boundary_relation,
)


class TestTags:
    """Tests for tag lookup."""

    def test_get_returns_first_match(self) -> None:
        tags = Tags([("name", "first"), ("name", "second")])
        assert tags.get("name") == "first"

    def test_get_default(self) -> None:
        assert Tags().get("name") is None
        assert Tags().get("name", "") == ""

    def test_has_tag(self) -> None:
        tags = Tags([("boundary", "administrative")])
        assert tags.has_tag("boundary", "administrative")
        assert not tags.has_tag("boundary", "claim")
        assert not tags.has_tag("admin_level", "2")

    def test_contains_and_len(self) -> None:
        tags = Tags([("disputed_by", ""), ("a", "b")])
        assert "disputed_by" in tags
        assert "missing" not in tags
        assert len(tags) == 2
        assert list(tags) == [("disputed_by", ""), ("a", "b")]

    def test_equality(self) -> None:
        assert Tags([("a", "b")]) == Tags([("a", "b")])
        assert Tags([("a", "b")]) != Tags([("a", "c")])


class TestBoundaryPredicate:
    """Tests for is_boundary_relation."""

    def test_boundary_types(self) -> None:
        for value in ("administrative", "claim", "disputed"):
            assert is_boundary_relation(Tags([("boundary", value)]))

    def test_other_boundaries(self) -> None:
        assert not is_boundary_relation(Tags([("boundary", "postal_code")]))
        assert not is_boundary_relation(Tags([("type", "multipolygon")]))


class TestRelationRecord:
    """Tests for RelationRecord."""

    def test_way_refs_in_member_order(self) -> None:
        record = RelationRecord(
            id=1,
            tags=Tags(),
            members=(Member("w", 5), Member("n", 7), Member("w", 3), Member("r", 9), Member("w", 5)),
        )
        assert list(record.way_refs()) == [5, 3, 5]


def test_admin_levels_table() -> None:
    assert ADMIN_LEVELS["2"] == 2
    assert ADMIN_LEVELS["12"] == 12
    assert "1" not in ADMIN_LEVELS
    assert "13" not in ADMIN_LEVELS
    assert "foo" not in ADMIN_LEVELS
