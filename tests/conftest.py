"""Shared fixtures: small OSM XML files written on the fly."""

from pathlib import Path
from typing import Dict, List, Sequence, Tuple
from xml.sax.saxutils import quoteattr

import pytest

from osm_border_extractor.config import Config
from osm_border_extractor.stats import RunStats

NodeSpec = Tuple[int, float, float]  # id, lon, lat
WaySpec = Tuple[int, Sequence[int], Dict[str, str]]  # id, node refs, tags
RelationSpec = Tuple[int, Sequence[Tuple[str, int]], Dict[str, str]]  # id, members, tags

MEMBER_TYPES = {"n": "node", "w": "way", "r": "relation"}


def _tags_xml(tags: Dict[str, str]) -> List[str]:
    return [f'    <tag k={quoteattr(k)} v={quoteattr(v)}/>' for k, v in tags.items()]


def write_osm(path: Path, nodes: Sequence[NodeSpec], ways: Sequence[WaySpec] = (),
              relations: Sequence[RelationSpec] = ()) -> Path:
    """Write an OSM XML file with the given objects in the given order."""
    lines = ["<?xml version='1.0' encoding='UTF-8'?>", '<osm version="0.6" generator="tests">']
    for node_id, lon, lat in nodes:
        lines.append(f'  <node id="{node_id}" version="1" lat="{lat}" lon="{lon}"/>')
    for way_id, refs, tags in ways:
        lines.append(f'  <way id="{way_id}" version="1">')
        lines.extend(f'    <nd ref="{ref}"/>' for ref in refs)
        lines.extend(_tags_xml(tags))
        lines.append('  </way>')
    for rel_id, members, tags in relations:
        lines.append(f'  <relation id="{rel_id}" version="1">')
        lines.extend(f'    <member type="{MEMBER_TYPES[t]}" ref="{ref}" role="outer"/>' for t, ref in members)
        lines.extend(_tags_xml(tags))
        lines.append('  </relation>')
    lines.append('</osm>')
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


NODES = [
    (1, 10.0, 50.0),
    (2, 10.1, 50.0),
    (3, 10.2, 50.1),
    (4, 10.3, 50.1),
    (5, 10.4, 50.2),
    (6, 10.5, 50.2),
]

ADMIN_4 = {"type": "boundary", "boundary": "administrative", "admin_level": "4"}
ADMIN_2 = {"type": "boundary", "boundary": "administrative", "admin_level": "2"}


@pytest.fixture
def clean_osm(tmp_path: Path) -> Path:
    """Boundaries without any problem ways."""
    return write_osm(
        tmp_path / "clean.osm",
        nodes=NODES,
        ways=[
            (10, [1, 2], {}),
            (11, [2, 3], {"disputed_by": "A;B; B"}),
            (13, [4, 5], {"natural": "coastline"}),
            (14, [5, 6], {}),
        ],
        relations=[
            (100, [("w", 10), ("w", 11), ("n", 1)], dict(ADMIN_4, name="North")),
            (101, [("w", 10)], dict(ADMIN_4, name="South")),
            (102, [("w", 10), ("r", 100)], ADMIN_2),
            (103, [("w", 11)], {"type": "boundary", "boundary": "claim", "claimed_by": "B;C"}),
            (104, [("w", 14)], {"type": "boundary", "boundary": "administrative", "admin_level": "foo"}),
            (105, [("w", 13)], {"type": "boundary", "boundary": "postal_code", "admin_level": "4"}),
        ],
    )


@pytest.fixture
def broken_osm(tmp_path: Path) -> Path:
    """One way with a missing node and one degenerate way."""
    return write_osm(
        tmp_path / "broken.osm",
        nodes=NODES,
        ways=[
            (10, [1, 2], {}),
            (15, [6, 6], {}),
            (16, [1, 99], {}),
        ],
        relations=[
            (100, [("w", 10), ("w", 15), ("w", 16)], ADMIN_4),
        ],
    )


@pytest.fixture
def editor_osm(tmp_path: Path) -> Path:
    """New objects with negative ids, as saved by an editor, mixed with existing ones."""
    return write_osm(
        tmp_path / "editor.osm",
        nodes=[(-2, 10.1, 50.0), (-1, 10.0, 50.0), (1, 10.2, 50.1)],
        ways=[
            (-11, [-1, -3], {}),
            (-10, [-1, -2, 1], {}),
        ],
        relations=[
            (-100, [("w", -10), ("w", -11)], ADMIN_4),
        ],
    )


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def stats() -> RunStats:
    return RunStats()
