"""
Record types shared by all passes.

pyosmium objects are only valid inside the handler callback that received
them, so every pass copies what it needs into the immutable records below.
A way exists in two shapes: ``UnresolvedWay`` (node ids only, pass 2) and
``ResolvedWay`` (coordinates, pass 4). Both carry the same way id.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from shapely.geometry import LineString

# admin_level tag values we rank. Anything else is treated as absent.
ADMIN_LEVELS = {str(level): level for level in range(2, 13)}

# boundary=* values that make a relation interesting
BOUNDARY_TYPES = frozenset(("administrative", "claim", "disputed"))


class Tags:
    """Immutable ordered list of (key, value) pairs with first-match lookup."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Tuple[str, str]] = ()):
        self._items = tuple((str(k), str(v)) for k, v in items)

    @classmethod
    def from_osm(cls, taglist) -> 'Tags':
        """Copy a pyosmium TagList."""
        return cls((tag.k, tag.v) for tag in taglist)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for k, v in self._items:
            if k == key:
                return v
        return default

    def has_tag(self, key: str, value: str) -> bool:
        return self.get(key) == value

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self._items)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tags):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"Tags({list(self._items)!r})"


def is_boundary_relation(tags: Tags) -> bool:
    """True for boundary=administrative, boundary=claim and boundary=disputed."""
    return tags.get("boundary") in BOUNDARY_TYPES


@dataclass(frozen=True)
class Member:
    type: str  # 'n', 'w' or 'r'
    ref: int
    role: str = ""


@dataclass(frozen=True)
class RelationRecord:
    id: int
    tags: Tags
    members: Tuple[Member, ...] = ()

    @classmethod
    def from_osm(cls, relation) -> 'RelationRecord':
        return cls(
            id=relation.id,
            tags=Tags.from_osm(relation.tags),
            members=tuple(Member(m.type, m.ref, m.role) for m in relation.members),
        )

    def way_refs(self) -> Iterator[int]:
        """Way member ids in member order."""
        for member in self.members:
            if member.type == "w":
                yield member.ref


@dataclass(frozen=True)
class UnresolvedWay:
    id: int
    tags: Tags
    node_refs: Tuple[int, ...]

    @classmethod
    def from_osm(cls, way) -> 'UnresolvedWay':
        return cls(
            id=way.id,
            tags=Tags.from_osm(way.tags),
            node_refs=tuple(n.ref for n in way.nodes),
        )


@dataclass(frozen=True)
class ResolvedWay:
    id: int
    tags: Tags
    coordinates: Tuple[Tuple[float, float], ...]  # (lon, lat)


@dataclass(frozen=True)
class ClassificationRecord:
    """One output line: a boundary way and its derived attributes."""
    way_id: int
    admin_level: int
    dividing_line: bool
    neutral: bool
    disputed: bool
    disputed_by: Tuple[str, ...]
    claimed_by: Tuple[str, ...]
    maritime: bool
    geometry: LineString
