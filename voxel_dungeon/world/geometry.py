# voxel_dungeon/world/geometry.py
import math
from typing import Any, Dict, Iterator, Mapping, NamedTuple, Sequence, Tuple, Union


class Point3(NamedTuple):
    """Integer grid coordinate. ``y`` indexes the vertical level."""
    x: int
    y: int
    z: int

    def __add__(self, other: "Point3") -> "Point3":  # type: ignore[override]
        return Point3(self.x + other.x, self.y + other.y, self.z + other.z)

    def scaled(self, factor: int) -> "Point3":
        return Point3(self.x * factor, self.y * factor, self.z * factor)

    def as_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def coerce(cls, value: Union["Point3", Mapping[str, Any], Sequence[int]]) -> "Point3":
        """Build a point from a mapping with x/y/z keys or a 3-sequence."""
        if isinstance(value, Point3):
            return value
        if isinstance(value, Mapping):
            return cls(int(value["x"]), int(value["y"]), int(value["z"]))
        x, y, z = value
        return cls(int(x), int(y), int(z))


def euclidean(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt(sum((bv - av) ** 2 for av, bv in zip(a, b)))


class Room(NamedTuple):
    """An axis-aligned box of cells, ``location`` being its minimum corner."""
    location: Point3
    size: Point3

    @property
    def x2(self) -> int:
        return self.location.x + self.size.x

    @property
    def y2(self) -> int:
        return self.location.y + self.size.y

    @property
    def z2(self) -> int:
        return self.location.z + self.size.z

    @property
    def floor(self) -> int:
        """Lowest occupied level; room entrances sit here."""
        return self.location.y

    @property
    def anchor(self) -> Tuple[float, float, float]:
        """Graph vertex: horizontal midpoint on the room floor."""
        return (
            self.location.x + self.size.x / 2,
            float(self.location.y),
            self.location.z + self.size.z / 2,
        )

    def entry_point(self, use_floor: bool) -> Point3:
        """Corridor endpoint inside the room.

        Stairs need the corridor to leave from the floor; single-cell shafts
        start from the vertical midpoint instead.
        """
        y = self.location.y if use_floor else math.floor(self.location.y + self.size.y / 2)
        return Point3(
            math.floor(self.location.x + self.size.x / 2),
            y,
            math.floor(self.location.z + self.size.z / 2),
        )

    def contains_2d(self, x: int, z: int) -> bool:
        return self.location.x <= x < self.x2 and self.location.z <= z < self.z2

    def intersects(self, other: "Room") -> bool:
        """Closed-open overlap on all three axes; touching faces do not count."""
        return self.intersects_2d(other) and not (
            self.location.y >= other.y2 or self.y2 <= other.location.y
        )

    def intersects_2d(self, other: "Room") -> bool:
        return not (
            self.location.x >= other.x2
            or self.x2 <= other.location.x
            or self.location.z >= other.z2
            or self.z2 <= other.location.z
        )

    def inflate_xz(self, spacing: int) -> "Room":
        """Buffer box grown by ``spacing`` cells on x and z, not on y."""
        return Room(
            Point3(self.location.x - spacing, self.location.y, self.location.z - spacing),
            Point3(self.size.x + spacing * 2, self.size.y, self.size.z + spacing * 2),
        )

    def within(self, width: int, levels: int, height: int) -> bool:
        return (
            self.location.x >= 0
            and self.location.y >= 0
            and self.location.z >= 0
            and self.x2 <= width
            and self.y2 <= levels
            and self.z2 <= height
        )

    def cells(self) -> Iterator[Point3]:
        for x in range(self.location.x, self.x2):
            for y in range(self.location.y, self.y2):
                for z in range(self.location.z, self.z2):
                    yield Point3(x, y, z)

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {"location": self.location.as_dict(), "size": self.size.as_dict()}

    @classmethod
    def coerce(cls, value: Union["Room", Mapping[str, Any], Sequence[Any]]) -> "Room":
        if isinstance(value, Room):
            return value
        if isinstance(value, Mapping):
            return cls(Point3.coerce(value["location"]), Point3.coerce(value["size"]))
        location, size = value
        return cls(Point3.coerce(location), Point3.coerce(size))


__all__ = ["Point3", "Room", "euclidean"]
