"""Domain models for dogs, walks and the responses built from them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Dog:
    dog_id: int | None
    name: str
    birthday: date


@dataclass(frozen=True)
class Coordinate:
    x: int
    y: int


@dataclass(frozen=True)
class PathPoint:
    x: int
    y: int
    sequence_order: int

    def to_coordinate(self) -> Coordinate:
        return Coordinate(x=self.x, y=self.y)


@dataclass(frozen=True)
class Walk:
    walk_id: int | None
    dogs: tuple[Dog, ...]
    path: tuple[PathPoint, ...]

    @property
    def dog_ids(self) -> frozenset[int]:
        return frozenset(dog.dog_id for dog in self.dogs if dog.dog_id is not None)

    @property
    def coordinates(self) -> tuple[Coordinate, ...]:
        """Return the path in the order it was walked."""
        ordered = sorted(self.path, key=lambda point: point.sequence_order)
        return tuple(point.to_coordinate() for point in ordered)


@dataclass(frozen=True)
class MetFriends:
    friends: tuple[str, ...]


@dataclass(frozen=True)
class FriendsResponse:
    friends: tuple[str, ...]
    picture_of_friends: bytes

    @classmethod
    def empty(cls) -> FriendsResponse:
        return cls(friends=(), picture_of_friends=b"")


@dataclass(frozen=True)
class WalkResponse:
    walk_id: int
    dogs: tuple[Dog, ...]
    path: tuple[Coordinate, ...]


@dataclass(frozen=True)
class Problem:
    """A reported, non-fatal outcome of a validation step."""

    status: int
    title: str
    detail: str
