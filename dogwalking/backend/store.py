"""Persistence interfaces and implementations for dogs and walks."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
import itertools
import threading
from typing import Any, Collection, Iterable, Protocol

from dogwalking.backend.models import Dog, PathPoint, Walk


class DuplicateDogError(RuntimeError):
    """Raised when a dog with the same name and birthday is already stored."""


class DogWalkingStore(Protocol):
    def find_dog(self, dog_id: int) -> Dog | None:
        """Return the dog with the given id."""

    def find_dog_by_name_and_birthday(self, name: str, birthday: date) -> Dog | None:
        """Return the dog matching the deduplication key."""

    def find_dogs_by_name(self, names: Collection[str]) -> tuple[Dog, ...]:
        """Return every dog whose name is in names."""

    def find_walk(self, walk_id: int) -> Walk | None:
        """Return the walk with its dogs and its ordered path."""

    def find_walks_excluding_dogs(self, dog_ids: Collection[int]) -> list[Walk]:
        """Return every walk none of whose dogs is in dog_ids."""

    def insert_dog(self, dog: Dog) -> Dog:
        """Persist a dog and return it with its assigned id."""

    def insert_walk(self, walk: Walk) -> Walk:
        """Persist a walk with its dogs and path and return it with its assigned id."""


@dataclass
class InMemoryDogWalkingStore:
    def __post_init__(self) -> None:
        self._lock = threading.RLock()
        self._dog_ids = itertools.count(1)
        self._walk_ids = itertools.count(1)
        self._coordinate_ids = itertools.count(1)
        self._dogs: dict[int, Dog] = {}
        self._walks: dict[int, dict[str, Any]] = {}

    def find_dog(self, dog_id: int) -> Dog | None:
        with self._lock:
            return self._dogs.get(dog_id)

    def find_dog_by_name_and_birthday(self, name: str, birthday: date) -> Dog | None:
        with self._lock:
            for dog in self._dogs.values():
                if dog.name == name and dog.birthday == birthday:
                    return dog
        return None

    def find_dogs_by_name(self, names: Collection[str]) -> tuple[Dog, ...]:
        wanted = set(names)
        with self._lock:
            return tuple(dog for dog in self._dogs.values() if dog.name in wanted)

    def find_walk(self, walk_id: int) -> Walk | None:
        with self._lock:
            payload = self._walks.get(walk_id)
            if payload is None:
                return None
            return self._to_walk(walk_id, payload)

    def find_walks_excluding_dogs(self, dog_ids: Collection[int]) -> list[Walk]:
        excluded = set(dog_ids)
        with self._lock:
            return [
                self._to_walk(walk_id, payload)
                for walk_id, payload in self._walks.items()
                if excluded.isdisjoint(payload["dogIds"])
            ]

    def insert_dog(self, dog: Dog) -> Dog:
        with self._lock:
            if self.find_dog_by_name_and_birthday(dog.name, dog.birthday) is not None:
                raise DuplicateDogError(f"Dog {dog.name} born {dog.birthday.isoformat()} already exists")
            stored = replace(dog, dog_id=next(self._dog_ids))
            self._dogs[stored.dog_id] = stored
        return stored

    def insert_walk(self, walk: Walk) -> Walk:
        with self._lock:
            walk_id = next(self._walk_ids)
            self._walks[walk_id] = {
                "dogIds": [dog.dog_id for dog in walk.dogs],
                # Keyed by row id; iteration order says nothing about path order.
                "coordinates": {
                    next(self._coordinate_ids): (point.x, point.y, point.sequence_order) for point in walk.path
                },
            }
            return self._to_walk(walk_id, self._walks[walk_id])

    def _to_walk(self, walk_id: int, payload: dict[str, Any]) -> Walk:
        rows = sorted(payload["coordinates"].values(), key=lambda row: row[2])
        return Walk(
            walk_id=walk_id,
            dogs=tuple(self._dogs[dog_id] for dog_id in payload["dogIds"]),
            path=tuple(PathPoint(x=x, y=y, sequence_order=order) for x, y, order in rows),
        )


@dataclass
class PostgresDogWalkingStore:
    database_url: str

    def _connect(self) -> Any:
        import psycopg

        return psycopg.connect(self.database_url)

    def find_dog(self, dog_id: int) -> Dog | None:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT id, name, birthday FROM dogs WHERE id = %s", (dog_id,))
                row = cur.fetchone()
        return _dog_from_row(row) if row is not None else None

    def find_dog_by_name_and_birthday(self, name: str, birthday: date) -> Dog | None:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT id, name, birthday FROM dogs WHERE name = %s AND birthday = %s",
                    (name, birthday),
                )
                row = cur.fetchone()
        return _dog_from_row(row) if row is not None else None

    def find_dogs_by_name(self, names: Collection[str]) -> tuple[Dog, ...]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT id, name, birthday FROM dogs WHERE name = ANY(%s) ORDER BY id",
                    (list(names),),
                )
                rows = cur.fetchall()
        return tuple(_dog_from_row(row) for row in rows)

    def find_walk(self, walk_id: int) -> Walk | None:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT id FROM walks WHERE id = %s", (walk_id,))
                if cur.fetchone() is None:
                    return None
                walks = self._load_walks(cur, [walk_id])
        return walks[0]

    def find_walks_excluding_dogs(self, dog_ids: Collection[int]) -> list[Walk]:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT w.id
                    FROM walks w
                    WHERE NOT EXISTS (
                        SELECT 1 FROM walk_dogs wd
                        WHERE wd.walk_id = w.id AND wd.dog_id = ANY(%s)
                    )
                    ORDER BY w.id
                    """,
                    (list(dog_ids),),
                )
                walk_ids = [row[0] for row in cur.fetchall()]
                if not walk_ids:
                    return []
                return self._load_walks(cur, walk_ids)

    def insert_dog(self, dog: Dog) -> Dog:
        from psycopg.errors import UniqueViolation

        with self._connect() as conn:
            with conn.cursor() as cur:
                try:
                    cur.execute(
                        "INSERT INTO dogs (name, birthday) VALUES (%s, %s) RETURNING id",
                        (dog.name, dog.birthday),
                    )
                except UniqueViolation as exc:
                    raise DuplicateDogError(f"Dog {dog.name} born {dog.birthday.isoformat()} already exists") from exc
                (dog_id,) = cur.fetchone()
            conn.commit()
        return replace(dog, dog_id=dog_id)

    def insert_walk(self, walk: Walk) -> Walk:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute("INSERT INTO walks DEFAULT VALUES RETURNING id")
                (walk_id,) = cur.fetchone()
                if walk.dogs:
                    cur.executemany(
                        "INSERT INTO walk_dogs (walk_id, dog_id) VALUES (%s, %s)",
                        [(walk_id, dog.dog_id) for dog in walk.dogs],
                    )
                if walk.path:
                    cur.executemany(
                        """
                        INSERT INTO walk_coordinates (walk_id, x, y, sequence_order)
                        VALUES (%s, %s, %s, %s)
                        """,
                        [(walk_id, point.x, point.y, point.sequence_order) for point in walk.path],
                    )
            conn.commit()
        return replace(walk, walk_id=walk_id)

    def _load_walks(self, cur: Any, walk_ids: list[int]) -> list[Walk]:
        cur.execute(
            """
            SELECT wd.walk_id, d.id, d.name, d.birthday
            FROM walk_dogs wd
            JOIN dogs d ON d.id = wd.dog_id
            WHERE wd.walk_id = ANY(%s)
            ORDER BY wd.walk_id, d.id
            """,
            (walk_ids,),
        )
        dogs_by_walk: dict[int, list[Dog]] = {walk_id: [] for walk_id in walk_ids}
        for walk_id, *dog_row in cur.fetchall():
            dogs_by_walk[walk_id].append(_dog_from_row(dog_row))

        cur.execute(
            """
            SELECT walk_id, x, y, sequence_order
            FROM walk_coordinates
            WHERE walk_id = ANY(%s)
            ORDER BY walk_id, sequence_order
            """,
            (walk_ids,),
        )
        path_by_walk: dict[int, list[PathPoint]] = {walk_id: [] for walk_id in walk_ids}
        for walk_id, x, y, sequence_order in cur.fetchall():
            path_by_walk[walk_id].append(PathPoint(x=x, y=y, sequence_order=sequence_order))

        return [
            Walk(walk_id=walk_id, dogs=tuple(dogs_by_walk[walk_id]), path=tuple(path_by_walk[walk_id]))
            for walk_id in walk_ids
        ]


def _dog_from_row(row: Iterable[Any]) -> Dog:
    dog_id, name, birthday = row
    return Dog(dog_id=dog_id, name=name, birthday=birthday)


def create_store(database_url: str | None) -> DogWalkingStore:
    if database_url:
        return PostgresDogWalkingStore(database_url=database_url)
    return InMemoryDogWalkingStore()
