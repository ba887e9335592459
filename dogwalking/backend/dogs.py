"""Dog creation with name and birthday deduplication."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from dogwalking.backend.commands import InsertDog
from dogwalking.backend.models import Dog


@dataclass(frozen=True)
class CreateDogRequest:
    name: str
    birthday: date


@dataclass(frozen=True)
class DogCreated:
    dog: Dog
    insert: InsertDog


@dataclass(frozen=True)
class DogFound:
    dog_id: int


DogCreation = DogCreated | DogFound


def create_or_find(request: CreateDogRequest, existing: Dog | None) -> DogCreation:
    """Resolve a creation request against the dog already stored under the same key.

    A found dog means no write happens; the caller points to the existing resource.
    """
    if existing is not None and existing.dog_id is not None:
        return DogFound(dog_id=existing.dog_id)
    dog = Dog(dog_id=None, name=request.name, birthday=request.birthday)
    return DogCreated(dog=dog, insert=InsertDog(dog))


def dog_location(dog_id: int) -> str:
    return f"/dog/{dog_id}"
