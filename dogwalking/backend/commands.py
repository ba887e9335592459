"""Deferred insert commands produced by handlers and executed by the caller."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generic, TypeVar

from dogwalking.backend.models import Dog, Walk

if TYPE_CHECKING:
    from dogwalking.backend.store import DogWalkingStore

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", Dog, Walk)


class CommandNotExecutedError(RuntimeError):
    """Raised when the stored entity is read before the insert ran."""


class CommandAlreadyExecutedError(RuntimeError):
    """Raised when an insert command is executed a second time."""


class _Insert(Generic[EntityT]):
    def __init__(self, entity: EntityT) -> None:
        self.entity = entity
        self._inserted: EntityT | None = None

    @property
    def executed(self) -> bool:
        return self._inserted is not None

    @property
    def inserted(self) -> EntityT:
        if self._inserted is None:
            raise CommandNotExecutedError(f"{type(self).__name__} has not been executed yet")
        return self._inserted

    def execute(self, store: DogWalkingStore) -> EntityT:
        if self._inserted is not None:
            raise CommandAlreadyExecutedError(f"{type(self).__name__} was already executed")
        self._inserted = self._insert(store)
        return self._inserted

    def _insert(self, store: DogWalkingStore) -> EntityT:
        raise NotImplementedError


class InsertWalk(_Insert[Walk]):
    def _insert(self, store: DogWalkingStore) -> Walk:
        walk = store.insert_walk(self.entity)
        logger.info("Inserted walk %s with %d dogs and %d points", walk.walk_id, len(walk.dogs), len(walk.path))
        return walk


class InsertDog(_Insert[Dog]):
    def _insert(self, store: DogWalkingStore) -> Dog:
        dog = store.insert_dog(self.entity)
        logger.info("Inserted dog %s (%s)", dog.dog_id, dog.name)
        return dog
