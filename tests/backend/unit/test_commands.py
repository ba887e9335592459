from datetime import date

import pytest

from dogwalking.backend.commands import (
    CommandAlreadyExecutedError,
    CommandNotExecutedError,
    InsertDog,
    InsertWalk,
)
from dogwalking.backend.models import Dog, PathPoint, Walk
from dogwalking.backend.store import InMemoryDogWalkingStore


def test_insert_dog_assigns_id_on_execute() -> None:
    store = InMemoryDogWalkingStore()
    command = InsertDog(Dog(dog_id=None, name="Yuna", birthday=date(2021, 5, 12)))

    assert command.executed is False
    with pytest.raises(CommandNotExecutedError):
        _ = command.inserted

    dog = command.execute(store)

    assert command.executed is True
    assert dog.dog_id is not None
    assert command.inserted == dog
    assert store.find_dog(dog.dog_id) == dog


def test_insert_walk_runs_only_once() -> None:
    store = InMemoryDogWalkingStore()
    command = InsertWalk(Walk(walk_id=None, dogs=(), path=(PathPoint(x=1, y=1, sequence_order=0),)))

    walk = command.execute(store)

    with pytest.raises(CommandAlreadyExecutedError):
        command.execute(store)
    assert walk.walk_id == 1
    assert store.find_walks_excluding_dogs([]) == [walk]
