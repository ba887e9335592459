"""Walk registration: resolve dogs, validate names and build the insert command."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from dogwalking.backend.commands import InsertWalk
from dogwalking.backend.lazy import LazyCreationResponse
from dogwalking.backend.models import Coordinate, Dog, PathPoint, Problem, Walk, WalkResponse
from dogwalking.backend.store import DogWalkingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisterWalkRequest:
    dogs_on_walk: tuple[str, ...]
    path: tuple[Coordinate, ...]


def walk_location(walk_id: int | None) -> str:
    return f"/walk/{walk_id}"


def walk_response(walk: Walk) -> WalkResponse:
    if walk.walk_id is None:
        raise ValueError("walk has no id until it is stored")
    return WalkResponse(walk_id=walk.walk_id, dogs=walk.dogs, path=walk.coordinates)


class WalkRegistry:
    def load(self, request: RegisterWalkRequest, store: DogWalkingStore) -> tuple[Dog, ...]:
        return store.find_dogs_by_name(request.dogs_on_walk)

    def validate(self, request: RegisterWalkRequest, known_dogs: tuple[Dog, ...]) -> Problem | None:
        known_names = {dog.name for dog in known_dogs}
        unknown = list(dict.fromkeys(name for name in request.dogs_on_walk if name not in known_names))
        if not unknown:
            return None
        logger.info("Rejected walk with unknown dogs: %s", unknown)
        return Problem(status=400, title="Unknown dog or dogs", detail=", ".join(unknown))

    def register(
        self,
        request: RegisterWalkRequest,
        known_dogs: tuple[Dog, ...],
    ) -> tuple[LazyCreationResponse[WalkResponse], InsertWalk]:
        """Build the walk and its insert command.

        The walk id is assigned by the store, so the response only resolves
        after the returned command has been executed.
        """
        walk = Walk(
            walk_id=None,
            dogs=tuple(known_dogs),
            path=tuple(
                PathPoint(x=coordinate.x, y=coordinate.y, sequence_order=index)
                for index, coordinate in enumerate(request.path)
            ),
        )
        insert = InsertWalk(walk)
        response = LazyCreationResponse(
            location=lambda: walk_location(insert.inserted.walk_id),
            value=lambda: walk_response(insert.inserted),
        )
        return response, insert
