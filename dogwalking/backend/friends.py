"""Friends met on a walk: dogs from walks that share no dog with it."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import Callable, Sequence

from dogwalking.backend.models import Dog, FriendsResponse, MetFriends, Problem, Walk
from dogwalking.backend.store import DogWalkingStore

logger = logging.getLogger(__name__)

WALK_NOT_FOUND = Problem(status=404, title="Not Found", detail="Could not find the referenced walk")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class FriendsLookup:
    walk: Walk | None
    other_walks: list[Walk]
    fetch_picture: Callable[[], bytes]
    now: datetime


class FriendMatcher:
    def load(
        self,
        walk_id: int,
        store: DogWalkingStore,
        fetch_picture: Callable[[], bytes],
        clock: Callable[[], datetime] = _utc_now,
    ) -> FriendsLookup:
        walk = store.find_walk(walk_id)
        other_walks = store.find_walks_excluding_dogs(walk.dog_ids) if walk is not None else []
        return FriendsLookup(walk=walk, other_walks=other_walks, fetch_picture=fetch_picture, now=clock())

    def validate(self, walk: Walk | None) -> Problem | None:
        return WALK_NOT_FOUND if walk is None else None

    def match(
        self,
        walk: Walk,
        other_walks: Sequence[Walk],
        fetch_picture: Callable[[], bytes],
        now: datetime,
    ) -> tuple[FriendsResponse | None, list[MetFriends]]:
        """Compute the friends met on walk.

        other_walks must already exclude walks sharing a dog with walk. None
        means there was nobody else around. The picture is fetched only when
        at least one friend was found. now is not used yet.
        """
        if not other_walks:
            return None, []

        friends = [dog.name for dog in _friend_dogs(walk, other_walks)]
        if not friends:
            return FriendsResponse.empty(), []

        logger.info("Walk %s met %d friends", walk.walk_id, len(friends))
        names = tuple(friends)
        return FriendsResponse(friends=names, picture_of_friends=fetch_picture()), [MetFriends(friends=names)]


def _friend_dogs(walk: Walk, other_walks: Sequence[Walk]) -> list[Dog]:
    own = {_identity(dog) for dog in walk.dogs}
    seen: set[object] = set()
    friends: list[Dog] = []
    for other in other_walks:
        for dog in other.dogs:
            key = _identity(dog)
            if key in own or key in seen:
                continue
            seen.add(key)
            friends.append(dog)
    return friends


def _identity(dog: Dog) -> object:
    return dog.dog_id if dog.dog_id is not None else dog
