from datetime import date, datetime, timezone

from dogwalking.backend.friends import WALK_NOT_FOUND, FriendMatcher
from dogwalking.backend.models import Dog, FriendsResponse, MetFriends, PathPoint, Walk
from dogwalking.backend.store import InMemoryDogWalkingStore

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

YUNA = Dog(dog_id=1, name="Yuna", birthday=date(2021, 5, 12))
TOBY = Dog(dog_id=2, name="Toby", birthday=date(2022, 2, 21))
OTHER_TOBY = Dog(dog_id=3, name="Toby", birthday=date(2019, 8, 3))
BELLO = Dog(dog_id=4, name="Bello", birthday=date(2018, 3, 9))

WALK = Walk(
    walk_id=1,
    dogs=(YUNA,),
    path=tuple(
        PathPoint(x=x, y=y, sequence_order=index)
        for index, (x, y) in enumerate([(1, 1), (1, 2), (2, 2), (2, 1), (1, 1)])
    ),
)
OTHER_WALK = Walk(walk_id=2, dogs=(TOBY,), path=(PathPoint(x=2, y=2, sequence_order=0),))


class _PictureSpy:
    def __init__(self, picture: bytes = b"picture") -> None:
        self.picture = picture
        self.calls = 0

    def __call__(self) -> bytes:
        self.calls += 1
        return self.picture


def test_a_known_walk_is_valid() -> None:
    assert FriendMatcher().validate(Walk(walk_id=5, dogs=(), path=())) is None


def test_an_unknown_walk_is_invalid() -> None:
    problem = FriendMatcher().validate(None)

    assert problem == WALK_NOT_FOUND
    assert problem.status == 404
    assert problem.title == "Not Found"
    assert problem.detail == "Could not find the referenced walk"


def test_when_no_other_dog_encountered_then_do_nothing() -> None:
    picture = _PictureSpy()

    response, events = FriendMatcher().match(WALK, [], picture, NOW)

    assert response is None
    assert events == []
    assert picture.calls == 0


def test_when_other_dog_encountered_then_indicate_dog_encountered() -> None:
    picture = _PictureSpy()

    response, events = FriendMatcher().match(WALK, [OTHER_WALK], picture, NOW)

    assert response == FriendsResponse(friends=("Toby",), picture_of_friends=b"picture")
    assert events == [MetFriends(friends=("Toby",))]
    assert picture.calls == 1


def test_friends_are_collected_by_identity_not_name() -> None:
    picture = _PictureSpy()
    others = [
        Walk(walk_id=2, dogs=(TOBY, BELLO), path=()),
        Walk(walk_id=3, dogs=(OTHER_TOBY, TOBY), path=()),
    ]

    response, events = FriendMatcher().match(WALK, others, picture, NOW)

    assert response is not None
    assert response.friends == ("Toby", "Bello", "Toby")
    assert events == [MetFriends(friends=("Toby", "Bello", "Toby"))]
    assert picture.calls == 1


def test_dogs_of_the_walk_itself_are_not_friends() -> None:
    picture = _PictureSpy()
    unfiltered = [Walk(walk_id=2, dogs=(YUNA,), path=())]

    response, events = FriendMatcher().match(WALK, unfiltered, picture, NOW)

    assert response == FriendsResponse.empty()
    assert events == []
    assert picture.calls == 0


def test_failed_picture_fetch_still_reports_friends() -> None:
    response, events = FriendMatcher().match(WALK, [OTHER_WALK], _PictureSpy(picture=b""), NOW)

    assert response == FriendsResponse(friends=("Toby",), picture_of_friends=b"")
    assert len(events) == 1


def test_load_excludes_walks_sharing_a_dog_without_fetching_picture() -> None:
    store = InMemoryDogWalkingStore()
    yuna = store.insert_dog(Dog(dog_id=None, name="Yuna", birthday=date(2021, 5, 12)))
    toby = store.insert_dog(Dog(dog_id=None, name="Toby", birthday=date(2022, 2, 21)))
    walk = store.insert_walk(Walk(walk_id=None, dogs=(yuna,), path=()))
    shared = store.insert_walk(Walk(walk_id=None, dogs=(yuna, toby), path=()))
    other = store.insert_walk(Walk(walk_id=None, dogs=(toby,), path=()))
    picture = _PictureSpy()

    lookup = FriendMatcher().load(walk.walk_id, store, fetch_picture=picture, clock=lambda: NOW)

    assert lookup.walk == walk
    assert [candidate.walk_id for candidate in lookup.other_walks] == [other.walk_id]
    assert shared.walk_id not in [candidate.walk_id for candidate in lookup.other_walks]
    assert lookup.now == NOW
    assert picture.calls == 0


def test_load_of_missing_walk_has_no_other_walks() -> None:
    store = InMemoryDogWalkingStore()
    store.insert_walk(Walk(walk_id=None, dogs=(), path=()))

    lookup = FriendMatcher().load(99, store, fetch_picture=_PictureSpy())

    assert lookup.walk is None
    assert lookup.other_walks == []
