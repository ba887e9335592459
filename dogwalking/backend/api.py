"""FastAPI endpoints for dogs, walks, friends met and event streaming."""

from __future__ import annotations

import base64
from datetime import date
from typing import Callable

from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel, Field

from .config import load_settings
from .dogs import CreateDogRequest, DogCreated, DogFound, create_or_find, dog_location
from .events import FriendsEventHub
from .friends import FriendMatcher
from .models import Coordinate, Dog, FriendsResponse, Problem, WalkResponse
from .pictures import picture_loader
from .store import DogWalkingStore, DuplicateDogError, create_store
from .walks import RegisterWalkRequest, WalkRegistry, walk_response


class CreateDogPayload(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    birthday: date


class DogBody(BaseModel):
    dog_id: int
    name: str
    birthday: date


class CoordinateBody(BaseModel):
    x: int
    y: int


class RegisterWalkPayload(BaseModel):
    dogs_on_walk: list[str]
    path: list[CoordinateBody]


class WalkBody(BaseModel):
    walk_id: int
    dogs: list[DogBody]
    path: list[CoordinateBody]


class FriendsBody(BaseModel):
    friends: list[str]
    picture_of_friends: str = Field(description="Base64 encoded picture")


def _dog_body(dog: Dog) -> DogBody:
    return DogBody(dog_id=dog.dog_id, name=dog.name, birthday=dog.birthday)


def _walk_body(response: WalkResponse) -> WalkBody:
    return WalkBody(
        walk_id=response.walk_id,
        dogs=[_dog_body(dog) for dog in response.dogs],
        path=[CoordinateBody(x=coordinate.x, y=coordinate.y) for coordinate in response.path],
    )


def _friends_body(response: FriendsResponse) -> FriendsBody:
    return FriendsBody(
        friends=list(response.friends),
        picture_of_friends=base64.b64encode(response.picture_of_friends).decode("ascii"),
    )


def _problem(problem: Problem) -> HTTPException:
    return HTTPException(status_code=problem.status, detail=problem.detail)


def _default_store() -> DogWalkingStore:
    return create_store(load_settings().database_url)


def create_app(
    store: DogWalkingStore | None = None,
    fetch_picture: Callable[[], bytes] | None = None,
) -> FastAPI:
    app = FastAPI(title="Dog Walking API", version="0.1.0")
    dog_walking_store = store if store is not None else _default_store()
    picture_source = fetch_picture if fetch_picture is not None else picture_loader(load_settings().picture_path)
    walk_registry = WalkRegistry()
    friend_matcher = FriendMatcher()
    friends_hub = FriendsEventHub()
    app.state.friends_hub = friends_hub

    def get_store() -> DogWalkingStore:
        return dog_walking_store

    @app.post("/dog", status_code=201, response_model=DogBody)
    def create_dog(
        payload: CreateDogPayload,
        local_store: DogWalkingStore = Depends(get_store),
    ) -> Response:
        request = CreateDogRequest(name=payload.name, birthday=payload.birthday)
        existing = local_store.find_dog_by_name_and_birthday(request.name, request.birthday)
        match create_or_find(request, existing):
            case DogCreated(insert=insert):
                try:
                    dog = insert.execute(local_store)
                except DuplicateDogError:
                    existing = local_store.find_dog_by_name_and_birthday(request.name, request.birthday)
                    if existing is None:
                        raise
                    return RedirectResponse(dog_location(existing.dog_id), status_code=302)
                return JSONResponse(
                    status_code=201,
                    content=_dog_body(dog).model_dump(mode="json"),
                    headers={"Location": dog_location(dog.dog_id)},
                )
            case DogFound(dog_id=dog_id):
                return RedirectResponse(dog_location(dog_id), status_code=302)

    @app.get("/dog/{dog_id}", response_model=DogBody)
    def get_dog(dog_id: int, local_store: DogWalkingStore = Depends(get_store)) -> DogBody:
        dog = local_store.find_dog(dog_id)
        if dog is None:
            raise HTTPException(status_code=404, detail="Dog not found")
        return _dog_body(dog)

    @app.post("/walk", status_code=201, response_model=WalkBody)
    def register_walk(
        payload: RegisterWalkPayload,
        local_store: DogWalkingStore = Depends(get_store),
    ) -> Response:
        request = RegisterWalkRequest(
            dogs_on_walk=tuple(payload.dogs_on_walk),
            path=tuple(Coordinate(x=point.x, y=point.y) for point in payload.path),
        )
        known_dogs = walk_registry.load(request, local_store)
        problem = walk_registry.validate(request, known_dogs)
        if problem is not None:
            raise _problem(problem)

        response, insert_walk = walk_registry.register(request, known_dogs)
        insert_walk.execute(local_store)
        return JSONResponse(
            status_code=201,
            content=_walk_body(response.value).model_dump(mode="json"),
            headers={"Location": response.location},
        )

    @app.get("/walk/{walk_id}", response_model=WalkBody)
    def get_walk(walk_id: int, local_store: DogWalkingStore = Depends(get_store)) -> WalkBody:
        walk = local_store.find_walk(walk_id)
        if walk is None:
            raise HTTPException(status_code=404, detail="Could not find the referenced walk")
        return _walk_body(walk_response(walk))

    @app.get("/friends/{walk_id}", response_model=FriendsBody)
    async def friends_on_walk(
        walk_id: int,
        local_store: DogWalkingStore = Depends(get_store),
    ) -> FriendsBody | Response:
        lookup = await run_in_threadpool(friend_matcher.load, walk_id, local_store, fetch_picture=picture_source)
        problem = friend_matcher.validate(lookup.walk)
        if problem is not None:
            raise _problem(problem)

        response, events = await run_in_threadpool(
            friend_matcher.match, lookup.walk, lookup.other_walks, lookup.fetch_picture, lookup.now
        )
        for event in events:
            await friends_hub.publish(event)
        if response is None:
            return Response(status_code=200)
        return _friends_body(response)

    @app.websocket("/ws/friends")
    async def friends_ws(websocket: WebSocket) -> None:
        await friends_hub.connect(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            friends_hub.disconnect(websocket)

    return app


app = create_app()
