"""Backend package for dog walking."""

from .config import BackendSettings, configure_logging, load_settings
from .friends import FriendMatcher
from .lazy import ComputeOnce, LazyCreationResponse
from .store import DogWalkingStore, InMemoryDogWalkingStore, PostgresDogWalkingStore, create_store
from .walks import WalkRegistry

__all__ = [
    "BackendSettings",
    "ComputeOnce",
    "configure_logging",
    "create_store",
    "DogWalkingStore",
    "FriendMatcher",
    "InMemoryDogWalkingStore",
    "LazyCreationResponse",
    "load_settings",
    "PostgresDogWalkingStore",
    "WalkRegistry",
]
