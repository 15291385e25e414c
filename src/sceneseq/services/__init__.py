"""Scene graph providers."""

from .provider import SceneGraphProvider
from .memory import InMemorySceneGraph, VisibilityChange

__all__ = [
    "SceneGraphProvider",
    "InMemorySceneGraph",
    "VisibilityChange",
]
