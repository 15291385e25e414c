"""In-memory scene graph used for simulation and tests."""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from .provider import SceneGraphProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibilityChange:
    """One visibility command received by the scene graph."""

    scene: str
    source: str
    visible: bool


class InMemorySceneGraph(SceneGraphProvider):
    """Scene graph held in dictionaries.

    Every accepted ``set_visible`` call is appended to ``changes`` so callers
    can inspect the exact command sequence.
    """

    def __init__(
        self,
        scenes: Optional[Mapping[str, Iterable[str]]] = None,
        active_scene: str = "",
    ) -> None:
        self._visible: dict[str, dict[str, bool]] = {}
        for scene, sources in (scenes or {}).items():
            self.add_scene(scene, sources)
        self.active_scene = active_scene
        self.changes: list[VisibilityChange] = []

    def add_scene(self, scene: str, sources: Iterable[str] = ()) -> None:
        """Register a scene and its sources. Sources start visible."""
        items = self._visible.setdefault(scene, {})
        for source in sources:
            items.setdefault(source, True)

    def remove_scene(self, scene: str) -> None:
        self._visible.pop(scene, None)

    def list_scenes(self) -> list[str]:
        return list(self._visible)

    def list_sources(self, scene: str) -> list[str]:
        return list(self._visible.get(scene, {}))

    def set_visible(self, scene: str, source: str, visible: bool) -> None:
        items = self._visible.get(scene)
        if items is None or source not in items:
            logger.debug(f"Ignoring visibility change for unknown {scene!r}/{source!r}")
            return
        items[source] = visible
        self.changes.append(VisibilityChange(scene, source, visible))

    def is_visible(self, scene: str, source: str) -> bool:
        return self._visible.get(scene, {}).get(source, False)

    def visible_sources(self, scene: str) -> list[str]:
        """Return the currently visible sources of ``scene``."""
        return [name for name, shown in self._visible.get(scene, {}).items() if shown]

    def current_active_scene(self) -> str:
        return self.active_scene
