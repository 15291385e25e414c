"""Scene graph provider abstraction."""

from abc import ABC, abstractmethod


class SceneGraphProvider(ABC):
    """Access to a host's scenes and the visibility of their sources.

    Implementations must treat unknown scenes and sources as no-ops and
    should not block: the scheduler calls ``set_visible`` from its tick.
    """

    @abstractmethod
    def list_scenes(self) -> list[str]:
        """Return scene names in display order."""
        ...

    @abstractmethod
    def list_sources(self, scene: str) -> list[str]:
        """Return source names inside ``scene``."""
        ...

    @abstractmethod
    def set_visible(self, scene: str, source: str, visible: bool) -> None:
        """Show or hide ``source`` within ``scene``."""
        ...

    @abstractmethod
    def current_active_scene(self) -> str:
        """Return the active scene name, or an empty string."""
        ...
