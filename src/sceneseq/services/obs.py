"""OBS Studio scene graph over obs-websocket (v5)."""

import logging
from typing import Callable, Optional

import obsws_python as obsws
from obsws_python.error import OBSSDKError

from ..config import config
from .provider import SceneGraphProvider

logger = logging.getLogger(__name__)


def _get(obj, key: str, default=None):
    """Read ``key`` from a response dict or response object."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


class ObsSceneGraph(SceneGraphProvider):
    """Scene graph backed by a running OBS instance.

    Remote failures are logged and swallowed per call so the scheduler keeps
    advancing its own state; connection errors surface from the constructor.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
        client=None,
    ) -> None:
        """Connect to OBS.

        Args:
            host: obs-websocket host. Defaults to OBS_HOST env var.
            port: obs-websocket port. Defaults to OBS_PORT env var.
            password: obs-websocket password. Defaults to OBS_PASSWORD env var.
            timeout: Request timeout in seconds. Defaults to OBS_TIMEOUT env var.
            client: Pre-built request client, mainly for tests.
        """
        self._host = host or config.obs_host
        self._port = port or config.obs_port
        self._password = password if password is not None else config.obs_password
        self._timeout = timeout or config.obs_timeout
        self._client = client or obsws.ReqClient(
            host=self._host,
            port=self._port,
            password=self._password or None,
            timeout=self._timeout,
        )
        self._item_ids: dict[tuple[str, str], int] = {}
        self._events = None

    @property
    def address(self) -> str:
        return f"{self._host}:{self._port}"

    def list_scenes(self) -> list[str]:
        try:
            resp = self._client.get_scene_list()
        except OBSSDKError as e:
            logger.warning(f"Failed to list scenes: {e}")
            return []
        names = [_get(s, "sceneName") for s in _get(resp, "scenes", []) or []]
        return sorted(n for n in names if n)

    def list_sources(self, scene: str) -> list[str]:
        try:
            resp = self._client.get_scene_item_list(scene)
        except OBSSDKError as e:
            logger.warning(f"Failed to list sources of {scene!r}: {e}")
            return []
        names = [_get(it, "sourceName") for it in _get(resp, "scene_items", []) or []]
        return sorted(n for n in names if n)

    def _item_id(self, scene: str, source: str) -> Optional[int]:
        key = (scene, source)
        if key not in self._item_ids:
            try:
                resp = self._client.get_scene_item_id(scene, source)
            except OBSSDKError as e:
                logger.debug(f"No scene item {source!r} in {scene!r}: {e}")
                return None
            self._item_ids[key] = _get(resp, "scene_item_id")
        return self._item_ids[key]

    def set_visible(self, scene: str, source: str, visible: bool) -> None:
        if not source:
            return
        item_id = self._item_id(scene, source)
        if item_id is None:
            return
        try:
            self._client.set_scene_item_enabled(scene, item_id, visible)
        except OBSSDKError as e:
            # scene items can be recreated under a new id
            self._item_ids.pop((scene, source), None)
            logger.warning(f"Failed to set {source!r} in {scene!r} visible={visible}: {e}")

    def current_active_scene(self) -> str:
        try:
            resp = self._client.get_current_program_scene()
        except OBSSDKError as e:
            logger.warning(f"Failed to read current scene: {e}")
            return ""
        return _get(resp, "current_program_scene_name") or ""

    def watch_scene_changes(self, on_change: Callable[[str], None]) -> None:
        """Call ``on_change`` with the new scene name whenever the program scene changes.

        The callback runs on the event client's thread.
        """

        def on_current_program_scene_changed(data) -> None:
            on_change(_get(data, "scene_name") or "")

        self._events = obsws.EventClient(
            host=self._host,
            port=self._port,
            password=self._password or None,
            timeout=self._timeout,
        )
        self._events.callback.register(on_current_program_scene_changed)

    def close(self) -> None:
        """Disconnect request and event clients."""
        if self._events is not None:
            self._events.disconnect()
            self._events = None
        self._client.disconnect()
        self._item_ids.clear()
