"""Manual trigger front-end.

Hotkeys, preview buttons, scene-change events and reload requests may come
from any thread. They are queued here and applied by the heartbeat thread
right before it ticks, so scheduler run state is never touched concurrently.
"""

from __future__ import annotations

import logging
import queue
from typing import TYPE_CHECKING, Optional

from ..models import Settings

if TYPE_CHECKING:
    from .scheduler import Scheduler

logger = logging.getLogger(__name__)

# {"type": ..., **payload}
Action = dict


class TriggerFrontEnd:
    """Thread-safe queue of requests for one scheduler."""

    def __init__(self) -> None:
        self._fifo: "queue.Queue[Action]" = queue.Queue()

    # ── producers ──────────────────────────────────────────────────────
    def post(self, action: Action) -> None:
        """Enqueue an already-formed action dict, e.g. ``{"type": "start"}``."""
        self._fifo.put(action)

    def request_start(self) -> None:
        """Start sequences now (the hotkey action)."""
        self.post({"type": "start"})

    def on_hotkey(self, pressed: bool) -> None:
        """Hotkey callback: only key presses start sequences."""
        if pressed:
            self.request_start()

    def request_preview(self, scene: str) -> None:
        self.post({"type": "preview", "scene": scene})

    def scene_changed(self, scene: Optional[str] = None) -> None:
        """Record a scene change. ``None`` re-reads the active scene from the provider."""
        self.post({"type": "scene_changed", "scene": scene})

    def request_reload(self, settings: Settings) -> None:
        self.post({"type": "reload", "settings": settings})

    # ── consumer ───────────────────────────────────────────────────────
    def poll(self) -> Action | None:
        """Pop the oldest request without waiting, or None when idle."""
        if self._fifo.empty():
            return None
        return self._fifo.get_nowait()

    def pending(self) -> int:
        return self._fifo.qsize()

    def dispatch(self, scheduler: "Scheduler") -> int:
        """Apply every queued action to ``scheduler``.

        Returns:
            Number of actions applied.
        """
        count = 0
        while True:
            act = self.poll()
            if act is None:
                return count
            self._apply(scheduler, act)
            count += 1

    @staticmethod
    def _apply(scheduler: "Scheduler", act: Action) -> None:
        kind = act.get("type")
        if kind == "start":
            started = scheduler.trigger()
            logger.debug(f"Manual start: {started or 'nothing started'}")
        elif kind == "preview":
            scheduler.preview(act.get("scene", ""))
        elif kind == "scene_changed":
            scene = act.get("scene")
            if scene is None:
                scheduler.refresh_active_scene()
            else:
                scheduler.set_active_scene(scene)
        elif kind == "reload":
            scheduler.load(act["settings"])
        else:
            logger.warning(f"Ignoring unknown action: {act!r}")
