"""Tick-driven per-scene sequencing engine."""

import logging
import random
from typing import Callable, Optional

from ..models import SceneSettings, SequenceConfig, SequencePhase, Settings
from ..services.provider import SceneGraphProvider
from ..timing import SourceEntry
from .clock import Clock, monotonic_ms

logger = logging.getLogger(__name__)

# Draws a uniform integer in [low, high], like random.randint
RandomDraw = Callable[[int, int], int]


class Scheduler:
    """Evaluates every scene's sequence state machine once per tick.

    The scheduler owns one ``SequenceConfig`` per scene in the provider's
    roster and is the only writer of their run state. All methods are meant to
    be called from a single thread; see ``Heartbeat`` for cross-thread use.
    """

    def __init__(
        self,
        provider: SceneGraphProvider,
        only_active_scene: bool = True,
        clock: Optional[Clock] = None,
        rng: Optional[RandomDraw] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            provider: Scene graph used to list scenes and toggle visibility.
            only_active_scene: Restrict sequencing to the active scene.
                Overwritten by ``load``.
            clock: Millisecond clock. Defaults to a monotonic clock.
            rng: Uniform integer source. Defaults to ``random.randint``.
        """
        self._provider = provider
        self._clock = clock or monotonic_ms
        self._rng = rng or random.randint
        self._scenes: dict[str, SequenceConfig] = {}
        self.only_active_scene = only_active_scene
        self.active_scene = ""

    @property
    def scenes(self) -> dict[str, SequenceConfig]:
        """Per-scene configs keyed by scene name."""
        return self._scenes

    def get(self, scene: str) -> Optional[SequenceConfig]:
        return self._scenes.get(scene)

    # ── configuration ──────────────────────────────────────────────────

    def load(self, settings: Settings) -> None:
        """(Re)build every scene's config from ``settings``.

        Scenes come from the provider's roster; scenes without stored settings
        get defaults. Duration fields in ``settings`` are normalized in place.
        Every scene returns to idle and every listed source is hidden, so
        in-flight sequences are abandoned.
        """
        now = self._clock()
        self.only_active_scene = settings.only_active_scene
        self._scenes = {}
        for scene in self._provider.list_scenes():
            stored = settings.scenes.get(scene) or SceneSettings()
            self._scenes[scene] = SequenceConfig.from_settings(stored, now)

        for scene, cfg in self._scenes.items():
            self._hide_all(scene, cfg.sources())

        enabled = [s for s, c in self._scenes.items() if c.enabled]
        logger.info(
            f"Loaded {len(self._scenes)} scene(s), {len(enabled)} enabled"
            f" (active scene only: {self.only_active_scene})"
        )

    def set_active_scene(self, scene: str) -> None:
        if scene != self.active_scene:
            logger.debug(f"Active scene: {scene!r}")
        self.active_scene = scene or ""

    def refresh_active_scene(self) -> str:
        """Re-read the active scene from the provider."""
        self.set_active_scene(self._provider.current_active_scene())
        return self.active_scene

    def _in_scope(self, scene: str) -> bool:
        return not self.only_active_scene or scene == self.active_scene

    # ── starting ───────────────────────────────────────────────────────

    def start_sequence(self, scene: str, now: Optional[int] = None) -> bool:
        """Start a pass over ``scene``'s source list.

        No-op when the scene is unknown, its list is empty, it is not idle, or
        it is out of the active-scene scope.

        Returns:
            True if the sequence started.
        """
        cfg = self._scenes.get(scene)
        if cfg is None:
            return False
        entries = cfg.sources()
        if not entries or not cfg.is_idle:
            return False
        if not self._in_scope(scene):
            return False

        now = self._clock() if now is None else now
        self._hide_all(scene, entries)
        cfg.phase = SequencePhase.SHOWING
        cfg.index = 1
        self._show(scene, cfg, entries, now)
        logger.info(f"Started sequence on {scene!r} ({len(entries)} source(s))")
        return True

    def trigger(self) -> list[str]:
        """Handle a manual start request.

        Starts every enabled scene, or only the active scene when scoped.

        Returns:
            Names of the scenes that started.
        """
        if self.only_active_scene:
            candidates = [self.active_scene]
        else:
            candidates = list(self._scenes)

        started: list[str] = []
        for scene in candidates:
            cfg = self._scenes.get(scene)
            if cfg is None or not cfg.enabled:
                continue
            if self.start_sequence(scene):
                started.append(scene)
        return started

    def preview(self, scene: str) -> bool:
        """Start one scene's sequence if it is enabled."""
        cfg = self._scenes.get(scene)
        if cfg is None or not cfg.enabled:
            return False
        return self.start_sequence(scene)

    # ── ticking ────────────────────────────────────────────────────────

    def tick(self) -> None:
        """Evaluate every enabled, in-scope scene once."""
        now = self._clock()
        for scene, cfg in self._scenes.items():
            if not cfg.enabled or not self._in_scope(scene):
                continue
            self._step(scene, cfg, now)

    def _step(self, scene: str, cfg: SequenceConfig, now: int) -> None:
        if cfg.phase == SequencePhase.IDLE:
            if cfg.tick_ms > 0 and now >= cfg.next_random_check:
                cfg.next_random_check = now + cfg.tick_ms
                if self._rng(1, 100) <= cfg.chance_pct:
                    self.start_sequence(scene, now)

        elif cfg.phase == SequencePhase.SHOWING:
            entries = cfg.sources()
            if not entries or cfg.index > len(entries):
                logger.debug(f"{scene}: source list shrank while showing, back to idle")
                cfg.reset()
                return
            if now < cfg.phase_deadline:
                return
            self._set_visible(scene, entries[cfg.index - 1], False)
            if cfg.index < len(entries) and cfg.gap_ms > 0:
                self._enter(scene, cfg, SequencePhase.GAP, now + cfg.gap_ms)
            else:
                self._advance(scene, cfg, entries, now)

        elif cfg.phase == SequencePhase.GAP:
            if now >= cfg.phase_deadline:
                self._advance(scene, cfg, cfg.sources(), now)

        elif cfg.phase == SequencePhase.COOLDOWN:
            if now >= cfg.phase_deadline:
                logger.debug(f"{scene}: cooldown over")
                cfg.reset()

    def _advance(self, scene: str, cfg: SequenceConfig, entries: list[SourceEntry], now: int) -> None:
        cfg.index += 1
        if cfg.index > len(entries):
            self._enter(scene, cfg, SequencePhase.COOLDOWN, now + cfg.cooldown_ms)
        else:
            cfg.phase = SequencePhase.SHOWING
            self._show(scene, cfg, entries, now)

    def _show(self, scene: str, cfg: SequenceConfig, entries: list[SourceEntry], now: int) -> None:
        entry = entries[cfg.index - 1]
        self._set_visible(scene, entry, True)
        self._enter(scene, cfg, SequencePhase.SHOWING, now + entry.duration_ms)

    def _enter(self, scene: str, cfg: SequenceConfig, phase: SequencePhase, deadline: int) -> None:
        cfg.phase = phase
        cfg.phase_deadline = deadline
        logger.debug(f"{scene}: {phase.value} #{cfg.index} until {deadline}")

    def _set_visible(self, scene: str, entry: SourceEntry, visible: bool) -> None:
        self._provider.set_visible(scene, entry.name, visible)

    def _hide_all(self, scene: str, entries: list[SourceEntry]) -> None:
        for entry in entries:
            self._set_visible(scene, entry, False)
