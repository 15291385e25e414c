"""Per-scene sequence configuration and run state."""

from enum import Enum

from pydantic import BaseModel, Field

from ..timing import SourceEntry, parse_sources
from .settings import SceneSettings


class SequencePhase(str, Enum):
    """Phase of a scene's sequencer."""
    IDLE = "idle"
    SHOWING = "showing"
    GAP = "gap"
    COOLDOWN = "cooldown"


class SequenceConfig(BaseModel):
    """Configuration and mutable run state of one scene's sequence."""

    enabled: bool = Field(default=False, description="Master switch")
    sources_txt: str = Field(default="", description="Raw source list text")
    gap_ms: int = Field(default=500, description="Gap between sources in ms")
    cooldown_ms: int = Field(default=4000, description="Cooldown after a pass in ms")
    tick_ms: int = Field(default=30000, description="Random check interval in ms")
    chance_pct: int = Field(default=20, description="Random trigger chance (%)", ge=1, le=100)

    phase: SequencePhase = Field(default=SequencePhase.IDLE, description="Current phase")
    index: int = Field(default=0, description="1-based position in the pass, 0 when idle")
    phase_deadline: int = Field(default=0, description="Clock ms at which the phase ends")
    next_random_check: int = Field(default=0, description="Clock ms of the next random draw")

    class Config:
        """Pydantic config."""
        frozen = False

    @classmethod
    def from_settings(cls, settings: SceneSettings, now: int) -> "SequenceConfig":
        """Build a config from stored settings.

        Duration fields on ``settings`` are rewritten in canonical form.
        Run state starts idle.
        """
        durations = settings.normalize()
        tick_ms = durations["tick_hms"]
        return cls(
            enabled=settings.enabled,
            sources_txt=settings.sources_txt,
            gap_ms=durations["gap_hms"],
            cooldown_ms=durations["cool_hms"],
            tick_ms=tick_ms,
            chance_pct=settings.chance_pct,
            next_random_check=now + tick_ms if tick_ms > 0 else now,
        )

    def sources(self) -> list[SourceEntry]:
        """Parse the current source list text."""
        return parse_sources(self.sources_txt)

    def reset(self) -> None:
        """Return to idle."""
        self.phase = SequencePhase.IDLE
        self.index = 0

    @property
    def is_idle(self) -> bool:
        return self.phase == SequencePhase.IDLE
