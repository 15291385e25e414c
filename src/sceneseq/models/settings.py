"""Persisted sequencer settings."""

from pathlib import Path
from typing import Dict

import yaml
from pydantic import BaseModel, Field, field_validator

from ..timing import append_source_line, normalize_duration

DEFAULT_ADD_HMS = "00:00:06.000"
DEFAULT_GAP_HMS = "00:00:00.500"
DEFAULT_COOL_HMS = "00:00:04.000"
DEFAULT_TICK_HMS = "00:00:30.000"
DEFAULT_CHANCE_PCT = 20

DURATION_FIELDS = ("add_hms", "gap_hms", "cool_hms", "tick_hms")


class SceneSettings(BaseModel):
    """Stored settings for one scene."""

    enabled: bool = Field(default=False, description="Sequence this scene")
    sources_txt: str = Field(default="", description="Newline separated name|duration lines")
    add_name: str = Field(default="", description="Source picked for the next add")
    add_hms: str = Field(default=DEFAULT_ADD_HMS, description="Duration used when adding a source")
    gap_hms: str = Field(default=DEFAULT_GAP_HMS, description="Gap between sources")
    cool_hms: str = Field(default=DEFAULT_COOL_HMS, description="Cooldown after a full pass")
    tick_hms: str = Field(default=DEFAULT_TICK_HMS, description="Random trigger check interval")
    chance_pct: int = Field(default=DEFAULT_CHANCE_PCT, description="Random trigger chance (%)")

    class Config:
        """Pydantic config."""
        frozen = False

    @field_validator("chance_pct", mode="before")
    @classmethod
    def _clamp_chance(cls, value):
        try:
            pct = int(value)
        except (TypeError, ValueError):
            return DEFAULT_CHANCE_PCT
        return max(1, min(100, pct))

    @field_validator("sources_txt", "add_name", "add_hms", "gap_hms", "cool_hms", "tick_hms", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    def normalize_field(self, name: str) -> int:
        """Rewrite one duration field in canonical form and return its milliseconds."""
        canonical, ms = normalize_duration(getattr(self, name))
        setattr(self, name, canonical)
        return ms

    def normalize(self) -> Dict[str, int]:
        """Rewrite every duration field in canonical form.

        Returns:
            Mapping of field name to parsed milliseconds.
        """
        return {name: self.normalize_field(name) for name in DURATION_FIELDS}

    def add_source(self, name: str = "", duration: str = "") -> bool:
        """Append a source line to the list.

        Args:
            name: Source name. Falls back to ``add_name``.
            duration: Duration text. Falls back to ``add_hms``.

        Returns:
            True if a line was appended. Empty names and zero durations are ignored.
        """
        if name:
            self.add_name = name
        if duration:
            self.add_hms = duration
        ms = self.normalize_field("add_hms")
        source = self.add_name.strip()
        if not source or ms <= 0:
            return False
        self.sources_txt = append_source_line(self.sources_txt, source, ms)
        return True

    def clear_sources(self) -> None:
        """Empty the source list."""
        self.sources_txt = ""


class Settings(BaseModel):
    """Engine settings: one global flag plus per-scene settings."""

    only_active_scene: bool = Field(default=True, description="Affect the active scene only")
    scenes: Dict[str, SceneSettings] = Field(default_factory=dict, description="Settings per scene name")

    class Config:
        """Pydantic config."""
        frozen = False

    @field_validator("scenes", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return {} if value is None else value

    def scene(self, name: str) -> SceneSettings:
        """Return the settings for a scene, creating defaults if missing."""
        if name not in self.scenes:
            self.scenes[name] = SceneSettings()
        return self.scenes[name]

    def ensure_scenes(self, names) -> None:
        """Make sure every scene in ``names`` has settings."""
        for name in names:
            self.scene(name)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file. A missing or empty file yields defaults."""
        path = Path(path)
        if not path.exists():
            return cls()
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    def to_yaml(self, path: Path) -> None:
        """Save settings to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)
