"""Data models for the scene sequencer."""

from .settings import SceneSettings, Settings
from .sequence import SequenceConfig, SequencePhase

__all__ = ["SceneSettings", "Settings", "SequenceConfig", "SequencePhase"]
