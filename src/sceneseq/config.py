"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config(BaseModel):
    """Application configuration."""

    # Paths
    settings_path: Path = Field(
        default_factory=lambda: Path(os.getenv("SCENESEQ_SETTINGS", "sequencer.yaml")),
        description="Sequencer settings YAML file"
    )

    # Engine
    heartbeat_ms: int = Field(
        default_factory=lambda: int(os.getenv("SCENESEQ_HEARTBEAT_MS", "100")),
        description="Scheduler tick period in milliseconds",
        gt=0
    )

    # OBS websocket
    obs_host: str = Field(
        default_factory=lambda: os.getenv("OBS_HOST", "localhost"),
        description="obs-websocket host"
    )
    obs_port: int = Field(
        default_factory=lambda: int(os.getenv("OBS_PORT", "4455")),
        description="obs-websocket port"
    )
    obs_password: str = Field(
        default_factory=lambda: os.getenv("OBS_PASSWORD", ""),
        description="obs-websocket password"
    )
    obs_timeout: float = Field(
        default_factory=lambda: float(os.getenv("OBS_TIMEOUT", "5")),
        description="obs-websocket request timeout in seconds"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_obs_required(self) -> None:
        """Validate that the OBS connection settings are usable.

        Raises:
            ValueError: If any required OBS configuration is missing or invalid.
        """
        missing: list[str] = []

        if not self.obs_host:
            missing.append("OBS_HOST")

        if missing:
            raise ValueError(
                f"Missing required OBS configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )

        if not 0 < self.obs_port < 65536:
            raise ValueError(
                f"OBS_PORT must be between 1 and 65535. Got: {self.obs_port}"
            )


# Global config instance
config = Config()
