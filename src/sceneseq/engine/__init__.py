"""Sequencing engine."""

from .clock import ManualClock, monotonic_ms
from .scheduler import Scheduler
from .trigger import TriggerFrontEnd
from .heartbeat import Heartbeat

__all__ = ["ManualClock", "monotonic_ms", "Scheduler", "TriggerFrontEnd", "Heartbeat"]
