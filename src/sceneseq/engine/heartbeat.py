"""Periodic timer driving the scheduler."""

import logging
import threading
from typing import Optional

from ..config import config
from .scheduler import Scheduler
from .trigger import TriggerFrontEnd

logger = logging.getLogger(__name__)


class Heartbeat:
    """Runs ``Scheduler.tick`` every ``period_ms`` on one background thread.

    Queued trigger requests are applied at the start of each beat.

    Usage:
        beat = Heartbeat(scheduler, triggers)
        beat.start()
        triggers.request_start()
        ...
        beat.stop()
    """

    def __init__(
        self,
        scheduler: Scheduler,
        triggers: Optional[TriggerFrontEnd] = None,
        period_ms: Optional[int] = None,
    ) -> None:
        self._scheduler = scheduler
        self._triggers = triggers or TriggerFrontEnd()
        self._period_ms = period_ms or config.heartbeat_ms
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def triggers(self) -> TriggerFrontEnd:
        return self._triggers

    @property
    def period_ms(self) -> int:
        return self._period_ms

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def beat(self) -> None:
        """Apply queued requests, then tick once."""
        self._triggers.dispatch(self._scheduler)
        self._scheduler.tick()

    def _run(self) -> None:
        period = self._period_ms / 1000.0
        while not self._stop.wait(period):
            try:
                self.beat()
            except Exception:
                logger.exception("Heartbeat tick failed")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="sceneseq-heartbeat", daemon=True)
        self._thread.start()
        logger.info(f"Heartbeat started ({self._period_ms} ms)")

    def stop(self, timeout: float = 2.0) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning(f"Heartbeat thread still busy after {timeout}s, keeping it registered")
            return
        self._thread = None
        logger.info("Heartbeat stopped")

    def __enter__(self) -> "Heartbeat":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
