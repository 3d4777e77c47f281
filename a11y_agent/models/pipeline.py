"""Data models for pipeline state and notifications."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..utils.logging import get_logger


class PipelineStep(Enum):
    """Named steps of the scan -> fix -> rescan pipeline."""
    IDLE = "idle"
    CAPTURING = "capturing"
    SCANNING = "scanning"
    READING = "reading"
    ANALYZING = "analyzing"
    FIXING = "fixing"
    RESCANNING = "rescanning"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class PipelineCallbacks:
    """
    Advisory notifications for UI/CLI feedback.

    A callback that raises is logged and ignored; notifications never
    change the pipeline's control flow.
    """
    on_step: Optional[Callable[[PipelineStep], None]] = None
    on_progress: Optional[Callable[[str], None]] = None
    on_error: Optional[Callable[[Exception], None]] = None

    def step(self, step: PipelineStep):
        self._notify(self.on_step, step)

    def progress(self, message: str):
        self._notify(self.on_progress, message)

    def error(self, error: Exception):
        self._notify(self.on_error, error)

    @staticmethod
    def _notify(callback, value):
        if callback is None:
            return
        try:
            callback(value)
        except Exception as e:
            get_logger().warning(f"Pipeline callback raised {type(e).__name__}: {e}")
