"""Exception types for the accessibility agent."""

from typing import Optional


class A11yAgentError(Exception):
    """Base class for all agent errors."""


class ConfigError(A11yAgentError, ValueError):
    """Invalid input or configuration, detected before any collaborator call."""


class AuditError(A11yAgentError):
    """Browser capture or accessibility audit failed."""


class AnalysisError(A11yAgentError):
    """Model returned an empty, malformed or schema-violating response."""


class StageError(A11yAgentError):
    """A pipeline stage failed. The original exception is chained as __cause__."""

    def __init__(self, stage, error: Exception, message: Optional[str] = None):
        self.stage = stage
        self.error = error
        stage_name = getattr(stage, "value", stage)
        super().__init__(message or f"{stage_name} failed: {error}")
