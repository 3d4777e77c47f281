"""Provider-neutral model interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .cache import CacheEntry


@dataclass
class ModelContext:
    """Everything a provider needs besides the user prompt."""
    system_prompt: str
    screenshot: Optional[str] = None        # base64 PNG
    cached_context: Optional[str] = None    # CacheEntry.name from this provider


@dataclass
class RawModelResponse:
    """Unparsed model output; one shared parser consumes it."""
    text: str
    provider: str
    model: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class ModelProvider(ABC):
    """A generative model behind one narrow call."""

    name: str = "base"
    supports_context_cache: bool = False

    @abstractmethod
    async def generate(self, prompt: str, context: ModelContext) -> RawModelResponse:
        """Run the model once and return its text."""

    async def create_cached_context(self, system_prompt: str, ttl_seconds: int) -> Optional[CacheEntry]:
        """Create a provider-side context holding the system prompt, if supported."""
        return None
