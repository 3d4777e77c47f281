"""Model providers and the context cache."""

from .base import ModelContext, ModelProvider, RawModelResponse
from .cache import CacheEntry, ContextCache, cache_key
from .claude import ClaudeProvider
from .openai_compat import OpenAIProvider, DEFAULT_OPENAI_MODEL

__all__ = [
    "ModelContext",
    "ModelProvider",
    "RawModelResponse",
    "CacheEntry",
    "ContextCache",
    "cache_key",
    "ClaudeProvider",
    "OpenAIProvider",
    "DEFAULT_OPENAI_MODEL",
]
