"""Collects values an agent hands back through a tool call."""

from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar('T')


class StorageTool(Generic[T]):
    """
    Receives structured output from the model as tool-call arguments.

    The model is asked to submit its answer through a tool instead of
    free text, so the answer arrives as one argument value.
    """

    def __init__(self):
        self._values: List[T] = []

    def store(self, value: T) -> dict[str, Any]:
        """Tool body; returns an MCP-compatible response."""
        self._values.append(value)
        return {
            "content": [{
                "type": "text",
                "text": f"Report received ({len(self._values)})."
            }]
        }

    @property
    def values(self) -> List[T]:
        return self._values.copy()

    @property
    def last(self) -> Optional[T]:
        """Most recent submission; a model may resubmit after corrections."""
        return self._values[-1] if self._values else None

    def clear(self):
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)
