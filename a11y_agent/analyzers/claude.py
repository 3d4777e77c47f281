"""Claude provider built on the Claude Agent SDK."""

import time
from typing import Any, AsyncIterator, Dict, List, Optional

from claude_agent_sdk import (
    ClaudeSDKClient,
    ClaudeAgentOptions,
    tool,
    create_sdk_mcp_server,
    AssistantMessage,
    TextBlock,
    ResultMessage,
)

from ..errors import AnalysisError
from ..tools.storage_tool import StorageTool
from ..utils import get_logger
from .base import ModelContext, ModelProvider, RawModelResponse
from .cache import CacheEntry


SUBMIT_TOOL = "mcp__a11y__submit_report"

SUBMIT_INSTRUCTIONS = """
When the analysis is complete, call the `submit_report` tool exactly once with
the full JSON report as its `report` argument. Do not wrap it in markdown.
"""

PRIME_PROMPT = "Reply with OK. Audit material follows in later messages."


class ClaudeProvider(ModelProvider):
    """
    Runs one Claude agent session per analysis.

    The report comes back through the ``submit_report`` tool. If the model
    answers in plain text instead, the collected text is used.
    """

    name = "claude"
    supports_context_cache = True

    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None, max_turns: int = 4):
        self.model = model
        self.api_key = api_key
        self.max_turns = max_turns
        self.logger = get_logger()

    def _env(self) -> Dict[str, str]:
        return {"ANTHROPIC_API_KEY": self.api_key} if self.api_key else {}

    async def _messages(self, prompt: str, screenshot: Optional[str]) -> AsyncIterator[Dict[str, Any]]:
        content: List[Dict[str, Any]] = []
        if screenshot:
            content.append({
                "type": "image",
                "source": {"type": "base64", "media_type": "image/png", "data": screenshot},
            })
        content.append({"type": "text", "text": prompt + SUBMIT_INSTRUCTIONS})
        yield {
            "type": "user",
            "message": {"role": "user", "content": content},
            "parent_tool_use_id": None,
        }

    async def generate(self, prompt: str, context: ModelContext) -> RawModelResponse:
        storage: StorageTool[str] = StorageTool()

        @tool(
            "submit_report",
            "Submit the accessibility report as a JSON string",
            {"report": str},
        )
        async def submit_report(args: dict[str, Any]) -> dict[str, Any]:
            return storage.store(args.get("report", ""))

        report_server = create_sdk_mcp_server(
            name="a11y-report",
            version="1.0.0",
            tools=[submit_report],
        )

        options = ClaudeAgentOptions(
            mcp_servers={"a11y": report_server},
            allowed_tools=[SUBMIT_TOOL],
            permission_mode="acceptEdits",
            max_turns=self.max_turns,
            model=self.model,
            env=self._env(),
            system_prompt=context.system_prompt,
        )
        if context.cached_context:
            # Resumed sessions do not restore the system prompt
            options.resume = context.cached_context
            options.fork_session = True

        texts: List[str] = []
        metadata: Dict[str, Any] = {"cached_context": context.cached_context}

        async with ClaudeSDKClient(options=options) as client:
            await client.query(self._messages(prompt, context.screenshot))

            async for message in client.receive_response():
                if isinstance(message, AssistantMessage):
                    for block in message.content:
                        if isinstance(block, TextBlock):
                            texts.append(block.text)

                elif isinstance(message, ResultMessage):
                    self.logger.debug(f"Claude analysis completed in {message.duration_ms}ms")
                    metadata["session_id"] = message.session_id
                    metadata["duration_ms"] = message.duration_ms
                    if message.is_error:
                        raise AnalysisError(f"Claude run failed: {message.result or message.subtype}")

        text = storage.last if storage.last is not None else "\n".join(texts)
        return RawModelResponse(text=text, provider=self.name, model=self.model, metadata=metadata)

    async def create_cached_context(self, system_prompt: str, ttl_seconds: int) -> Optional[CacheEntry]:
        """
        Prime a session with the system prompt and return its id.

        Returns None when the session cannot be created; callers then run
        without a cached context.
        """
        options = ClaudeAgentOptions(
            system_prompt=system_prompt,
            max_turns=1,
            model=self.model,
            env=self._env(),
        )
        session_id = None
        try:
            async with ClaudeSDKClient(options=options) as client:
                await client.query(PRIME_PROMPT)
                async for message in client.receive_response():
                    if isinstance(message, ResultMessage) and not message.is_error:
                        session_id = message.session_id
        except Exception as e:
            self.logger.warning(f"Context cache creation failed: {e}")
            return None

        if not session_id:
            return None
        return CacheEntry(name=session_id, expire_time=time.time() + ttl_seconds)
