"""Provider for OpenAI and OpenAI-compatible chat completion endpoints."""

from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from ..utils import get_logger
from .base import ModelContext, ModelProvider, RawModelResponse


DEFAULT_OPENAI_MODEL = "gpt-4o"


class OpenAIProvider(ModelProvider):
    """Chat completions in JSON mode. No provider-side context cache."""

    name = "openai"
    supports_context_cache = False

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.2,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model or DEFAULT_OPENAI_MODEL
        self.temperature = temperature
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.logger = get_logger()

    def _build_messages(self, prompt: str, context: ModelContext) -> List[Dict[str, Any]]:
        user_content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
        if context.screenshot:
            user_content.append({
                "type": "image_url",
                "image_url": {"url": f"data:image/png;base64,{context.screenshot}"},
            })
        return [
            {"role": "system", "content": context.system_prompt},
            {"role": "user", "content": user_content},
        ]

    async def generate(self, prompt: str, context: ModelContext) -> RawModelResponse:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=self._build_messages(prompt, context),
            response_format={"type": "json_object"},
            temperature=self.temperature,
        )

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        self.logger.debug(f"OpenAI response: {len(text)} chars from {self.model}")
        return RawModelResponse(
            text=text,
            provider=self.name,
            model=self.model,
            metadata={"total_tokens": getattr(usage, "total_tokens", None)},
        )
