import os

from openai import OpenAI

from statement_parser.core import settings
from statement_parser.logger import get_logger

logger = get_logger(__name__)


class LLMClient:
    """Text-in, text-out access to an OpenAI-compatible chat model.

    No retries: a timeout or API error propagates so the caller can fall
    back to its deterministic path.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = settings.DEFAULT_OPENAI_MODEL,
        base_url: str | None = None,
        timeout: float = settings.DEFAULT_AI_TIMEOUT,
        name: str = settings.DEFAULT_AI_BACKEND_NAME,
    ):
        self.client = OpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url or os.getenv("OPENAI_BASE_URL") or None,
            timeout=timeout,
            max_retries=0,
        )
        self.model = model
        self.name = name

    @classmethod
    def from_env(cls) -> "LLMClient | None":
        api_key = settings.get_env_str("OPENAI_API_KEY")
        if not api_key:
            logger.info("[AI] OPENAI_API_KEY not set. AI backend disabled.")
            return None
        model = settings.get_env_str("OPENAI_MODEL", settings.DEFAULT_OPENAI_MODEL)
        base_url = settings.get_env_str("OPENAI_BASE_URL")
        timeout = settings.get_env_float("AI_TIMEOUT", settings.DEFAULT_AI_TIMEOUT, min_value=1.0)
        name = settings.get_env_str("AI_BACKEND_NAME", settings.DEFAULT_AI_BACKEND_NAME)
        logger.info(
            "[AI] Backend '%s' enabled: model=%s, base_url=%s, timeout=%ss",
            name,
            model,
            base_url or "default",
            timeout,
        )
        return cls(api_key=api_key, model=model, base_url=base_url, timeout=timeout, name=name)

    def complete(
        self,
        instructions: str,
        prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> str | None:
        kwargs: dict = {}
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": instructions},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            **kwargs,
        )
        return self._extract_output_text(response)

    @staticmethod
    def _extract_output_text(response: object) -> str | None:
        choices = getattr(response, "choices", None)
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if isinstance(content, str) and content.strip():
            return content
        return None
