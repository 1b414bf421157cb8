import logging

from django.conf import settings
from openai import OpenAI, OpenAIError

from blogsite.constants import DEFAULT_MAX_TOKENS

logger = logging.getLogger(__name__)


class TextGenerator:
    """
    Thin wrapper around the chat completions API.

    ``generate_content`` never raises: a missing key or a failed call gives an
    empty string and callers decide what to fall back to.
    """

    def __init__(self, api_key=None, model=None):
        self._api_key = api_key
        self._model = model
        self._client = None

    @property
    def api_key(self) -> str:
        return self._api_key if self._api_key is not None else settings.OPENAI_API_KEY

    @property
    def model(self) -> str:
        return self._model or settings.AI_MODEL

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key, timeout=settings.AI_REQUEST_TIMEOUT
            )
        return self._client

    def generate_content(
        self, prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS, temperature=0.7
    ) -> str:
        if not self.available:
            logger.warning("AI API key not configured, returning empty response")
            return ""

        prompt = prompt[: settings.AI_PROMPT_MAX_CHARS]
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as e:
            logger.error(f"Content generation failed: {e}")
            return ""

        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()

    def connection_ok(self) -> bool:
        """Cheapest possible round trip to check the key and the model."""
        return bool(self.generate_content("Hi", max_tokens=10))


generator = TextGenerator()
