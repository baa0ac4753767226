# filename: openai_service.py
# location: blindhire/services/

import logging

from openai import OpenAI

from blindhire.services.ai_clients import parse_model_json

logger = logging.getLogger(__name__)


class OpenAIClient:
    name = "openai"

    def __init__(self, api_key, model_name=None, timeout=20):
        self.model_name = model_name or "gpt-4o-mini"
        # the client enforces the timeout on every request
        self._client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def _complete(self, prompt: str, temperature: float, json_mode: bool) -> str:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        completion = self._client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": "You are a careful assistant for a fair-hiring platform."},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            **kwargs,
        )
        return (completion.choices[0].message.content or "").strip()

    def generate_text(self, prompt: str, temperature: float = 0.1) -> str:
        return self._complete(prompt, temperature, json_mode=False)

    def generate_json(self, prompt: str, temperature: float = 0.2):
        return parse_model_json(self._complete(prompt, temperature, json_mode=True))
