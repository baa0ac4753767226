# blindhire/services/gemini_service.py
import logging

import google.generativeai as genai

from blindhire.services.ai_clients import parse_model_json

logger = logging.getLogger(__name__)


class GeminiClient:
    name = "gemini"

    def __init__(self, api_key, model_name=None, timeout=20):
        self.api_key = api_key
        self.model_name = model_name or "models/gemini-2.5-flash"
        self.timeout = timeout
        self._model = None

    @property
    def model(self):
        """Lazy initialization of the Gemini model"""
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
            logger.info(f"Gemini model '{self.model_name}' initialized")
        return self._model

    def generate_text(self, prompt: str, temperature: float = 0.1) -> str:
        response = self.model.generate_content(
            prompt,
            generation_config=genai.GenerationConfig(temperature=temperature),
            request_options={"timeout": self.timeout},
        )
        return (response.text or "").strip()

    def generate_json(self, prompt: str, temperature: float = 0.2):
        response = self.model.generate_content(
            prompt,
            generation_config=genai.GenerationConfig(
                temperature=temperature,
                response_mime_type="application/json",
            ),
            request_options={"timeout": self.timeout},
        )
        return parse_model_json(response.text)
