# blindhire/services/ai_clients.py
import json
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


def parse_model_json(raw: str) -> Optional[dict]:
    """Parse a model reply as JSON, tolerating prose or fences around the object."""
    trimmed = (raw or "").strip()
    if not trimmed:
        return None
    try:
        return json.loads(trimmed)
    except json.JSONDecodeError:
        start = trimmed.find("{")
        end = trimmed.rfind("}")
        if start != -1 and end > start:
            try:
                return json.loads(trimmed[start:end + 1])
            except json.JSONDecodeError:
                return None
    return None


def available_clients(config) -> List:
    """
    Remote generative clients in priority order (Gemini, then OpenAI).
    Only providers with an API key configured are returned.
    """
    timeout = config.get("AI_TIMEOUT_SECONDS", 20)
    clients = []

    if config.get("GEMINI_API_KEY"):
        from blindhire.services.gemini_service import GeminiClient
        clients.append(GeminiClient(config["GEMINI_API_KEY"], config.get("GEMINI_MODEL"), timeout))

    if config.get("OPENAI_API_KEY"):
        from blindhire.services.openai_service import OpenAIClient
        clients.append(OpenAIClient(config["OPENAI_API_KEY"], config.get("OPENAI_MODEL"), timeout))

    if not clients:
        logger.info("no AI provider configured; local generators only")
    return clients
