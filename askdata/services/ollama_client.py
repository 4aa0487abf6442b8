"""Ollama access: chat models for each pipeline stage and a cheap availability check"""
import logging
from typing import List, Optional

import httpx
from langchain_ollama import ChatOllama

from ..config import settings

logger = logging.getLogger(__name__)


class OllamaClient:
    """Builds chat models against one Ollama host"""

    def __init__(self, host: Optional[str] = None):
        self.host = (host or settings.OLLAMA_HOST).rstrip("/")

    def get_llm(
        self,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        json_mode: bool = False
    ) -> ChatOllama:
        """
        Chat model for one call site.

        Model and temperature default to the SQL model and the configured
        temperature, read at call time so settings overrides apply.
        """
        kwargs = {
            "base_url": self.host,
            "model": model or settings.OLLAMA_SQL_MODEL,
            "temperature": settings.OLLAMA_TEMPERATURE if temperature is None else temperature,
            "client_kwargs": {"timeout": settings.OLLAMA_TIMEOUT},
        }
        if json_mode:
            kwargs["format"] = "json"
        return ChatOllama(**kwargs)

    async def list_models(self) -> List[str]:
        """
        Names of the models installed on the host.

        Raises:
            httpx.HTTPError: If the host is unreachable or answers with an error
        """
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(f"{self.host}/api/tags")
            response.raise_for_status()
            return [m.get("name", "") for m in response.json().get("models", [])]

    async def health_check(self) -> bool:
        """
        Check the host answers and both configured models are installed.

        Lists models instead of running a completion.
        """
        try:
            names = await self.list_models()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Ollama health check failed: {e}")
            return False

        missing = [
            model for model in (settings.OLLAMA_SQL_MODEL, settings.OLLAMA_CHART_MODEL)
            if not any(name == model or name.startswith(f"{model}:") for name in names)
        ]
        if missing:
            logger.warning(f"Ollama models not installed: {missing}")
            return False
        return True


# Global client instance
_client: Optional[OllamaClient] = None


def get_ollama_client() -> OllamaClient:
    """Get global Ollama client instance"""
    global _client
    if _client is None:
        _client = OllamaClient()
    return _client


def get_llm(
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    json_mode: bool = False
) -> ChatOllama:
    """Chat model from the global client"""
    return get_ollama_client().get_llm(model=model, temperature=temperature, json_mode=json_mode)
