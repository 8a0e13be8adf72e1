import os
from typing import Optional
from langchain_openai import ChatOpenAI
from pydantic import SecretStr
from app.core.config import settings

class LLMFactory:
    """Factory for creating configured LLM instances with tracing."""

    @staticmethod
    def create_llm(
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = True,
        tracing_project: Optional[str] = None,
        api_key: Optional[str] = None
    ) -> ChatOpenAI:
        """
        Create a configured ChatOpenAI instance for an OpenAI-compatible API.

        Args:
            model: The model name to use, defaults to LLM_MODEL.
            base_url: API base URL, defaults to LLM_BASE_URL.
            temperature: The temperature for generation.
            max_tokens: Upper bound on completion tokens.
            json_mode: Whether to enforce JSON output.
            tracing_project: The LangSmith project name for tracing.
            api_key: API key (optional, defaults to settings).
        """
        # Set env vars for tracing if provided
        if settings.LANGSMITH_TRACING:
            os.environ["LANGCHAIN_TRACING_V2"] = "true"
            os.environ["LANGCHAIN_ENDPOINT"] = settings.LANGSMITH_ENDPOINT
            os.environ["LANGCHAIN_API_KEY"] = settings.LANGSMITH_API_KEY
            os.environ["LANGCHAIN_PROJECT"] = tracing_project or settings.LANGSMITH_PROJECT

        model_kwargs = {"response_format": {"type": "json_object"}} if json_mode else {}

        return ChatOpenAI(
            model=model or settings.LLM_MODEL,
            base_url=base_url or settings.LLM_BASE_URL,
            api_key=SecretStr(api_key or settings.DEEPSEEK_API_KEY),
            temperature=settings.LLM_TEMPERATURE if temperature is None else temperature,
            max_tokens=max_tokens or settings.LLM_MAX_TOKENS,
            model_kwargs=model_kwargs,
        )
