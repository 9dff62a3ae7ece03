"""LLM access used by the insight and emotion analysis services."""

from agent.llm import LLMError, LLMResponseError, LLMUnavailableError, invoke_json, llm_configured

__all__ = ["LLMError", "LLMResponseError", "LLMUnavailableError", "invoke_json", "llm_configured"]
