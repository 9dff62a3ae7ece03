"""Gemini chat model access through LangChain."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from agent.utils import JSONExtractionError, coerce_content_to_text, extract_json_object

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"


class LLMError(Exception):
    """Base class for LLM failures; callers fall back to local analysis."""


class LLMUnavailableError(LLMError):
    """Raised when no API key is configured."""


class LLMResponseError(LLMError):
    """Raised when the model call fails or returns unusable output."""


def llm_configured() -> bool:
    return bool(os.getenv("GOOGLE_API_KEY"))


@lru_cache(maxsize=1)
def get_chat_model() -> ChatGoogleGenerativeAI:
    if not llm_configured():
        raise LLMUnavailableError("GOOGLE_API_KEY is not set")
    return ChatGoogleGenerativeAI(
        model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
        temperature=0.2,
    )


async def invoke_json(template: str, **variables: Any) -> dict[str, Any]:
    """Render `template`, call the model and parse its JSON answer."""

    llm = get_chat_model()
    prompt = ChatPromptTemplate.from_template(template)
    messages = prompt.format_messages(**variables)
    try:
        ai_message = await llm.ainvoke(messages)
    except Exception as exc:
        raise LLMResponseError(f"Model call failed: {exc}") from exc

    text = coerce_content_to_text(ai_message.content)
    try:
        return extract_json_object(text)
    except JSONExtractionError as exc:
        logger.debug("Unparsable model output: %s", text[:500])
        raise LLMResponseError(str(exc)) from exc
