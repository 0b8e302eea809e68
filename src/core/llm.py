"""
Life Tracker — LLM access for the coach.

`complete(system, user_message)` sends one prompt to whichever provider the
settings name (gemini by default; anthropic, openai and cohere also work).
Settings are read on every call, so `is_configured()` and `complete()` always
agree, including after the key or provider changes at runtime.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, NamedTuple

logger = logging.getLogger(__name__)


class LLMNotConfiguredError(RuntimeError):
    """Raised by complete() when no LLM_API_KEY is set."""


@dataclass(frozen=True)
class LLMConfig:
    provider: str
    model: str
    api_key: str


_ProviderFn = Callable[[LLMConfig, str, str, int], Awaitable[str]]


class _Provider(NamedTuple):
    fn: _ProviderFn
    default_model: str


_PROVIDERS: dict[str, _Provider] = {}


def _provider(name: str, default_model: str) -> Callable[[_ProviderFn], _ProviderFn]:
    def register(fn: _ProviderFn) -> _ProviderFn:
        _PROVIDERS[name] = _Provider(fn, default_model)
        return fn
    return register


@_provider("gemini", default_model="gemini-2.5-flash")
async def _ask_gemini(config: LLMConfig, system: str, user_message: str, max_tokens: int) -> str:
    import google.generativeai as genai

    genai.configure(api_key=config.api_key)
    model = genai.GenerativeModel(model_name=config.model, system_instruction=system)
    response = await model.generate_content_async(
        user_message,
        generation_config=genai.types.GenerationConfig(max_output_tokens=max_tokens),
    )
    return response.text


@_provider("anthropic", default_model="claude-haiku-4-5-20251001")
async def _ask_anthropic(config: LLMConfig, system: str, user_message: str, max_tokens: int) -> str:
    import anthropic

    response = await anthropic.AsyncAnthropic(api_key=config.api_key).messages.create(
        model=config.model,
        max_tokens=max_tokens,
        system=system,
        messages=[{"role": "user", "content": user_message}],
    )
    return response.content[0].text


def _chat_messages(system: str, user_message: str) -> list[dict]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user_message},
    ]


@_provider("openai", default_model="gpt-4o-mini")
async def _ask_openai(config: LLMConfig, system: str, user_message: str, max_tokens: int) -> str:
    from openai import AsyncOpenAI

    response = await AsyncOpenAI(api_key=config.api_key).chat.completions.create(
        model=config.model,
        max_tokens=max_tokens,
        messages=_chat_messages(system, user_message),
    )
    return response.choices[0].message.content


@_provider("cohere", default_model="command-a-03-2025")
async def _ask_cohere(config: LLMConfig, system: str, user_message: str, max_tokens: int) -> str:
    import cohere

    response = await cohere.AsyncClientV2(api_key=config.api_key).chat(
        model=config.model,
        max_tokens=max_tokens,
        messages=_chat_messages(system, user_message),
    )
    return response.message.content[0].text


def resolve_config() -> LLMConfig | None:
    """The provider, model and key to use right now; None when no key is set.

    Raises ValueError for an unknown LLM_PROVIDER.
    """
    from src.config import settings

    if not settings.LLM_API_KEY:
        return None

    name = settings.LLM_PROVIDER.lower()
    if name not in _PROVIDERS:
        raise ValueError(f"Unknown LLM_PROVIDER={name!r}. Supported: {', '.join(_PROVIDERS)}")
    return LLMConfig(
        provider=name,
        model=settings.LLM_MODEL or _PROVIDERS[name].default_model,
        api_key=settings.LLM_API_KEY,
    )


def is_configured() -> bool:
    from src.config import settings

    return bool(settings.LLM_API_KEY)


async def complete(system: str, user_message: str, max_tokens: int = 1024) -> str:
    """Send one prompt and return the response text.

    Raises LLMNotConfiguredError without a key; provider errors propagate.
    """
    config = resolve_config()
    if config is None:
        raise LLMNotConfiguredError("LLM_API_KEY is not set")

    logger.info("LLM request via %s (%s)", config.provider, config.model)
    return await _PROVIDERS[config.provider].fn(config, system, user_message, max_tokens)
