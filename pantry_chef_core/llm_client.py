from __future__ import annotations

from typing import Any, Dict, List, Optional

from openai import OpenAI

from .config import Settings
from .errors import MissingConfigurationError


def build_openai_client(settings: Settings) -> OpenAI:
    """
    Construye el cliente de OpenAI.

    Lo llama el entry point (lifespan de la API, tools) una sola vez; el
    cliente se inyecta después en el detector y el generador.
    """
    if not settings.has_model_key:
        raise MissingConfigurationError("OPENAI_API_KEY no está configurada en el .env")
    return OpenAI(api_key=settings.openai_api_key)


def reply_text(completion: Any) -> str:
    """
    Texto de la primera opción de una chat completion.

    Raises
    ------
    ValueError
        Si el modelo no devolvió texto (sin choices, contenido vacío o un
        refusal).
    """
    choices = getattr(completion, "choices", None) or []
    if not choices:
        raise ValueError("No text response from model")
    content = choices[0].message.content
    if not isinstance(content, str) or not content.strip():
        raise ValueError("No text response from model")
    return content


def chat(
    client: OpenAI,
    *,
    model: str,
    user_content: str | List[Dict[str, Any]],
    system: Optional[str] = None,
    max_tokens: int = 1000,
    temperature: float = 0.2,
) -> str:
    """
    Una llamada single-shot a chat.completions; devuelve el texto crudo.
    """
    messages: List[Dict[str, Any]] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": user_content})

    completion = client.chat.completions.create(
        model=model,
        messages=messages,
        max_tokens=max_tokens,
        temperature=temperature,
    )
    return reply_text(completion)
