from __future__ import annotations

"""
pantry_chef_core.parsing
========================

Decodificación estricta de las respuestas del modelo.

El modelo no garantiza devolver SOLO JSON: a veces antepone una frase
("Here are the ingredients: ...") o envuelve el array en un bloque de
código. Por eso:

1) Se busca el primer `[` a partir del cual un decoder JSON estricto
   (`json.JSONDecoder.raw_decode`) produce un array.
2) Ese array se valida contra el esquema pydantic del tipo esperado.

El resultado es siempre un valor etiquetado (`ParseSuccess` o
`ParseFailure`); estas funciones nunca lanzan excepciones por contenido
inválido del modelo.
"""

import json
from dataclasses import dataclass
from typing import Any, Generic, List, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

T = TypeVar("T")

NO_ARRAY_REASON = "no JSON array found in model reply"
INVALID_JSON_REASON = "model reply contains no valid JSON array"

_decoder = json.JSONDecoder()


@dataclass(frozen=True)
class ParseSuccess(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ParseFailure:
    reason: str

    @property
    def ok(self) -> bool:
        return False


ParseResult = Union[ParseSuccess[T], ParseFailure]


def extract_json_array(text: str | None) -> ParseResult[List[Any]]:
    """
    Devuelve el primer array JSON válido que aparece en `text`.

    Un `[` que no abre un array JSON válido (p.ej. "[nota]") se saltea y se
    prueba el siguiente.
    """
    if not text or "[" not in text:
        return ParseFailure(NO_ARRAY_REASON)

    start = text.find("[")
    while start != -1:
        try:
            value, _end = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list):
            return ParseSuccess(value)
        start = text.find("[", start + 1)

    return ParseFailure(INVALID_JSON_REASON)


def decode_model_array(text: str | None, item_type: Type[T]) -> ParseResult[List[T]]:
    """
    Extrae el array JSON de la respuesta y lo valida como `list[item_type]`.
    """
    extracted = extract_json_array(text)
    if isinstance(extracted, ParseFailure):
        return extracted

    adapter = TypeAdapter(List[item_type])  # type: ignore[valid-type]
    try:
        items = adapter.validate_python(extracted.value)
    except ValidationError as e:
        return ParseFailure(f"schema validation failed: {e.error_count()} error(s): {e.errors()[0]['msg']}")

    return ParseSuccess(items)
