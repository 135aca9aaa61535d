"""Recover an embedding vector from an embedding binary's console output.

The llama.cpp ``embedding`` example prints the pooled vector as a log line::

    embedding 0:  0.012345 -0.054321  0.000123 ...

That line format is not a stable interface. Newer builds accept
``--embd-output-format json`` and emit an OpenAI-style document instead,
which :func:`extract_json_embedding` reads.
"""

from __future__ import annotations

import json
from typing import Any

from gguf_embed.errors import ParseError

EMBEDDING_MARKER = "embedding 0:"


def extract_embedding(text: str) -> list[float]:
    for line in text.splitlines():
        if not line.startswith(EMBEDDING_MARKER):
            continue
        values = _parse_floats(line[len(EMBEDDING_MARKER) :].strip())
        if values:
            return values
    raise ParseError("no embeddings found in output")


def extract_json_embedding(text: str) -> list[float]:
    payload = _find_json_object(text)
    if payload is None:
        raise ParseError("no JSON embedding document found in output")
    data = payload.get("data")
    if not isinstance(data, list) or not data:
        raise ParseError("JSON embedding document has no data entries")
    for fallback_index, item in enumerate(data):
        if not isinstance(item, dict):
            continue
        index = item.get("index", fallback_index)
        if index != 0:
            continue
        embedding = item.get("embedding")
        if not isinstance(embedding, list) or not embedding:
            break
        try:
            return [float(value) for value in embedding]
        except (TypeError, ValueError) as exc:
            raise ParseError(f"non-numeric value in JSON embedding: {exc}") from exc
    raise ParseError("no embeddings found in output")


def _parse_floats(remainder: str) -> list[float]:
    values: list[float] = []
    for token in remainder.split():
        try:
            values.append(float(token))
        except ValueError:
            continue
    return values


def _find_json_object(text: str) -> dict[str, Any] | None:
    # Log lines may surround the document, so decode from each candidate brace.
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            payload, _end = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(payload, dict) and "data" in payload:
            return payload
        start = text.find("{", start + 1)
    return None
