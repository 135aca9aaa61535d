"""Render embedding vectors for stdout."""

from __future__ import annotations

import json

from gguf_embed.config import DEFAULT_PRECISION, OUTPUT_FORMATS
from gguf_embed.embeddings.types import EmbeddingResult
from gguf_embed.errors import EncodingError, UsageError


def render_text(values: list[float], precision: int = DEFAULT_PRECISION) -> str:
    if precision < 0:
        raise UsageError(f"Precision must be non-negative, got {precision}")
    return ", ".join(f"{value:.{precision}f}" for value in values)


def render_json(result: EmbeddingResult) -> str:
    payload = {
        "embeddings": list(result.values),
        "dimension": result.dimension,
    }
    try:
        return json.dumps(payload, indent=2, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Error encoding JSON: {exc}") from exc


def render(result: EmbeddingResult, fmt: str = "text", precision: int = DEFAULT_PRECISION) -> str:
    if fmt == "json":
        return render_json(result)
    if fmt == "text":
        return render_text(result.values, precision)
    raise UsageError(f"Unsupported output format: {fmt} (expected one of {', '.join(OUTPUT_FORMATS)})")
