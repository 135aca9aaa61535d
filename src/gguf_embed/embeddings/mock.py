"""Deterministic offline embeddings client."""

from __future__ import annotations

import hashlib
import math
import random

from gguf_embed.config import EmbedOptions
from gguf_embed.embeddings.types import EmbeddingResult
from gguf_embed.errors import EmbeddingError


class MockEmbeddingsClient:
    def __init__(self, model: str, dims: int = 768) -> None:
        self._model = model
        self._dims = dims
        self._closed = False

    def native_dimension(self) -> int:
        return self._dims

    def embed(self, text: str, options: EmbedOptions) -> EmbeddingResult:
        if self._closed:
            raise EmbeddingError("Model handle has been released")
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text")
        seed = int(hashlib.sha256((self._model + "|" + text).encode("utf-8")).hexdigest(), 16) % (2**32)
        rng = random.Random(seed)
        vec = [rng.gauss(0, 1) for _ in range(self._dims)]
        if options.normalize:
            norm = math.sqrt(sum(value * value for value in vec)) or 1.0
            vec = [value / norm for value in vec]
        hint = options.dimension_hint
        if hint is not None and hint < self._dims:
            vec = vec[:hint]
        return EmbeddingResult(
            values=vec,
            model=self._model,
            source="mock",
            raw={"mock": True, "native_dimension": self._dims, "dimension_hint": hint},
        )

    def embed_tokens(self, tokens: list[int], options: EmbedOptions) -> EmbeddingResult:
        if not tokens:
            raise EmbeddingError("Cannot embed an empty token list")
        return self.embed(" ".join(str(token) for token in tokens), options)

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> MockEmbeddingsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
