"""Embedding client interface and factory."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from gguf_embed.config import EmbedOptions, LoadOptions
from gguf_embed.embeddings.llama import LlamaEmbeddingsClient, check_model_file
from gguf_embed.embeddings.mock import MockEmbeddingsClient
from gguf_embed.embeddings.types import EmbeddingResult
from gguf_embed.errors import UsageError


class EmbeddingsClient(Protocol):
    def native_dimension(self) -> int:
        ...

    def embed(self, text: str, options: EmbedOptions) -> EmbeddingResult:
        ...

    def embed_tokens(self, tokens: list[int], options: EmbedOptions) -> EmbeddingResult:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> EmbeddingsClient:
        ...

    def __exit__(self, *exc_info: object) -> None:
        ...


def create_embeddings_client(mode: str, model_path: str, options: LoadOptions | None = None) -> EmbeddingsClient:
    if mode == "llama":
        return LlamaEmbeddingsClient.load(model_path, options)
    if mode == "mock":
        path = Path(model_path).expanduser()
        check_model_file(path)
        return MockEmbeddingsClient(model=path.name)
    raise UsageError(f"Unsupported embeddings backend: {mode}")
