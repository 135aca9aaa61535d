"""Embedding clients and output extraction."""

from gguf_embed.embeddings.client import EmbeddingsClient, create_embeddings_client
from gguf_embed.embeddings.extract import extract_embedding, extract_json_embedding
from gguf_embed.embeddings.llama import LlamaEmbeddingsClient
from gguf_embed.embeddings.process import ProcessEmbeddingsClient, find_embedding_binary
from gguf_embed.embeddings.types import EmbeddingResult

__all__ = [
    "EmbeddingResult",
    "EmbeddingsClient",
    "LlamaEmbeddingsClient",
    "ProcessEmbeddingsClient",
    "create_embeddings_client",
    "extract_embedding",
    "extract_json_embedding",
    "find_embedding_binary",
]
