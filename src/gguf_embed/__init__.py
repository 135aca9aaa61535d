"""Text embeddings from GGUF models via llama.cpp."""

__version__ = "0.3.0"
