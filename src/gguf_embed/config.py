"""Request and runtime configuration for gguf-embed."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from gguf_embed.errors import UsageError

DEFAULT_CONTEXT_SIZE = 2048
DEFAULT_PRECISION = 6
OUTPUT_FORMATS = ("text", "json")
BACKENDS = ("llama", "mock")


def default_thread_count() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class LoadOptions:
    context_size: int = DEFAULT_CONTEXT_SIZE
    f16_memory: bool = True
    embedding: bool = True
    gpu_layer_count: int = 0
    thread_count: int | None = None
    verbose: bool = False

    def to_dict(self) -> dict:
        return {
            "context_size": self.context_size,
            "f16_memory": self.f16_memory,
            "embedding": self.embedding,
            "gpu_layer_count": self.gpu_layer_count,
            "thread_count": self.thread_count,
            "verbose": self.verbose,
        }


@dataclass(frozen=True)
class EmbedOptions:
    thread_count: int
    dimension_hint: int | None = None
    normalize: bool = True

    def to_dict(self) -> dict:
        return {
            "thread_count": self.thread_count,
            "dimension_hint": self.dimension_hint,
            "normalize": self.normalize,
        }


@dataclass(frozen=True)
class EmbeddingRequest:
    model_path: str
    text: str
    thread_count: int
    gpu_layer_count: int = 0
    dimension_hint: int | None = None

    def __post_init__(self) -> None:
        if not self.model_path:
            raise UsageError("Model path is required")
        if not self.text.strip():
            raise UsageError("No input text provided")
        if self.thread_count < 1:
            raise UsageError(f"Thread count must be positive, got {self.thread_count}")
        if self.gpu_layer_count < 0:
            raise UsageError(f"GPU layer count must be non-negative, got {self.gpu_layer_count}")
        if self.dimension_hint is not None and self.dimension_hint < 1:
            raise UsageError(f"Dimension hint must be positive, got {self.dimension_hint}")

    @property
    def model_file(self) -> Path:
        return Path(self.model_path).expanduser()

    def load_options(self, context_size: int = DEFAULT_CONTEXT_SIZE, f16_memory: bool = True) -> LoadOptions:
        return LoadOptions(
            context_size=context_size,
            f16_memory=f16_memory,
            gpu_layer_count=self.gpu_layer_count,
            thread_count=self.thread_count,
        )

    def embed_options(self, normalize: bool = True) -> EmbedOptions:
        return EmbedOptions(
            thread_count=self.thread_count,
            dimension_hint=self.dimension_hint,
            normalize=normalize,
        )

    def to_dict(self) -> dict:
        return {
            "model_path": self.model_path,
            "text": self.text,
            "thread_count": self.thread_count,
            "gpu_layer_count": self.gpu_layer_count,
            "dimension_hint": self.dimension_hint,
        }


@dataclass(frozen=True)
class RuntimeSettings:
    """Defaults resolved once from the environment at startup."""

    model_path: str | None
    thread_count: int
    gpu_layer_count: int
    binary: str | None
    backend: str

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> RuntimeSettings:
        env = os.environ if environ is None else environ
        backend = (env.get("GGUF_EMBED_BACKEND") or "llama").strip().lower()
        if backend not in BACKENDS:
            raise UsageError(f"Unsupported GGUF_EMBED_BACKEND: {backend}")
        return cls(
            model_path=env.get("GGUF_EMBED_MODEL") or None,
            thread_count=_env_int(env, "GGUF_EMBED_THREADS", default_thread_count()),
            gpu_layer_count=_env_int(env, "GGUF_EMBED_GPU_LAYERS", 0),
            binary=env.get("GGUF_EMBED_BINARY") or None,
            backend=backend,
        )

    def to_dict(self) -> dict:
        return {
            "model_path": self.model_path,
            "thread_count": self.thread_count,
            "gpu_layer_count": self.gpu_layer_count,
            "binary": self.binary,
            "backend": self.backend,
        }


def _env_int(env, key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise UsageError(f"{key} must be an integer, got {raw!r}") from exc
