"""In-process embeddings through the llama-cpp-python binding."""

from __future__ import annotations

from pathlib import Path
import time
from typing import Any, Callable

from gguf_embed.config import EmbedOptions, LoadOptions
from gguf_embed.embeddings.types import EmbeddingResult
from gguf_embed.errors import EmbeddingError, ModelLoadError

GGUF_MAGIC = b"GGUF"
# ggml_type enum value llama.cpp uses for an f32 KV cache.
GGML_TYPE_F32 = 0


def check_model_file(path: Path) -> None:
    if not path.exists():
        raise ModelLoadError(f"Model file not found: {path}")
    if not path.is_file():
        raise ModelLoadError(f"Model path is not a file: {path}")
    try:
        with path.open("rb") as handle:
            magic = handle.read(len(GGUF_MAGIC))
    except OSError as exc:
        raise ModelLoadError(f"Model file is not readable: {path}: {exc}") from exc
    if magic != GGUF_MAGIC:
        raise ModelLoadError(f"Not a GGUF model file: {path}")


def _default_factory(**kwargs: Any) -> Any:
    from llama_cpp import Llama

    return Llama(**kwargs)


class LlamaEmbeddingsClient:
    """Owns one loaded llama.cpp model; use as a context manager so the handle is always freed."""

    def __init__(self, llm: Any, model: str) -> None:
        self._llm = llm
        self._model = model

    @classmethod
    def load(
        cls,
        model_path: str | Path,
        options: LoadOptions | None = None,
        *,
        factory: Callable[..., Any] = _default_factory,
    ) -> LlamaEmbeddingsClient:
        options = options or LoadOptions()
        path = Path(model_path).expanduser()
        check_model_file(path)
        if not options.embedding:
            raise ModelLoadError("Embedding output must be enabled to load an embedding model")

        kwargs: dict[str, Any] = {
            "model_path": str(path),
            "embedding": True,
            "n_ctx": options.context_size,
            "n_gpu_layers": options.gpu_layer_count,
            "verbose": options.verbose,
        }
        if options.thread_count:
            kwargs["n_threads"] = options.thread_count
            kwargs["n_threads_batch"] = options.thread_count
        if not options.f16_memory:
            # llama.cpp defaults its KV cache to f16; f32 is the opt-out.
            kwargs["type_k"] = GGML_TYPE_F32
            kwargs["type_v"] = GGML_TYPE_F32

        try:
            llm = factory(**kwargs)
        except (ValueError, RuntimeError, OSError) as exc:
            raise ModelLoadError(f"Failed to load model {path}: {exc}") from exc
        return cls(llm, model=path.name)

    @property
    def closed(self) -> bool:
        return self._llm is None

    def native_dimension(self) -> int:
        return int(self._require().n_embd())

    def embed(self, text: str, options: EmbedOptions) -> EmbeddingResult:
        llm = self._require()
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text")

        start = time.perf_counter()
        try:
            output = llm.embed(text, normalize=options.normalize)
        except (ValueError, RuntimeError) as exc:
            raise EmbeddingError(f"Native embedding call failed: {exc}") from exc
        latency_ms = int((time.perf_counter() - start) * 1000)

        values = _pooled_vector(output)
        if not values:
            raise EmbeddingError("Native engine returned an empty embedding")

        native = len(values)
        hint = options.dimension_hint
        if hint is not None and hint < native:
            values = values[:hint]

        return EmbeddingResult(
            values=values,
            model=self._model,
            source="llama",
            raw={
                "latency_ms": latency_ms,
                "native_dimension": native,
                "dimension_hint": hint,
                "normalized": options.normalize,
                "thread_count": options.thread_count,
            },
        )

    def embed_tokens(self, tokens: list[int], options: EmbedOptions) -> EmbeddingResult:
        llm = self._require()
        if not tokens:
            raise EmbeddingError("Cannot embed an empty token list")
        try:
            text = llm.detokenize(tokens).decode("utf-8", errors="replace")
        except (ValueError, RuntimeError, IndexError) as exc:
            raise EmbeddingError(f"Failed to convert tokens to text: {exc}") from exc
        return self.embed(text, options)

    def close(self) -> None:
        llm, self._llm = self._llm, None
        if llm is None:
            return
        closer = getattr(llm, "close", None)
        if callable(closer):
            closer()

    def __enter__(self) -> LlamaEmbeddingsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _require(self) -> Any:
        if self._llm is None:
            raise EmbeddingError("Model handle has been released")
        return self._llm


def _pooled_vector(output: Any) -> list[float]:
    if not output:
        return []
    first = output[0]
    # Models without pooling yield one row per token; use the first row.
    if isinstance(first, (list, tuple)):
        return [float(value) for value in first]
    return [float(value) for value in output]
