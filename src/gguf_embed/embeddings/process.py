"""Embeddings from a prebuilt llama.cpp embedding executable."""

from __future__ import annotations

from pathlib import Path
import shutil
import subprocess
import time
from typing import Callable, Sequence

from gguf_embed.config import EmbeddingRequest
from gguf_embed.embeddings.extract import extract_embedding, extract_json_embedding
from gguf_embed.embeddings.llama import check_model_file
from gguf_embed.embeddings.types import EmbeddingResult
from gguf_embed.errors import BinaryNotFoundError, ParseError, ProcessError, UsageError

DEFAULT_CANDIDATES = (
    "../build/bin/embedding",
    "./build/bin/embedding",
    "build/bin/embedding",
    "../build/bin/llama-embedding",
    "./build/bin/llama-embedding",
)
PATH_BINARY = "llama-embedding"
PROTOCOLS = ("text", "json")


def find_embedding_binary(
    explicit: str | None = None,
    candidates: Sequence[str] = DEFAULT_CANDIDATES,
    *,
    search_path: bool = True,
) -> str:
    tried: list[str] = []
    if explicit:
        if Path(explicit).is_file():
            return explicit
        raise BinaryNotFoundError(f"Embedding binary not found: {explicit}")

    for candidate in candidates:
        tried.append(candidate)
        if Path(candidate).is_file():
            return candidate

    if search_path:
        tried.append(f"{PATH_BINARY} on PATH")
        located = shutil.which(PATH_BINARY)
        if located:
            return located

    raise BinaryNotFoundError(f"Embedding binary not found; tried: {', '.join(tried)}")


def build_command(binary: str, request: EmbeddingRequest, protocol: str = "text") -> list[str]:
    command = [binary, "-m", request.model_path, "-p", request.text]
    if request.thread_count > 0:
        command += ["-t", str(request.thread_count)]
    if request.gpu_layer_count > 0:
        command += ["-ngl", str(request.gpu_layer_count)]
    if protocol == "json":
        command += ["--embd-output-format", "json"]
    return command


class ProcessEmbeddingsClient:
    def __init__(self, binary: str, protocol: str = "text") -> None:
        if protocol not in PROTOCOLS:
            raise UsageError(f"Unsupported output protocol: {protocol}")
        self._binary = binary
        self._protocol = protocol

    @property
    def binary(self) -> str:
        return self._binary

    def embed(self, request: EmbeddingRequest) -> EmbeddingResult:
        check_model_file(request.model_file)
        command = build_command(self._binary, request, self._protocol)
        start = time.perf_counter()
        try:
            completed = subprocess.run(command, capture_output=True, text=True, errors="replace")
        except OSError as exc:
            raise BinaryNotFoundError(f"Failed to run embedding binary {self._binary}: {exc}") from exc
        latency_ms = int((time.perf_counter() - start) * 1000)

        if completed.returncode != 0:
            raise ProcessError(returncode=completed.returncode, stderr=completed.stderr, command=command)

        values, stream = self._extract(completed.stdout, completed.stderr)
        return EmbeddingResult(
            values=values,
            model=Path(request.model_path).name,
            source="process",
            raw={
                "latency_ms": latency_ms,
                "binary": self._binary,
                "protocol": self._protocol,
                "stream": stream,
            },
        )

    def _extract(self, stdout: str, stderr: str) -> tuple[list[float], str]:
        extractor: Callable[[str], list[float]] = (
            extract_json_embedding if self._protocol == "json" else extract_embedding
        )
        # Some llama.cpp builds log the result line to stderr instead of stdout.
        last_error: ParseError | None = None
        for stream, text in (("stdout", stdout), ("stderr", stderr)):
            try:
                return extractor(text), stream
            except ParseError as exc:
                last_error = exc
        raise ParseError(f"failed to parse embeddings output: {last_error}") from last_error
