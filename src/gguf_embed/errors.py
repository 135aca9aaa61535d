"""Error taxonomy for gguf-embed."""

from __future__ import annotations

from dataclasses import dataclass, field


class GgufEmbedError(RuntimeError):
    """Base class for every failure reported by the CLI."""


class UsageError(GgufEmbedError):
    pass


class ModelLoadError(GgufEmbedError):
    pass


class EmbeddingError(GgufEmbedError):
    pass


class BinaryNotFoundError(GgufEmbedError):
    pass


@dataclass
class ProcessError(GgufEmbedError):
    returncode: int
    stderr: str
    command: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        detail = self.stderr.strip()
        message = f"embedding binary exited with status {self.returncode}"
        if detail:
            message = f"{message}\nStderr: {detail}"
        return message


class ParseError(GgufEmbedError):
    pass


class EncodingError(GgufEmbedError):
    pass
