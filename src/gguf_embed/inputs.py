"""Resolve the text to embed from a flag or standard input."""

from __future__ import annotations

from typing import TextIO

from gguf_embed.errors import UsageError
from gguf_embed.ui.render import render_info


def resolve_text(prompt: str | None, stream: TextIO) -> str:
    if prompt:
        return prompt

    render_info("Reading from stdin (press Ctrl+D when done)...")
    try:
        lines = list(stream)
    except (OSError, UnicodeDecodeError) as exc:
        raise UsageError(f"Error reading input: {exc}") from exc

    text = "".join(lines).strip()
    if not text:
        raise UsageError("No input text provided")
    return text


def parse_token_list(raw: str) -> list[int]:
    tokens: list[int] = []
    for part in raw.split(","):
        item = part.strip()
        if not item:
            continue
        try:
            tokens.append(int(item))
        except ValueError as exc:
            raise UsageError(f"Invalid token id: {item!r}") from exc
    if not tokens:
        raise UsageError("No token ids provided")
    return tokens
