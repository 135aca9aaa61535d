"""Shared diagnostic console; stdout stays reserved for embedding output."""

from __future__ import annotations

from rich.console import Console

from gguf_embed.ui.theme import THEME

_CONSOLE = Console(theme=THEME, highlight=False, stderr=True)


def get_console() -> Console:
    return _CONSOLE
