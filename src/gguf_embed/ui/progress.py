"""Status spinners for long native calls."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from gguf_embed.ui.console import get_console


@contextmanager
def status_spinner(message: str) -> Iterator[object]:
    console = get_console()
    with console.status(message, spinner="dots", spinner_style="accent") as status:
        yield status
