"""Rich theme for gguf-embed diagnostics."""

from __future__ import annotations

from rich.theme import Theme

THEME = Theme(
    {
        "accent": "bright_blue",
        "info": "dim",
        "warning": "red3",
        "success": "green3",
        "error": "bold red3",
        "border": "grey50",
        "label": "dim",
        "value": "white",
        "path": "cyan",
    }
)
