"""Loads GGUF_EMBED_* defaults from a local .env file."""

from __future__ import annotations

import os
from pathlib import Path

ENV_PREFIX = "GGUF_EMBED_"


def load_dotenv(path: str = ".env") -> list[str]:
    """Apply ``GGUF_EMBED_*`` assignments from ``path`` without overriding the environment.

    Returns the keys that were set.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return []
    try:
        text = env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []

    applied: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :]
        key, value = (part.strip() for part in stripped.split("=", 1))
        if not key.startswith(ENV_PREFIX):
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if value == "" or key in os.environ:
            continue
        os.environ[key] = value
        applied.append(key)
    return applied
