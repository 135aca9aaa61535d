from __future__ import annotations

import os
from pathlib import Path
import subprocess
import sys
from typing import Callable

import pytest


@pytest.fixture
def model_file(tmp_path: Path) -> Path:
    path = tmp_path / "nomic-embed-text.Q4_K_M.gguf"
    path.write_bytes(b"GGUF" + b"\x00" * 60)
    return path


@pytest.fixture
def fake_binary(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable that mimics the llama.cpp embedding example."""

    def _make(stdout: str = "", stderr: str = "", returncode: int = 0, name: str = "embedding") -> Path:
        path = tmp_path / name
        args_path = tmp_path / f"{name}.args"
        path.write_text(
            "\n".join(
                [
                    f"#!{sys.executable}",
                    "import json, sys",
                    f"open({str(args_path)!r}, 'w').write(json.dumps(sys.argv[1:]))",
                    f"sys.stdout.write({stdout!r})",
                    f"sys.stderr.write({stderr!r})",
                    f"sys.exit({returncode})",
                    "",
                ]
            ),
            encoding="utf-8",
        )
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def run_cli(tmp_path: Path) -> Callable[..., subprocess.CompletedProcess[str]]:
    def _run(*args: str, input_text: str | None = "", backend: str = "mock") -> subprocess.CompletedProcess[str]:
        env = {key: value for key, value in os.environ.items() if not key.startswith("GGUF_EMBED_")}
        env["PYTHONDONTWRITEBYTECODE"] = "1"
        env["COLUMNS"] = "240"
        env["GGUF_EMBED_BACKEND"] = backend
        return subprocess.run(
            [sys.executable, "-m", "gguf_embed.cli", *args],
            capture_output=True,
            text=True,
            input=input_text,
            env=env,
            cwd=tmp_path,
        )

    return _run
