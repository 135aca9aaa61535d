from __future__ import annotations

import os
from pathlib import Path

import pytest

from gguf_embed.config import EmbeddingRequest, RuntimeSettings, default_thread_count
from gguf_embed.env import load_dotenv
from gguf_embed.errors import UsageError


def test_request_defaults_and_options() -> None:
    request = EmbeddingRequest(model_path="m.gguf", text="hi", thread_count=4)
    assert request.gpu_layer_count == 0
    load = request.load_options(context_size=512)
    assert load.context_size == 512
    assert load.thread_count == 4
    assert load.embedding is True
    embed = request.embed_options(normalize=False)
    assert embed.thread_count == 4
    assert embed.dimension_hint is None
    assert embed.normalize is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"model_path": "", "text": "hi", "thread_count": 1},
        {"model_path": "m.gguf", "text": "  ", "thread_count": 1},
        {"model_path": "m.gguf", "text": "hi", "thread_count": 0},
        {"model_path": "m.gguf", "text": "hi", "thread_count": 1, "gpu_layer_count": -1},
        {"model_path": "m.gguf", "text": "hi", "thread_count": 1, "dimension_hint": 0},
    ],
)
def test_request_validation(kwargs: dict) -> None:
    with pytest.raises(UsageError):
        EmbeddingRequest(**kwargs)


def test_settings_defaults() -> None:
    settings = RuntimeSettings.from_env({})
    assert settings.thread_count == default_thread_count()
    assert settings.gpu_layer_count == 0
    assert settings.model_path is None
    assert settings.backend == "llama"


def test_settings_from_env() -> None:
    settings = RuntimeSettings.from_env(
        {
            "GGUF_EMBED_MODEL": "/models/a.gguf",
            "GGUF_EMBED_THREADS": "3",
            "GGUF_EMBED_GPU_LAYERS": "12",
            "GGUF_EMBED_BINARY": "/opt/llama/embedding",
            "GGUF_EMBED_BACKEND": "MOCK",
        }
    )
    assert settings.to_dict() == {
        "model_path": "/models/a.gguf",
        "thread_count": 3,
        "gpu_layer_count": 12,
        "binary": "/opt/llama/embedding",
        "backend": "mock",
    }


@pytest.mark.parametrize(
    "env",
    [{"GGUF_EMBED_THREADS": "many"}, {"GGUF_EMBED_BACKEND": "cuda"}],
)
def test_settings_invalid(env: dict) -> None:
    with pytest.raises(UsageError):
        RuntimeSettings.from_env(env)


def test_dotenv_applies_prefixed_keys_only(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so monkeypatch restores the original state on teardown.
    for key in ("GGUF_EMBED_THREADS", "GGUF_EMBED_MODEL", "UNRELATED_KEY"):
        monkeypatch.setenv(key, "unset")
        monkeypatch.delenv(key)
    monkeypatch.setenv("GGUF_EMBED_GPU_LAYERS", "7")
    env_path = tmp_path / ".env"
    env_path.write_text(
        "\n".join(
            [
                "# local defaults",
                "export GGUF_EMBED_THREADS=2",
                "GGUF_EMBED_MODEL='/models/nomic.gguf'",
                "GGUF_EMBED_GPU_LAYERS=99",
                "UNRELATED_KEY=value",
                "not an assignment",
            ]
        ),
        encoding="utf-8",
    )
    applied = load_dotenv(str(env_path))

    assert sorted(applied) == ["GGUF_EMBED_MODEL", "GGUF_EMBED_THREADS"]
    assert os.environ["GGUF_EMBED_MODEL"] == "/models/nomic.gguf"
    assert os.environ["GGUF_EMBED_GPU_LAYERS"] == "7"
    assert "UNRELATED_KEY" not in os.environ


def test_dotenv_missing_file(tmp_path: Path) -> None:
    assert load_dotenv(str(tmp_path / "absent.env")) == []
