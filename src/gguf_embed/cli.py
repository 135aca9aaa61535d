"""CLI entrypoint for gguf-embed."""

from __future__ import annotations

import json
import sys
from typing import List, Optional

import typer

from gguf_embed.config import (
    DEFAULT_CONTEXT_SIZE,
    DEFAULT_PRECISION,
    OUTPUT_FORMATS,
    EmbedOptions,
    EmbeddingRequest,
    LoadOptions,
    RuntimeSettings,
)
from gguf_embed.embeddings.client import EmbeddingsClient, create_embeddings_client
from gguf_embed.embeddings.process import PROTOCOLS, ProcessEmbeddingsClient, find_embedding_binary
from gguf_embed.embeddings.types import EmbeddingResult
from gguf_embed.env import load_dotenv
from gguf_embed.errors import GgufEmbedError, UsageError
from gguf_embed.formatting import render
from gguf_embed.inputs import parse_token_list, resolve_text
from gguf_embed.ui.progress import status_spinner
from gguf_embed.ui.render import (
    render_error,
    render_info,
    render_success,
    render_summary_table,
    render_warning,
)

EXAMPLE_MODEL = "/models/nomic-embed-text-v1.5.Q4_K_M.gguf"

app = typer.Typer(add_completion=False, help="Text embeddings from GGUF models.")
config_app = typer.Typer(add_completion=False, help="Inspect resolved settings.")
app.add_typer(config_app, name="config")


@app.callback(invoke_without_command=True)
def root(ctx: typer.Context) -> None:
    """gguf-embed CLI."""
    load_dotenv()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


@app.command("embed")
def embed(
    model: Optional[str] = typer.Option(
        None, "-m", "--model", envvar="GGUF_EMBED_MODEL", help="Path to GGUF model file (required)."
    ),
    prompt: Optional[str] = typer.Option(
        None, "-p", "-prompt", "--prompt", help="Text to embed; read from stdin when omitted."
    ),
    threads: Optional[int] = typer.Option(None, "-t", "--threads", help="Threads used during computation."),
    gpu_layers: Optional[int] = typer.Option(None, "-ngl", "--gpu-layers", help="Layers offloaded to the GPU."),
    fmt: str = typer.Option("text", "-format", "--format", help="Output format: text or json."),
    precision: int = typer.Option(DEFAULT_PRECISION, "-precision", "--precision", help="Digits in text output."),
    ctx_size: int = typer.Option(DEFAULT_CONTEXT_SIZE, "-c", "--ctx-size", help="Model context size."),
    dimension: Optional[int] = typer.Option(None, "-dim", "--dimension", help="Truncate to this many dimensions."),
    tokens: Optional[str] = typer.Option(None, "-tokens", "--tokens", help="Comma-separated token ids to embed."),
    no_normalize: bool = typer.Option(False, "--no-normalize", help="Return the raw pooled vector."),
    f32_memory: bool = typer.Option(False, "--f32-memory", help="Keep the KV cache in f32 instead of f16."),
) -> None:
    """Embed text in-process with llama.cpp."""
    _require_model(model, "embed")
    try:
        settings = RuntimeSettings.from_env()
        _check_format(fmt)
        if tokens and prompt:
            raise UsageError("Use either -tokens or -p, not both")
        token_ids = parse_token_list(tokens) if tokens else None
        text = " ".join(str(token) for token in token_ids) if token_ids else resolve_text(prompt, sys.stdin)
        request = EmbeddingRequest(
            model_path=model,
            text=text,
            thread_count=threads if threads is not None else settings.thread_count,
            gpu_layer_count=gpu_layers if gpu_layers is not None else settings.gpu_layer_count,
            dimension_hint=dimension,
        )
        options = request.embed_options(normalize=not no_normalize)
        with _load_client(settings, request, ctx_size, f32_memory) as client:
            if token_ids:
                render_info(f"Generating embeddings for {len(token_ids)} tokens")
                with status_spinner("Generating embeddings"):
                    result = client.embed_tokens(token_ids, options)
            else:
                render_info(f"Generating embeddings for: {request.text}")
                with status_spinner("Generating embeddings"):
                    result = client.embed(request.text, options)
        _emit(result, fmt, precision)
    except GgufEmbedError as exc:
        render_error(f"Error: {exc}")
        raise typer.Exit(code=1) from exc


@app.command("wrap")
def wrap(
    model: Optional[str] = typer.Option(
        None, "-m", "--model", envvar="GGUF_EMBED_MODEL", help="Path to GGUF model file (required)."
    ),
    prompt: Optional[str] = typer.Option(
        None, "-p", "-prompt", "--prompt", help="Text to embed; read from stdin when omitted."
    ),
    threads: Optional[int] = typer.Option(None, "-t", "--threads", help="Threads used during computation."),
    gpu_layers: Optional[int] = typer.Option(None, "-ngl", "--gpu-layers", help="Layers offloaded to the GPU."),
    fmt: str = typer.Option("text", "-format", "--format", help="Output format: text or json."),
    precision: int = typer.Option(DEFAULT_PRECISION, "-precision", "--precision", help="Digits in text output."),
    binary: Optional[str] = typer.Option(None, "--binary", help="Path to the llama.cpp embedding executable."),
    protocol: str = typer.Option("text", "--protocol", help="Binary output protocol: text or json."),
) -> None:
    """Embed text by running a prebuilt llama.cpp embedding executable."""
    _require_model(model, "wrap")
    try:
        settings = RuntimeSettings.from_env()
        _check_format(fmt)
        if protocol not in PROTOCOLS:
            raise UsageError(f"Unsupported output protocol: {protocol}")
        text = resolve_text(prompt, sys.stdin)
        request = EmbeddingRequest(
            model_path=model,
            text=text,
            thread_count=threads if threads is not None else settings.thread_count,
            gpu_layer_count=gpu_layers if gpu_layers is not None else settings.gpu_layer_count,
        )
        client = ProcessEmbeddingsClient(find_embedding_binary(binary or settings.binary), protocol=protocol)
        if protocol == "text":
            render_warning("Parsing console output of the embedding binary; prefer --protocol json when supported.")
        render_info(f"Generating embeddings for: {request.text}")
        with status_spinner(f"Running {client.binary}"):
            result = client.embed(request)
        _emit(result, fmt, precision)
    except GgufEmbedError as exc:
        render_error(f"Error generating embeddings: {exc}")
        raise typer.Exit(code=1) from exc


@app.command("probe")
def probe(
    model: Optional[str] = typer.Option(
        None, "-m", "--model", envvar="GGUF_EMBED_MODEL", help="Path to GGUF model file (required)."
    ),
    prompt: str = typer.Option("hello world", "-p", "-prompt", "--prompt", help="Text to embed."),
    threads: Optional[int] = typer.Option(None, "-t", "--threads", help="Threads used during computation."),
    gpu_layers: Optional[int] = typer.Option(None, "-ngl", "--gpu-layers", help="Layers offloaded to the GPU."),
    ctx_size: int = typer.Option(DEFAULT_CONTEXT_SIZE, "-c", "--ctx-size", help="Model context size."),
    hints: List[int] = typer.Option([768, 128], "--hint", help="Dimension hints to compare (repeatable)."),
    f32_memory: bool = typer.Option(False, "--f32-memory", help="Keep the KV cache in f32 instead of f16."),
) -> None:
    """Compare auto-detected embedding width against explicit dimension hints."""
    _require_model(model, "probe")
    try:
        settings = RuntimeSettings.from_env()
        request = EmbeddingRequest(
            model_path=model,
            text=prompt,
            thread_count=threads if threads is not None else settings.thread_count,
            gpu_layer_count=gpu_layers if gpu_layers is not None else settings.gpu_layer_count,
        )
        rows: list[tuple[str, str]] = []
        with _load_client(settings, request, ctx_size, f32_memory) as client:
            native = client.native_dimension()
            rows.append(("Native width", str(native)))
            with status_spinner("Generating embeddings"):
                auto = client.embed(request.text, request.embed_options())
            rows.append(("Auto-detected", f"{auto.dimension}  {_preview(auto.values)}"))
            for hint in hints:
                if hint < 1:
                    raise UsageError(f"Dimension hint must be positive, got {hint}")
                options = EmbedOptions(thread_count=request.thread_count, dimension_hint=hint)
                hinted = client.embed(request.text, options)
                rows.append((f"Hint {hint}", f"{hinted.dimension}  {_preview(hinted.values)}"))
        rows.append(("Auto matches native", "yes" if auto.dimension == native else "no"))
        render_summary_table(rows, title=f"Embedding width probe: {request.model_file.name}")
    except GgufEmbedError as exc:
        render_error(f"Error: {exc}")
        raise typer.Exit(code=1) from exc


@config_app.command("show")
def config_show() -> None:
    """Print the settings resolved from the environment and .env."""
    try:
        settings = RuntimeSettings.from_env()
    except GgufEmbedError as exc:
        render_error(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(json.dumps(settings.to_dict(), indent=2, sort_keys=True))


def _require_model(model: Optional[str], command: str) -> None:
    if model:
        return
    render_error(
        "Error: Model path is required",
        hint=(
            f"Usage: gguf-embed {command} -m <model_path> [-p <prompt>] [-t <threads>] [-ngl <gpu_layers>]",
            "",
            "Example:",
            f'  gguf-embed {command} -m {EXAMPLE_MODEL} -p "Hello world"',
            f'  echo "Hello world" | gguf-embed {command} -m {EXAMPLE_MODEL}',
        ),
    )
    raise typer.Exit(code=1)


def _check_format(fmt: str) -> None:
    if fmt not in OUTPUT_FORMATS:
        raise UsageError(f"Unsupported output format: {fmt} (expected one of {', '.join(OUTPUT_FORMATS)})")


def _load_client(
    settings: RuntimeSettings, request: EmbeddingRequest, ctx_size: int, f32_memory: bool = False
) -> EmbeddingsClient:
    options: LoadOptions = request.load_options(context_size=ctx_size, f16_memory=not f32_memory)
    render_info(f"Loading model from: {request.model_file}")
    with status_spinner("Loading model"):
        client = create_embeddings_client(settings.backend, request.model_path, options)
    render_success("Model loaded successfully")
    return client


def _emit(result: EmbeddingResult, fmt: str, precision: int) -> None:
    rendered = render(result, fmt, precision)
    render_success(f"Embeddings generated successfully ({result.dimension} dimensions)")
    if fmt == "text":
        typer.echo("Embeddings:")
    typer.echo(rendered)


def _preview(values: list[float], count: int = 5) -> str:
    head = ", ".join(f"{value:.6f}" for value in values[:count])
    return f"[{head}{', ...' if len(values) > count else ''}]"


def main() -> None:
    app()


if __name__ == "__main__":
    main()
