from __future__ import annotations

import json

import pytest

from gguf_embed.embeddings.extract import extract_embedding, extract_json_embedding
from gguf_embed.errors import ParseError


def test_skips_non_numeric_tokens() -> None:
    assert extract_embedding("embedding 0: 0.1 0.2 abc 0.3") == pytest.approx([0.1, 0.2, 0.3])


def test_missing_marker_fails() -> None:
    with pytest.raises(ParseError, match="no embeddings found"):
        extract_embedding("no marker here")


def test_marker_found_among_log_lines() -> None:
    output = "\n".join(
        [
            "llama_model_loader: loaded meta data with 22 key-value pairs",
            "batch_decode: n_tokens = 4, n_seq = 1",
            "",
            "embedding 0:  0.012345 -0.054321  0.000123",
            "embedding 1:  9.0 9.0",
        ]
    )
    assert extract_embedding(output) == pytest.approx([0.012345, -0.054321, 0.000123])


def test_marker_must_start_the_line() -> None:
    with pytest.raises(ParseError):
        extract_embedding("  embedding 0: 0.1 0.2")


def test_marker_with_only_noise_falls_through_to_next_line() -> None:
    output = "embedding 0: nan-ish junk\nembedding 0: 1.5 2.5\n"
    assert extract_embedding(output) == [1.5, 2.5]


def test_rewrapped_output_is_stable() -> None:
    values = extract_embedding("embedding 0: 0.25 -0.5")
    again = extract_embedding("embedding 0: " + " ".join(str(value) for value in values))
    assert again == values


def test_json_document_surrounded_by_logs() -> None:
    document = {
        "object": "list",
        "data": [{"object": "embedding", "index": 0, "embedding": [0.5, -0.25, 1.0]}],
    }
    output = "main: build = 4000 {cuda}\n" + json.dumps(document, indent=2) + "\nllama_perf_context_print: done\n"
    assert extract_json_embedding(output) == [0.5, -0.25, 1.0]


def test_json_without_document_fails() -> None:
    with pytest.raises(ParseError):
        extract_json_embedding("embedding 0: 0.1 0.2")


def test_json_with_empty_embedding_fails() -> None:
    with pytest.raises(ParseError):
        extract_json_embedding(json.dumps({"data": [{"index": 0, "embedding": []}]}))
