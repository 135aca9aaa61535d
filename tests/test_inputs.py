from __future__ import annotations

import io

import pytest

from gguf_embed.errors import UsageError
from gguf_embed.inputs import parse_token_list, resolve_text


class _BrokenStream:
    def __iter__(self):
        raise OSError("stream closed")


def test_prompt_used_verbatim() -> None:
    stream = io.StringIO("ignored")
    assert resolve_text("  Hello world  ", stream) == "  Hello world  "
    assert stream.tell() == 0


def test_stdin_joined_and_trimmed() -> None:
    assert resolve_text(None, io.StringIO("\n  first line\nsecond line\n\n")) == "first line\nsecond line"


def test_empty_stdin_rejected() -> None:
    with pytest.raises(UsageError, match="No input text provided"):
        resolve_text(None, io.StringIO("   \n\t\n"))


def test_read_error_aborts() -> None:
    with pytest.raises(UsageError, match="stream closed"):
        resolve_text("", _BrokenStream())


def test_token_list() -> None:
    assert parse_token_list("1, 15043,  3186,") == [1, 15043, 3186]


@pytest.mark.parametrize("raw", ["", " , ", "1,two"])
def test_token_list_invalid(raw: str) -> None:
    with pytest.raises(UsageError):
        parse_token_list(raw)
