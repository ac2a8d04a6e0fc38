"""Tests for subprocess helpers."""

import pytest

from repotend.subprocess_utils import (
    CommandError,
    run_subprocess_unchecked,
    run_subprocess_with_context,
)


def test_output_that_is_not_utf8_survives_as_surrogate_escapes() -> None:
    result = run_subprocess_with_context(
        ["sh", "-c", "printf 'caf\\351'"], operation_context="print latin-1 bytes"
    )

    assert result.stdout == "caf\udce9"
    assert result.stdout.encode("utf-8", "surrogateescape") == b"caf\xe9"


def test_failure_carries_context_and_stderr() -> None:
    with pytest.raises(CommandError) as exc_info:
        run_subprocess_with_context(
            ["sh", "-c", "echo nope >&2; exit 3"], operation_context="do the thing"
        )

    assert str(exc_info.value) == "Failed to do the thing: nope"
    assert exc_info.value.returncode == 3


def test_unchecked_run_returns_nonzero_status() -> None:
    result = run_subprocess_unchecked(["sh", "-c", "exit 1"], operation_context="exit")

    assert result.returncode == 1


def test_missing_executable_raises_command_error() -> None:
    with pytest.raises(CommandError) as exc_info:
        run_subprocess_unchecked(
            ["repotend-no-such-binary"], operation_context="run a missing binary"
        )

    assert exc_info.value.returncode == -1
