"""Subprocess helpers that attach operation context to failures."""

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """A subprocess exited non-zero (or could not be started).

    Carries everything needed to classify the failure later: the command,
    its exit status and both output streams.
    """

    def __init__(
        self,
        *,
        cmd: Sequence[str],
        operation_context: str,
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        detail = stderr.strip() or stdout.strip() or f"exit status {returncode}"
        super().__init__(f"Failed to {operation_context}: {detail}")
        self.cmd = tuple(cmd)
        self.operation_context = operation_context
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def copied_env_for_git_subprocess(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """Copy of os.environ suitable for non-interactive git invocations.

    GIT_TERMINAL_PROMPT=0 makes git fail instead of blocking on a credential
    prompt nobody will answer.
    """
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    if extra is not None:
        env.update(extra)
    return env


def run_subprocess_with_context(
    cmd: Sequence[str],
    *,
    operation_context: str,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command, raising CommandError with context on failure.

    Args:
        cmd: Command and arguments
        operation_context: Short description used in error messages, e.g.
            "add remote 'origin'"
        cwd: Working directory
        env: Full environment for the child process (None inherits)

    Returns:
        The completed process with captured text output. Bytes that are not
        valid UTF-8 (paths, URLs) survive as surrogate escapes and round-trip
        back to git unchanged.

    Raises:
        CommandError: If the command exits non-zero or cannot be executed
    """
    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise CommandError(
            cmd=cmd,
            operation_context=operation_context,
            returncode=e.returncode,
            stdout=e.stdout or "",
            stderr=e.stderr or "",
        ) from e
    except OSError as e:
        raise CommandError(
            cmd=cmd,
            operation_context=operation_context,
            returncode=-1,
            stdout="",
            stderr=str(e),
        ) from e


def run_subprocess_unchecked(
    cmd: Sequence[str],
    *,
    operation_context: str,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command whose non-zero exit statuses carry meaning for the caller.

    Decodes output the same way as run_subprocess_with_context. Only a failure
    to start the command raises.

    Raises:
        CommandError: If the command cannot be executed
    """
    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=False,
        )
    except OSError as e:
        raise CommandError(
            cmd=cmd,
            operation_context=operation_context,
            returncode=-1,
            stdout="",
            stderr=str(e),
        ) from e
