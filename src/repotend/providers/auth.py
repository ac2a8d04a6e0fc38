"""Provider token retrieval."""

from repotend.subprocess_utils import run_subprocess_with_context


def resolve_token(*, token: str | None, token_command: str | None) -> str | None:
    """Return the API token, running token_command when no literal token is given.

    The command's stdout (stripped) is the token; it is kept in memory only.

    Raises:
        CommandError: If token_command fails
        ValueError: If token_command prints nothing
    """
    if token is not None:
        return token
    if token_command is None:
        return None
    result = run_subprocess_with_context(
        cmd=["sh", "-c", token_command],
        operation_context=f"get provider token via {token_command!r}",
    )
    resolved = result.stdout.strip()
    if not resolved:
        msg = f"Empty token returned from {token_command!r}"
        raise ValueError(msg)
    return resolved
