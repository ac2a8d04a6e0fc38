"""Read raw values from git config, before insteadOf rewriting or refspec mapping."""

from pathlib import Path

from repotend.subprocess_utils import CommandError, run_subprocess_unchecked


def read_config_entries(repo_root: Path, pattern: str) -> list[tuple[str, str]]:
    """Return (key, value) pairs whose key matches the regular expression pattern.

    Keys keep git's normalization: section and variable names are lowercase,
    subsection names (remote and branch names) keep their case. Entries come in
    config file order, so the first value for a multi-valued key comes first.

    Raises:
        CommandError: If git cannot read the configuration
    """
    context = f"read git config of {repo_root}"
    cmd = ["git", "config", "-z", "--get-regexp", pattern]
    result = run_subprocess_unchecked(cmd, operation_context=context, cwd=repo_root)
    # Exit status 1 means no key matched
    if result.returncode == 1:
        return []
    if result.returncode != 0:
        raise CommandError(
            cmd=cmd,
            operation_context=context,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    entries: list[tuple[str, str]] = []
    for record in result.stdout.split("\0"):
        if not record:
            continue
        key, _, value = record.partition("\n")
        entries.append((key, value))
    return entries


def subsection(key: str, *, section: str, variable: str) -> str | None:
    """Extract the subsection of ``<section>.<subsection>.<variable>``, else None."""
    prefix = f"{section}."
    suffix = f".{variable}"
    if not key.startswith(prefix) or not key.endswith(suffix):
        return None
    name = key[len(prefix) : -len(suffix)]
    return name or None
