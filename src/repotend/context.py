"""Application context with dependency injection."""

from dataclasses import dataclass, replace
from pathlib import Path

import click

from repotend.gateway.git.abc import Git
from repotend.gateway.git.dry_run import DryRunGit
from repotend.gateway.git.real import RealGit
from repotend.gateway.http.abc import HttpClient
from repotend.gateway.http.real import RealHttpClient
from repotend.output import user_output
from repotend.providers.factory import create_provider
from repotend.providers.sources import ProviderFactory


@dataclass(frozen=True)
class RepotendContext:
    """Immutable context holding all dependencies for repotend commands.

    Created at CLI entry point and threaded through the application via
    Click's context system. Frozen to prevent accidental modification at
    runtime.
    """

    git: Git
    http: HttpClient
    provider_factory: ProviderFactory
    cwd: Path
    dry_run: bool

    def with_dry_run(self) -> "RepotendContext":
        """Same context with git mutations replaced by printed intentions."""
        if self.dry_run:
            return self
        return replace(self, git=DryRunGit(self.git), dry_run=True)

    @staticmethod
    def for_test(
        git: Git | None = None,
        http: HttpClient | None = None,
        provider_factory: ProviderFactory | None = None,
        cwd: Path | None = None,
        dry_run: bool = False,
    ) -> "RepotendContext":
        """Create a context with fakes for everything not given.

        Example:
            >>> git = FakeGit(repositories={...})
            >>> ctx = RepotendContext.for_test(git=git, cwd=tmp_path)
        """
        from repotend.gateway.git.fake import FakeGit
        from repotend.gateway.http.fake import FakeHttpClient

        return RepotendContext(
            git=git if git is not None else FakeGit(),
            http=http if http is not None else FakeHttpClient(),
            provider_factory=provider_factory if provider_factory is not None else create_provider,
            cwd=cwd if cwd is not None else Path("/test/default/cwd"),
            dry_run=dry_run,
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists."""
    try:
        return (Path.cwd(), None)
    except OSError:
        return (None, "Current working directory no longer exists")


def create_context(*, dry_run: bool) -> RepotendContext:
    """Create production context with real implementations.

    Args:
        dry_run: If True, wrap git in DryRunGit, which prints intended
                 mutations instead of executing them
    """
    cwd, error_msg = safe_cwd()
    if cwd is None:
        user_output(click.style("Error: ", fg="red") + str(error_msg))
        raise SystemExit(1)

    ctx = RepotendContext(
        git=RealGit(),
        http=RealHttpClient(),
        provider_factory=create_provider,
        cwd=cwd,
        dry_run=False,
    )
    return ctx.with_dry_run() if dry_run else ctx
