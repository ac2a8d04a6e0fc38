"""Reconcile configured repositories against disk.

Each repository is an independent unit of work: read state, build a plan,
execute it. Repositories share nothing, so they may run on worker threads;
within one repository everything is sequential.
"""

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from repotend.core.actions import ReconcileSummary, RepositoryReport
from repotend.core.errors import ConfigurationAmbiguousError, RepositoryUnreadableError
from repotend.core.executor import execute_plan
from repotend.core.planner import build_plan
from repotend.core.state_reader import read_repository_state
from repotend.core.types import RepositoryConfig
from repotend.gateway.git.abc import Git

logger = logging.getLogger(__name__)


def reconcile_repository(git: Git, config: RepositoryConfig) -> RepositoryReport:
    """Converge one repository and report what happened.

    Planning-time failures are captured in the report instead of raised, so
    callers can treat every repository uniformly.
    """
    try:
        state = read_repository_state(git, config.path)
        plan = build_plan(config, state)
    except (RepositoryUnreadableError, ConfigurationAmbiguousError) as e:
        logger.warning("%s: %s", config.name, e.message)
        return RepositoryReport(
            name=config.name,
            path=config.path,
            plan=(),
            results=(),
            error_kind=e.error_kind,
            message=e.message,
        )

    if not plan:
        logger.debug("%s: already up to date", config.name)
    results = execute_plan(git, config, plan)
    return RepositoryReport(name=config.name, path=config.path, plan=plan, results=results)


def reconcile(
    git: Git,
    configs: Sequence[RepositoryConfig],
    *,
    jobs: int = 1,
    stop_event: threading.Event | None = None,
) -> ReconcileSummary:
    """Reconcile every configured repository.

    Args:
        git: Git gateway shared by all workers (it holds no per-run state)
        configs: Repositories, whose paths must be unique
        jobs: Number of repositories processed concurrently
        stop_event: When set, repositories that have not started yet are
            skipped; running ones finish their current plan

    Returns:
        Reports in configuration order, plus names of skipped repositories
    """
    if jobs < 1:
        raise ValueError(f"jobs must be at least 1, got {jobs}")

    stop = stop_event if stop_event is not None else threading.Event()
    reports: dict[int, RepositoryReport] = {}

    if jobs == 1:
        for index, config in enumerate(configs):
            if stop.is_set():
                break
            reports[index] = reconcile_repository(git, config)
    else:

        def run(config: RepositoryConfig) -> RepositoryReport | None:
            if stop.is_set():
                return None
            return reconcile_repository(git, config)

        with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="repotend") as pool:
            futures: list[tuple[int, Future[RepositoryReport | None]]] = [
                (index, pool.submit(run, config)) for index, config in enumerate(configs)
            ]
            # Collected in the submitting thread; workers never share state.
            try:
                for index, future in futures:
                    report = future.result()
                    if report is not None:
                        reports[index] = report
            except KeyboardInterrupt:
                # Queued repositories return without starting; running ones finish.
                stop.set()
                raise

    skipped = tuple(config.name for index, config in enumerate(configs) if index not in reports)
    if skipped:
        logger.info("Skipped %d repositories after stop was requested", len(skipped))
    return ReconcileSummary(
        reports=tuple(reports[index] for index in sorted(reports)),
        skipped=skipped,
    )
