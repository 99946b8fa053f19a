"""Execution of session tasks against a QueryService."""

from __future__ import annotations

import logging

from gh_grass.providers import ContributionResult, GrassError, QueryService
from gh_grass.session import (
    ContributionFetched,
    Event,
    FetchContribution,
    FetchFailed,
    FetchRoster,
    RosterFetched,
    SelfTarget,
    Target,
    Task,
)

logger = logging.getLogger("gh_grass.tasks")


def resolve_login(service: QueryService, target: Target) -> str:
    """Return the concrete login for a target.

    SelfTarget asks the service on every call.
    """
    if isinstance(target, SelfTarget):
        return service.resolve_user(None).login
    return target.login


def run_task(service: QueryService, task: Task) -> Event:
    """Run a task to completion and return its single completion event.

    Never raises for service failures; they become FetchFailed.
    """
    if not isinstance(task, (FetchRoster, FetchContribution)):
        raise TypeError(f"unsupported task: {task!r}")

    try:
        if isinstance(task, FetchRoster):
            members = service.list_org_members(task.org)
            logger.debug("roster %s: %d members", task.org, len(members))
            return RosterFetched(tuple(members))

        login = resolve_login(service, task.target)
        count = service.get_contribution(login, task.day)
        logger.debug("contributions %s on %s: %d", login, task.day, count)
        return ContributionFetched(ContributionResult(login=login, day=task.day, count=count))
    except GrassError as e:
        logger.info("task %r failed: %s", task, e)
        return FetchFailed(e)
    except Exception as e:
        logger.exception("unexpected failure running %r", task)
        return FetchFailed(e)
