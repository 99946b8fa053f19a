"""
Concrete implementation of QueryService backed by the GitHub GraphQL API.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

import httpx

from gh_grass.config import DEFAULT_API_URL
from gh_grass.providers import (
    ROSTER_PAGE_SIZE,
    AuthError,
    NotFound,
    TransientError,
    User,
    ValidationError,
)

logger = logging.getLogger("gh_grass.github")

GQL_VIEWER = """
query {
  viewer { login }
}
"""

GQL_USER = """
query($login: String!) {
  user(login: $login) { login }
}
"""

GQL_ORG_MEMBERS = (
    """
query($org: String!) {
  organization(login: $org) {
    membersWithRole(first: %d) { nodes { login } }
  }
}
"""
    % ROSTER_PAGE_SIZE
)

GQL_CONTRIBUTIONS = """
query($user: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $user) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks { contributionDays { date contributionCount } }
      }
    }
  }
}
"""

TRANSIENT_STATUSES = (403, 429, 500, 502, 503, 504)


def day_window(day: date) -> tuple[str, str]:
    """Return the UTC (from, to) DateTime strings covering a calendar day."""
    start = datetime.combine(day, time(0, 0), tzinfo=timezone.utc)
    end = start + timedelta(hours=24) - timedelta(seconds=1)
    fmt = "%Y-%m-%dT%H:%M:%SZ"
    return start.strftime(fmt), end.strftime(fmt)


def find_day_count(calendar: dict, day: date) -> int:
    """Extract the count for a day from a contributionCalendar payload.

    Days missing from the calendar count as zero.
    """
    target = day.isoformat()
    for week in calendar.get("weeks") or []:
        for entry in week.get("contributionDays") or []:
            if entry.get("date") == target:
                return int(entry.get("contributionCount") or 0)
    return 0


class GitHubQueryService:
    """QueryService implementation over GitHub's GraphQL endpoint.

    Every call is a single attempt; failures surface as ServiceError
    subclasses and are never retried here.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_url = api_url
        self._client = httpx.Client(
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubQueryService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _query(self, name: str, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL query and return its `data` object."""
        logger.debug("graphql %s %s", name, variables)
        try:
            response = self._client.post(
                self._api_url, json={"query": query, "variables": variables}
            )
        except httpx.HTTPError as e:
            logger.warning("graphql %s request failed: %s", name, e)
            raise TransientError(f"request failed: {e}") from e

        if response.status_code == 401:
            raise AuthError("bad credentials: run 'gh auth login' to refresh your token")
        if response.status_code in TRANSIENT_STATUSES:
            logger.warning("graphql %s HTTP %s: %s", name, response.status_code, response.text[:200])
            raise TransientError(f"GitHub API returned HTTP {response.status_code}")
        if response.is_error:
            raise TransientError(f"GitHub API returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise TransientError("GitHub API returned a non-JSON response") from e

        errors = payload.get("errors") or []
        if errors:
            first = errors[0]
            message = first.get("message", "unknown error")
            logger.warning("graphql %s errors: %s", name, errors)
            if first.get("type") == "NOT_FOUND":
                raise NotFound(message)
            raise TransientError(message)

        return payload.get("data") or {}

    def resolve_user(self, login: str | None = None) -> User:
        if not login:
            data = self._query("viewer", GQL_VIEWER, {})
            viewer = data.get("viewer")
            if not viewer:
                raise AuthError("could not resolve the authenticated user")
            return User(login=viewer["login"])

        data = self._query("user", GQL_USER, {"login": login})
        user = data.get("user")
        if not user:
            raise NotFound(f"user {login!r} not found")
        return User(login=user["login"])

    def list_org_members(self, org: str) -> list[User]:
        data = self._query("organization", GQL_ORG_MEMBERS, {"org": org})
        organization = data.get("organization")
        if not organization:
            raise NotFound(f"organization {org!r} not found")
        nodes = (organization.get("membersWithRole") or {}).get("nodes") or []
        return [User(login=node["login"]) for node in nodes if node]

    def get_contribution(self, login: str, day: date) -> int:
        if not login:
            raise ValidationError("username is required")
        start, end = day_window(day)
        data = self._query(
            "contributions",
            GQL_CONTRIBUTIONS,
            {"user": login, "from": start, "to": end},
        )
        user = data.get("user")
        if not user:
            raise NotFound(f"user {login!r} not found")
        calendar = (user.get("contributionsCollection") or {}).get("contributionCalendar") or {}
        return find_day_count(calendar, day)


__all__ = ["GitHubQueryService", "day_window", "find_day_count"]
