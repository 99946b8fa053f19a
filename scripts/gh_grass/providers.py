"""
Data providers for the contribution checker.

The QueryService protocol defines the interface; implementations can be
swapped for testing or alternative data sources.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Protocol

# Maximum number of organization members fetched in one roster request
ROSTER_PAGE_SIZE = 100


class GrassError(Exception):
    """Base class for all errors raised by gh-grass."""


class ServiceError(GrassError):
    """A remote query failed."""


class AuthError(ServiceError):
    """The credential is missing, invalid or expired."""


class NotFound(ServiceError):
    """The requested user or organization does not exist."""


class TransientError(ServiceError):
    """Network, rate-limit or server-side failure."""


class ValidationError(GrassError):
    """User-supplied input could not be parsed."""


class FatalStartupError(GrassError):
    """The process cannot start (e.g. no credential available)."""


@dataclass(frozen=True)
class User:
    """A GitHub account."""

    login: str


@dataclass(frozen=True)
class ContributionResult:
    """Contribution count of one account on one calendar day."""

    login: str
    day: date
    count: int


class QueryService(Protocol):
    """Protocol for querying contribution data."""

    def resolve_user(self, login: str | None = None) -> User:
        """Resolve a login, or the credential owner when login is empty."""
        ...

    def list_org_members(self, org: str) -> list[User]:
        """List up to ROSTER_PAGE_SIZE members of an organization."""
        ...

    def get_contribution(self, login: str, day: date) -> int:
        """Get the contribution count of a user on a calendar day."""
        ...
