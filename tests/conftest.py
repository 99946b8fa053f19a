"""Shared fixtures for gh-grass tests."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from gh_grass.providers import NotFound, User  # noqa: E402

FIXED_TODAY = date(2023, 10, 2)


class FakeService:
    """In-memory QueryService that records every call."""

    def __init__(
        self,
        self_login: str = "myself",
        users: set[str] | None = None,
        orgs: dict[str, list[str]] | None = None,
        contributions: dict[tuple[str, str], int] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.self_login = self_login
        self.users = users or set()
        self.orgs = orgs or {}
        self.contributions = contributions or {}
        self.error = error
        self.calls: list[tuple] = []

    def resolve_user(self, login: str | None = None) -> User:
        self.calls.append(("resolve_user", login))
        if self.error:
            raise self.error
        if not login:
            return User(self.self_login)
        if login in self.users:
            return User(login)
        raise NotFound("user not found")

    def list_org_members(self, org: str) -> list[User]:
        self.calls.append(("list_org_members", org))
        if self.error:
            raise self.error
        if org in self.orgs:
            return [User(login) for login in self.orgs[org]]
        raise NotFound("org not found")

    def get_contribution(self, login: str, day: date) -> int:
        self.calls.append(("get_contribution", login, day))
        if self.error:
            raise self.error
        return self.contributions.get((login, day.isoformat()), 0)


@pytest.fixture
def service() -> FakeService:
    return FakeService(
        users={"alice"},
        orgs={"acme": ["m1", "m2"]},
        contributions={
            ("alice", "2023-10-01"): 5,
            ("myself", "2023-10-02"): 3,
            ("m2", "2023-10-01"): 7,
        },
    )


@pytest.fixture
def today() -> date:
    return FIXED_TODAY


@pytest.fixture
def make_service():
    """Factory for services with custom data or a forced error."""
    return FakeService
