"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.project import Project, ProjectMember, ProjectRole


class FakeUnitOfWork:
    """Fake Unit of Work with all 6 repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.projects = AsyncMock()
        self.invitations = AsyncMock()
        self.activities = AsyncMock()
        self.articles = AsyncMock()
        self.briefs = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


async def echo(entity: Any) -> Any:
    """Side effect for repository writes that return what they were given."""
    return entity


def member_of(project_id: UUID, user_id: UUID, role: ProjectRole) -> ProjectMember:
    return ProjectMember(project_id=project_id, user_id=user_id, role=role)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def project_id() -> UUID:
    """A random project ID."""
    return uuid4()


@pytest.fixture
def actor_id() -> UUID:
    """A random actor ID (distinct from user_id)."""
    return uuid4()


@pytest.fixture
def project(project_id: UUID, user_id: UUID) -> Project:
    return Project(id=project_id, title="Spring Campaign", owner_id=user_id)
