"""Dependency injection factories for domain services."""

from functools import lru_cache
from typing import Callable

from domain.services.activity_service import ActivityService
from domain.services.identity_service import IdentityService
from domain.services.invitation_service import InvitationService
from domain.services.tag_service import TagService
from domain.services.task_service import TaskService
from domain.services.workspace_service import WorkspaceService
from infrastructure.cache.provider import IPathRevalidator
from infrastructure.cache.revalidator import create_path_revalidator
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_revalidator() -> IPathRevalidator:
    """Get the cache path revalidator."""
    return create_path_revalidator()


@lru_cache
def get_activity_service() -> ActivityService:
    """Get Activity service instance."""
    return ActivityService(get_uow_factory())


@lru_cache
def get_identity_service() -> IdentityService:
    """Get Identity service instance."""
    return IdentityService(get_uow_factory())


@lru_cache
def get_workspace_service() -> WorkspaceService:
    """Get Workspace service instance."""
    return WorkspaceService(
        get_uow_factory(),
        activity_service=get_activity_service(),
        revalidator=get_revalidator(),
    )


@lru_cache
def get_invitation_service() -> InvitationService:
    """Get Invitation service instance."""
    return InvitationService(
        get_uow_factory(),
        activity_service=get_activity_service(),
        revalidator=get_revalidator(),
    )


@lru_cache
def get_task_service() -> TaskService:
    """Get Task service instance."""
    return TaskService(
        get_uow_factory(),
        activity_service=get_activity_service(),
        revalidator=get_revalidator(),
    )


@lru_cache
def get_tag_service() -> TagService:
    """Get Tag service instance."""
    return TagService(get_uow_factory(), revalidator=get_revalidator())
