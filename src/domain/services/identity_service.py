"""Identity resolution: authenticated token subject to profile."""

import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError

from domain.entities.profile import Identity, Profile
from domain.repositories.unit_of_work import IUnitOfWork
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)


class IdentityService:
    """Merges a validated token subject with its stored Profile."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def resolve(self, token_user: TokenUser) -> Identity:
        """Return the caller's identity, creating the profile on first sight.

        Read-only once the profile exists. Two concurrent first requests for
        the same user race on the insert; the loser re-reads the winner's row.
        """
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(token_user.id)
            if profile:
                return Identity(id=token_user.id, email=token_user.email, profile=profile)

            profile = Profile(
                id=token_user.id,
                email=token_user.email.lower().strip(),
                display_name=token_user.display_name,
                avatar_url=token_user.avatar_url,
            )
            try:
                created = await uow.profiles.create(profile)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" not in orig and "duplicate" not in orig:
                    raise
                existing = await uow.profiles.get(token_user.id)
                if existing is None:
                    raise
                created = existing
            else:
                logger.info("Created profile for user %s", token_user.id)

            return Identity(id=token_user.id, email=token_user.email, profile=created)
