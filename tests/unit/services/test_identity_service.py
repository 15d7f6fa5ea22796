"""Unit tests for IdentityService."""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from domain.entities.profile import Identity, Profile
from domain.services.identity_service import IdentityService
from infrastructure.auth.provider import TokenUser
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> IdentityService:
    return IdentityService(lambda: uow)


@pytest.fixture
def token_user() -> TokenUser:
    return TokenUser(id=uuid4(), email="Alice@Example.com", display_name="Alice")


@pytest.mark.asyncio
async def test_existing_profile_is_read_only(
    service: IdentityService, uow: FakeUnitOfWork, token_user: TokenUser
):
    profile = Profile(id=token_user.id, email="alice@example.com", display_name="Alice A.")
    uow.profiles.get.return_value = profile

    identity = await service.resolve(token_user)

    assert identity.profile is profile
    assert identity.display_name == "Alice A."
    uow.profiles.create.assert_not_called()
    assert not uow.committed


@pytest.mark.asyncio
async def test_creates_profile_on_first_sight(
    service: IdentityService, uow: FakeUnitOfWork, token_user: TokenUser
):
    uow.profiles.get.return_value = None
    uow.profiles.create.side_effect = lambda profile: profile

    identity = await service.resolve(token_user)

    assert identity.id == token_user.id
    assert identity.profile.email == "alice@example.com"
    assert identity.profile.display_name == "Alice"
    assert uow.committed


@pytest.mark.asyncio
async def test_concurrent_first_request_rereads_winner(
    service: IdentityService, uow: FakeUnitOfWork, token_user: TokenUser
):
    winner = Profile(id=token_user.id, email="alice@example.com")
    uow.profiles.get.side_effect = [None, winner]
    uow.profiles.create.side_effect = IntegrityError(
        "INSERT", {}, Exception("duplicate key value violates unique constraint")
    )

    identity = await service.resolve(token_user)

    assert identity.profile is winner
    assert uow.rolled_back


@pytest.mark.asyncio
async def test_other_integrity_errors_propagate(
    service: IdentityService, uow: FakeUnitOfWork, token_user: TokenUser
):
    uow.profiles.get.return_value = None
    uow.profiles.create.side_effect = IntegrityError(
        "INSERT", {}, Exception("null value in column violates not-null constraint")
    )

    with pytest.raises(IntegrityError):
        await service.resolve(token_user)


def test_display_name_falls_back_to_email():
    profile = Profile(email="bob@x.com")
    identity = Identity(id=profile.id, email="bob@x.com", profile=profile)

    assert identity.display_name == "bob@x.com"
