"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """The subject of a validated access token."""

    id: UUID
    email: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for the external identity provider."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an access token.

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        ...

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token. Never raises."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Create a locally signed access token for a user."""
        ...
