"""Authentication provider protocol.

The service never verifies credentials itself; it trusts the identity the
provider extracts from a bearer token.
"""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass(frozen=True)
class TokenUser:
    """Authenticated identity: the provider's subject id and verified email."""

    id: UUID
    email: str
    display_name: Optional[str] = None

    @property
    def normalized_email(self) -> str:
        return self.email.strip().lower()


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the identity carried by a valid token, or None."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Issue a token for a user (tests and local development)."""
        ...
