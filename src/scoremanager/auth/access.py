"""Access gate: identity provider sign-in plus allow-list check.

Sign-in is two steps. The identity provider authenticates the caller; the
gate then compares the identity against the configured allow-list. An
identity that authenticates but is not on the list is signed out again
immediately and gets a rejection message. Nothing is loaded for it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

import structlog

from scoremanager.utils.validators import normalize_identity, validate_email

logger = structlog.get_logger(__name__)

REJECTION_MESSAGE = "This account is not allowed to use the score manager."


class AuthenticationError(Exception):
    """The identity provider refused the credentials."""

    pass


@dataclass(frozen=True)
class Identity:
    """An identity authenticated by the provider."""

    email: str
    signed_in_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


@dataclass
class AccessResult:
    """Result of a gated sign-in."""

    allowed: bool
    identity: Identity | None
    message: str


class IdentityProvider(Protocol):
    """External identity provider."""

    async def sign_in(self, email: str) -> Identity: ...

    async def sign_out(self, identity: Identity) -> None: ...


class LocalIdentityProvider:
    """Provider that accepts any well-formed email address.

    Keeps the set of currently signed-in addresses so forced sign-outs can be
    observed.
    """

    def __init__(self) -> None:
        self.signed_in: set[str] = set()

    async def sign_in(self, email: str) -> Identity:
        email = normalize_identity(email)
        if not validate_email(email):
            raise AuthenticationError(f"Invalid identity: '{email}'")
        self.signed_in.add(email)
        logger.debug("provider.signed_in", email=email)
        return Identity(email=email)

    async def sign_out(self, identity: Identity) -> None:
        self.signed_in.discard(identity.email)
        logger.debug("provider.signed_out", email=identity.email)


class AllowList:
    """Trusted identities. Comparison is exact after trimming whitespace."""

    def __init__(self, emails: Iterable[str]):
        self._emails = frozenset(
            normalize_identity(e) for e in emails if normalize_identity(e)
        )

    def __contains__(self, email: object) -> bool:
        if not isinstance(email, str):
            return False
        return normalize_identity(email) in self._emails

    def __len__(self) -> int:
        return len(self._emails)


class AccessGate:
    """Combines an identity provider with an allow-list."""

    def __init__(self, provider: IdentityProvider, allow_list: AllowList):
        self.provider = provider
        self.allow_list = allow_list

    async def sign_in(self, email: str) -> AccessResult:
        """Authenticate and check the allow-list.

        Raises:
            AuthenticationError: If the provider rejects the credentials
        """
        identity = await self.provider.sign_in(email)

        if identity.email not in self.allow_list:
            await self.provider.sign_out(identity)
            logger.warning("access.rejected", email=identity.email)
            return AccessResult(allowed=False, identity=None, message=REJECTION_MESSAGE)

        logger.info("access.granted", email=identity.email)
        return AccessResult(
            allowed=True,
            identity=identity,
            message=f"Signed in as {identity.email}",
        )

    async def sign_out(self, identity: Identity) -> None:
        await self.provider.sign_out(identity)
        logger.info("access.signed_out", email=identity.email)
