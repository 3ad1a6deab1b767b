"""Authentication: identity provider and allow-list gate."""

from scoremanager.auth.access import (
    AccessGate,
    AccessResult,
    AllowList,
    AuthenticationError,
    Identity,
    IdentityProvider,
    LocalIdentityProvider,
)

__all__ = [
    "AccessGate",
    "AccessResult",
    "AllowList",
    "AuthenticationError",
    "Identity",
    "IdentityProvider",
    "LocalIdentityProvider",
]
