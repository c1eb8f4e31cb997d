"""Actor resolution: who is making this request, and as what kind of actor."""

from focus_mcp.auth.principal import (
    AuthenticatedPrincipal,
    get_principal,
    get_principal_optional,
    reset_principal,
    set_principal,
)
from focus_mcp.auth.resolver import (
    ActorResolver,
    SessionInfo,
    SessionProvider,
    SqliteSessionProvider,
    TokenStore,
)

__all__ = [
    "ActorResolver",
    "AuthenticatedPrincipal",
    "SessionInfo",
    "SessionProvider",
    "SqliteSessionProvider",
    "TokenStore",
    "get_principal",
    "get_principal_optional",
    "reset_principal",
    "set_principal",
]
