"""Request-scoped actor identity."""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime, timezone

from focus_mcp.audit.models import ActorKind
from focus_mcp.domain.models import User


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """
    Who is acting on this request.

    ``actor_kind`` is ``"user"`` for a browser session and ``"agent"`` for a
    bearer API token. ``token_label`` is the token's display name and is only
    set for agents. The raw token is never kept here.
    """

    user: User
    actor_kind: ActorKind
    token_label: str | None = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def is_agent(self) -> bool:
        return self.actor_kind == "agent"

    def __repr__(self) -> str:
        return (
            f"AuthenticatedPrincipal("
            f"user_id={self.user.id!r}, "
            f"actor_kind={self.actor_kind!r}, "
            f"token_label={self.token_label!r}, "
            f"request_id={self.request_id!r})"
        )

    def __str__(self) -> str:
        return self.__repr__()


_principal: ContextVar[AuthenticatedPrincipal | None] = ContextVar(
    "authenticated_principal",
    default=None,
)


def set_principal(principal: AuthenticatedPrincipal) -> Token[AuthenticatedPrincipal | None]:
    """Set the principal and return a reset token."""
    return _principal.set(principal)


def reset_principal(token: Token[AuthenticatedPrincipal | None]) -> None:
    _principal.reset(token)


def get_principal() -> AuthenticatedPrincipal:
    """Get the principal or raise RuntimeError."""
    principal = _principal.get()
    if principal is None:
        raise RuntimeError("No authenticated principal set")
    return principal


def get_principal_optional() -> AuthenticatedPrincipal | None:
    return _principal.get()
