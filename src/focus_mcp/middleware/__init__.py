"""HTTP middleware."""

from .audit import AuditMiddleware

__all__ = ["AuditMiddleware"]
