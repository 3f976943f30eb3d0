"""
HTTP middleware for the Plant Health API.

- AuthenticationMiddleware: Supabase JWT verification
- RequestLoggingMiddleware: request ids, timing and access logs
"""

from .authentication import AuthenticationMiddleware
from .logging import RequestLoggingMiddleware

__all__ = ["AuthenticationMiddleware", "RequestLoggingMiddleware"]
