"""
Authorization decorators for GraphQL resolvers.

This module provides a decorator enforcing a permission template on a
resolver, using the user found on ``info.context``.
"""

from functools import wraps
from typing import Any, Callable, Optional

from graphql import GraphQLError


def _get_engine():
    """Lazy import to avoid circular imports."""
    from .engine import authorization_engine
    return authorization_engine


def _find_info(args: tuple) -> Any:
    for arg in args:
        if hasattr(arg, "context"):
            return arg
    return None


def require_authorization(
    template: str,
    options_func: Optional[Callable[..., Any]] = None,
):
    """
    Decorator to require a permission template for a GraphQL resolver.

    Args:
        template: The permission template (e.g. "users.update.<target>").
        options_func: Optional callable receiving the resolver arguments and
            returning authorization options (mapping or AuthorizationOptions).

    Raises:
        GraphQLError: If no user is available or the user is not authorized.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            info = _find_info(args)
            if not info or not hasattr(info.context, "user"):
                raise GraphQLError("User context is not available")

            user = info.context.user
            if not user or getattr(user, "is_authenticated", True) is False:
                raise GraphQLError("Authentication required")

            options = options_func(*args, **kwargs) if options_func else None
            if not _get_engine().is_authorized(user, template, options):
                raise GraphQLError(f"Permission required: {template}")

            return func(*args, **kwargs)
        return wrapper
    return decorator


__all__ = ["require_authorization"]
