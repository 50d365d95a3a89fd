"""Factory function — returns the right resolver for a given mapper kind."""

from __future__ import annotations

from hookmap.exceptions import ConfigurationError
from hookmap.mapper import MapperKind

from .base import AbstractResolver
from .identity import IdentityResolver
from .order import OrderResolver

__all__ = ["get_resolver"]

# Resolvers are stateless; one shared instance per kind
_RESOLVER_MAP: dict[MapperKind, AbstractResolver] = {
    MapperKind.IDENTITY: IdentityResolver(),
    MapperKind.ORDER:    OrderResolver(),
}


def get_resolver(kind: MapperKind) -> AbstractResolver:
    """
    Return the resolver instance for the given MapperKind.

    Raises
    ------
    ConfigurationError if no resolver implements ``kind``.
    """
    try:
        return _RESOLVER_MAP[MapperKind(kind)]
    except (KeyError, ValueError) as exc:
        raise ConfigurationError(f"No resolver for mapper kind: {kind!r}") from exc
