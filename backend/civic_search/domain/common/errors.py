"""Domain error hierarchy.

Routers map these onto HTTP status codes; nothing below the API layer
knows about HTTP.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by domain and use-case code."""


class EntityNotFoundError(DomainError):
    """Requested entity does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class ValidationError(DomainError):
    """Input is structurally wrong and cannot be normalised."""


class StoreQueryError(DomainError):
    """The backing store failed to execute a query.

    Not retried by the core; the caller sees it as an internal error.
    """
