from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class InvalidQueryError(DomainError):
    """Query parameters cannot be honored."""


class MissingColumnError(DomainError):
    """A store row lacks a column the mapping requires."""
