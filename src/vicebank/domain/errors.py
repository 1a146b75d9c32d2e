"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


def not_found(label: str, entity_id: str) -> str:
    """Return message for a missing entity of the given kind."""
    return f"{label} with ID {entity_id} not found"


def invalid_json(fields: list[str]) -> str:
    """Return message listing the JSON fields that failed validation."""
    return f"Invalid JSON {', '.join(fields)}"


def not_enough_tokens(available: float, required: float) -> str:
    """Return message when a purchase would overdraw a balance."""
    return f"Not enough tokens: {available:g} available, {required:g} required"
