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


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class AuthorizationError(DomainError):
    """Caller does not own the entity it tries to read or change."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def investment_not_found(investment_id: int) -> str:
    """Return message for missing investment."""
    return f"Investment {investment_id} not found"


def project_not_found(project_id: int) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def project_unauthorized(project_id: int) -> str:
    """Return message when the caller does not own a project."""
    return f"Project {project_id} not found or unauthorized"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def invalid_useful_life(useful_life: float) -> str:
    """Return message for a non-positive useful life."""
    return f"Useful life must be positive, got {useful_life}"


def invalid_date_range(start, end) -> str:
    """Return message when a range starts after it ends."""
    return f"Start date {start} is after end date {end}"
