"""Exceptions raised by services and repositories, mapped to HTTP in clm.api.exception_handlers."""

# Values of the `code` field in error responses. Clients match on these.
NOT_FOUND = "NOT_FOUND"
ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainError(Exception):
    code = INTERNAL_ERROR


class NotFoundError(DomainError):
    """A contract (or the data an operation needs) does not exist."""

    code = NOT_FOUND


class DuplicateResourceError(DomainError):
    """A contract number is already taken."""

    code = DUPLICATE_RESOURCE


class DomainValidationError(DomainError):
    """Input is well-formed but not acceptable, e.g. an update with no updatable fields."""

    code = VALIDATION_ERROR
