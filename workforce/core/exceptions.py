class WorkforceException(Exception):
    """Base exception for the workforce directory"""

    pass


class UnauthorizedException(WorkforceException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(WorkforceException):
    """Raised when an account or company does not resolve"""

    pass


class AccessDeniedException(WorkforceException):
    """Raised when the authorization guard denies an operation"""

    pass


class ConflictException(WorkforceException):
    """Raised when the current state forbids a mutation (e.g. already assigned)"""

    pass


class ValidationException(WorkforceException):
    """Raised when account data breaks a model rule"""

    pass


class InvariantViolationException(WorkforceException):
    """Raised when the employee/owner link is found inconsistent.

    Never repaired automatically: the transaction is rolled back and the
    request fails with an internal error.
    """

    pass
