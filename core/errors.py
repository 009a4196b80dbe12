"""
core/errors.py -- Error taxonomy shared by the services and the HTTP layer.

Services raise these; api/main.py registers one exception handler for the
CatalogError base class that renders the failure envelope with the class's
status_code. Messages are client-safe by construction -- anything carrying
internal detail belongs in a log line, not in one of these.

Layer rule: no imports from api/, auth/ or catalog/.
"""


class CatalogError(Exception):
    """Base class for every failure that maps to an HTTP error envelope."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Malformed, missing or out-of-range input."""

    status_code = 400
    default_message = "Invalid request"


class AuthError(CatalogError):
    """Bad credentials, or an absent / invalid / expired session token."""

    status_code = 401
    default_message = "Authentication required"


class NotFoundError(CatalogError):
    status_code = 404
    default_message = "Not found"


class ConflictError(CatalogError):
    """Duplicate email or VIN.

    Reported as 400 rather than 409 -- the client treats a duplicate like any
    other rejected form submission.
    """

    status_code = 400
    default_message = "Resource already exists"


class InternalError(CatalogError):
    status_code = 500
    default_message = "Internal server error"
