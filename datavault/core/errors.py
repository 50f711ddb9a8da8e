"""Domain errors raised by the vault services.

Every error is terminal for the request. The HTTP layer renders them through
``vault_error_handler`` in ``datavault.main``.
"""


class VaultError(Exception):
    status_code = 500
    code = "server_error"
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(VaultError):
    status_code = 401
    code = "unauthenticated"
    default_message = "No valid credentials supplied"


class Unauthorized(VaultError):
    status_code = 401
    code = "not_authorized"
    default_message = "Not authorized to access this data"


class NotOwner(VaultError):
    status_code = 401
    code = "not_owner"
    default_message = "Only the owner can modify this data"


class NotFound(VaultError):
    status_code = 404
    code = "not_found"
    default_message = "Data item not found"


class ValidationError(VaultError):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class UnknownGrantee(VaultError):
    status_code = 404
    code = "unknown_grantee"
    default_message = "Target user not found"


class NotVerified(VaultError):
    status_code = 400
    code = "not_verified"
    default_message = "Data has not been verified on blockchain yet"


class RateLimited(VaultError):
    status_code = 429
    code = "rate_limited"
    default_message = "Too many requests. Please slow down."


class StoreError(VaultError):
    """Collaborator (database) failure. Details are logged, never returned."""
