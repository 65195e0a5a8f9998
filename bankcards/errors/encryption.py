from bankcards.errors.base import ApplicationError


class EncryptionError(ApplicationError):
    """Key misconfiguration or cipher failure. Never carries the underlying cause."""

    http_code = 500
    error_code = 6001
    error = "Encryption error"
