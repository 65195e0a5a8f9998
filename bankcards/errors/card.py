"""Card usage errors"""

from bankcards.errors.base import ApplicationError


class AccessDenied(ApplicationError):
    http_code = 403
    error_code = 5001
    error = "Access denied"


class CardNotActive(ApplicationError):
    http_code = 400
    error_code = 5002
    error = "Card is already blocked or expired"


class CardsNotActive(ApplicationError):
    http_code = 400
    error_code = 5003
    error = "Both cards must be active for transfer"


class InsufficientFunds(ApplicationError):
    http_code = 400
    error_code = 5004
    error = "Insufficient balance on source card"


class StatusNotFound(ApplicationError):
    http_code = 400
    error_code = 5005
    error = "Status not found"


class CardConcurrentlyModified(ApplicationError):
    http_code = 409
    error_code = 5006
    error = "Card was modified by a concurrent operation, retry the request"
