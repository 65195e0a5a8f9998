"""User management errors"""

from bankcards.errors.base import ApplicationError


class UsernameTaken(ApplicationError):
    http_code = 409
    error_code = 4001
    error = "Username already taken"


class UserOwnsCards(ApplicationError):
    http_code = 409
    error_code = 4002
    error = "User still owns cards, remove or reassign them first"
