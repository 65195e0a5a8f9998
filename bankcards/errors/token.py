"""Authentication and session token errors"""

from bankcards.errors.base import ApplicationError


class AuthError(ApplicationError):
    http_code = 401
    error_code = 3000
    error = "Authentication failed"


class TokenInvalid(AuthError):
    http_code = 403
    error_code = 3001
    error = "Token is invalid"


class TokenMissing(AuthError):
    http_code = 403
    error_code = 3002
    error = "Token is missing"


class TokenMalformed(AuthError):
    error_code = 3003
    error = "Token is malformed or its signature does not match"


class TokenExpired(AuthError):
    error_code = 3004
    error = "Token has expired"


class InvalidCredentials(AuthError):
    error_code = 3005
    error = "Bad credentials"
