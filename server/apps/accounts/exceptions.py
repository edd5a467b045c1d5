"""Exceptions for accounts app."""

from server.common.exceptions import ApiError


class EmailTakenError(ApiError):
    """Raised when registering an email that already has an account."""

    status_code = 409
    code = 'AUTH_001'
    default_message = 'User with this email already exists'


class InvalidCredentialsError(ApiError):
    """Raised when an email/password pair does not authenticate."""

    status_code = 401
    code = 'AUTH_003'
    default_message = 'Invalid email or password'
