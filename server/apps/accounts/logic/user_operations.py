"""Business logic for user accounts."""

import logging

from django.contrib.auth import authenticate
from django.db import IntegrityError, transaction
from django.http import HttpRequest

from server.apps.accounts.exceptions import (
    EmailTakenError,
    InvalidCredentialsError,
)
from server.apps.accounts.models import User, normalize_email_address

logger = logging.getLogger(__name__)


def register_user(name: str, email: str, password: str) -> User:
    """Create an account with email and password.

    Args:
        name: Display name.
        email: Login email (normalized).
        password: Raw password, stored hashed.

    Returns:
        Created User instance.

    Raises:
        EmailTakenError: If an account with this email exists.
    """
    email = normalize_email_address(email)
    if User.objects.filter(email=email).exists():
        logger.info('Registration rejected, email taken: %s', email)
        raise EmailTakenError()

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                name=name,
            )
    except IntegrityError as error:
        # Concurrent registration with the same email
        raise EmailTakenError() from error

    logger.info('User registered: %s (ID: %s)', user.email, user.pk)
    return user


def authenticate_user(
    request: HttpRequest,
    email: str,
    password: str,
) -> User:
    """Check credentials against the configured auth backends.

    Args:
        request: Current request (passed to backends).
        email: Login email.
        password: Raw password.

    Returns:
        Authenticated active User.

    Raises:
        InvalidCredentialsError: If credentials do not match.
    """
    user = authenticate(
        request=request,
        username=normalize_email_address(email),
        password=password,
    )
    if user is None:
        logger.warning('Authentication failed for: %s', email)
        raise InvalidCredentialsError()

    logger.info('User authenticated: %s', user.pk)
    return user
