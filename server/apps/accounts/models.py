"""Database models for accounts app."""

import uuid
from typing import Any, ClassVar, Final, final, override

from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin,
)
from django.db import models
from django.utils import timezone

_NAME_MAX_LENGTH: Final = 255
_IMAGE_URL_MAX_LENGTH: Final = 1024


def normalize_email_address(email: str) -> str:
    """Normalize an email address for storage and lookup.

    The whole address is lower-cased, so lookups are case-insensitive.

    Args:
        email: Raw email address.

    Returns:
        Trimmed, lower-cased address.
    """
    return email.strip().lower()


class UserManager(BaseUserManager):
    """Manager creating users identified by email."""

    use_in_migrations = True

    def create_user(
        self,
        email: str,
        password: str | None = None,
        **extra_fields: Any,
    ) -> 'User':
        """Create a regular user.

        Users without a password (provisioned by an external identity
        provider) get an unusable password.

        Args:
            email: Email address, normalized before saving.
            password: Raw password or None.
            **extra_fields: Other model fields (``name``, ``image``...).

        Returns:
            Created User instance.

        Raises:
            ValueError: If email is empty.
        """
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(
        self,
        email: str,
        password: str | None = None,
        **extra_fields: Any,
    ) -> 'User':
        """Create a staff superuser for the admin site."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self._create_user(email, password, **extra_fields)

    def get_by_natural_key(self, username: str | None) -> 'User':
        """Look up a user by (normalized) email."""
        return self.get(email=normalize_email_address(username or ''))

    def _create_user(
        self,
        email: str,
        password: str | None,
        **extra_fields: Any,
    ) -> 'User':
        if not email:
            raise ValueError('Users must have an email address')
        user = self.model(
            email=normalize_email_address(email),
            **extra_fields,
        )
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user


@final
class User(AbstractBaseUser, PermissionsMixin):
    """Account owning folders and files.

    Identified by a unique, lower-cased email. The password is optional:
    accounts created by an external identity provider carry an unusable
    password hash.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    email = models.EmailField(
        unique=True,
        help_text='Lower-cased login email',
    )

    name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
    )

    image = models.URLField(
        max_length=_IMAGE_URL_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Optional profile image URL',
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(
        default=False,
        help_text='Can log into the admin site',
    )

    date_joined = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS: ClassVar[list[str]] = ['name']

    class Meta:
        """Model metadata."""

        verbose_name = 'User'  # type: ignore[mutable-override]
        verbose_name_plural = 'Users'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['email']

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.email

    @override
    def clean(self) -> None:
        """Normalize email before model validation."""
        super().clean()
        self.email = normalize_email_address(self.email)

    @override
    def save(self, *args: Any, **kwargs: Any) -> None:
        """Persist the user with a normalized email."""
        self.email = normalize_email_address(self.email)
        super().save(*args, **kwargs)
