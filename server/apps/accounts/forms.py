"""Validation forms for account payloads."""

from typing import Final

from django import forms

from server.apps.accounts.models import normalize_email_address

_PASSWORD_MIN_LENGTH: Final = 8
_NAME_MAX_LENGTH: Final = 255


class EmailField(forms.EmailField):
    """Email field returning a normalized address."""

    def clean(self, value: object) -> str:
        """Validate and lower-case the address."""
        return normalize_email_address(super().clean(value))


class RegistrationForm(forms.Form):
    """Payload of ``POST /auth/register``."""

    name = forms.CharField(min_length=1, max_length=_NAME_MAX_LENGTH)
    email = EmailField()
    password = forms.CharField(min_length=_PASSWORD_MIN_LENGTH, strip=False)


class LoginForm(forms.Form):
    """Payload of ``POST /auth/login``."""

    email = EmailField()
    password = forms.CharField(strip=False)
