"""JSON representations of accounts."""

from typing import Any

from server.apps.accounts.models import User


def present_user(user: User) -> dict[str, Any]:
    """Public fields of a user."""
    return {
        'id': str(user.pk),
        'name': user.name,
        'email': user.email,
        'image': user.image or None,
    }
