"""Validation boundary between raw request data and business logic."""

import json
import re
import uuid
from typing import Any

from django import forms
from django.http import HttpRequest

from server.common.exceptions import ValidationFailedError

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def validate_form(
    form_class: type[forms.Form],
    data: dict[str, Any],
) -> dict[str, Any]:
    """Validate data with a Django form.

    Args:
        form_class: Form describing the expected payload.
        data: Raw payload (snake_case keys).

    Returns:
        The form's ``cleaned_data``.

    Raises:
        ValidationFailedError: With per-field messages on failure.
    """
    form = form_class(data=data)
    if not form.is_valid():
        details = {
            field: [str(message) for message in messages]
            for field, messages in form.errors.items()
        }
        raise ValidationFailedError(details=details)
    return form.cleaned_data


def parse_json_body(request: HttpRequest) -> dict[str, Any]:
    """Decode a JSON object from the request body.

    An empty body is treated as an empty object.

    Args:
        request: Incoming request.

    Returns:
        Decoded JSON object.

    Raises:
        ValidationFailedError: If the body is not a JSON object.
    """
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError) as error:
        raise ValidationFailedError('Invalid JSON body') from error
    if not isinstance(payload, dict):
        raise ValidationFailedError('JSON body must be an object')
    return payload


def parse_json_field(raw_value: str, field: str) -> dict[str, Any]:
    """Decode a JSON object carried inside a form field.

    Args:
        raw_value: Field value.
        field: Field name used in error details.

    Returns:
        Decoded JSON object.

    Raises:
        ValidationFailedError: If the value is not a JSON object.
    """
    try:
        payload = json.loads(raw_value)
    except ValueError as error:
        raise ValidationFailedError(
            details={field: ['Must be a JSON object.']},
        ) from error
    if not isinstance(payload, dict):
        raise ValidationFailedError(
            details={field: ['Must be a JSON object.']},
        )
    return payload


def parse_resource_id(raw_id: str, field: str = 'id') -> uuid.UUID:
    """Parse an identifier taken from the URL path.

    Args:
        raw_id: Raw path segment.
        field: Name used in error details.

    Returns:
        Parsed UUID.

    Raises:
        ValidationFailedError: If the value is not a valid identifier.
    """
    try:
        return uuid.UUID(raw_id)
    except (TypeError, ValueError) as error:
        raise ValidationFailedError(
            details={field: ['Must be a valid identifier.']},
        ) from error


def to_snake_case(payload: dict[str, Any]) -> dict[str, Any]:
    """Rename top-level camelCase keys to snake_case.

    Args:
        payload: Decoded JSON object or query parameters.

    Returns:
        New dictionary with ``folderId`` style keys as ``folder_id``.
    """
    return {
        _CAMEL_BOUNDARY.sub('_', key).lower(): value
        for key, value in payload.items()
    }
