"""Response envelope helpers."""

from typing import Any

from django.http import HttpResponse, JsonResponse

from server.common.exceptions import ApiError


def success_response(data: Any, status: int = 200) -> JsonResponse:
    """Wrap data into the success envelope.

    Args:
        data: JSON-serializable payload.
        status: HTTP status code.

    Returns:
        JSON response ``{"success": true, "data": ...}``.
    """
    return JsonResponse({'success': True, 'data': data}, status=status)


def no_content_response() -> HttpResponse:
    """Empty 204 response used by deletes."""
    return HttpResponse(status=204)


def error_response(error: ApiError) -> JsonResponse:
    """Render an API error into the error envelope.

    Args:
        error: Raised API error.

    Returns:
        JSON response with the error's status code.
    """
    return JsonResponse(error.as_payload(), status=error.status_code)


def internal_error_response() -> JsonResponse:
    """Generic 500 envelope without a business code."""
    return JsonResponse(
        {'success': False, 'error': 'Internal server error'},
        status=500,
    )
