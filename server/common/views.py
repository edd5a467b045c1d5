"""Base view for JSON API endpoints."""

import logging
from typing import Any, ClassVar

from django.db import OperationalError
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views import View

from server.common.exceptions import (
    ApiError,
    AuthenticationRequiredError,
    DatabaseUnavailableError,
)
from server.common.responses import error_response, internal_error_response

logger = logging.getLogger(__name__)


class ApiView(View):
    """Class-based view producing the JSON success/error envelope.

    Handlers (``get``, ``post``, ...) return a response built with
    ``server.common.responses`` or raise ``ApiError``. Authentication is
    required unless ``login_required`` is switched off.

    Anything else that escapes a handler is logged with the view,
    method, URL kwargs and principal id, and answered with a generic 500.
    """

    login_required: ClassVar[bool] = True

    def dispatch(
        self,
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> HttpResponse:
        """Authenticate, run the handler and translate failures."""
        try:
            if self.login_required and not request.user.is_authenticated:
                raise AuthenticationRequiredError()
            return super().dispatch(request, *args, **kwargs)
        except ApiError as error:
            self._log_api_error(request, error, kwargs)
            return error_response(error)
        except OperationalError:
            logger.exception(
                'Database unavailable in %s %s (user=%s, params=%s)',
                type(self).__name__,
                request.method,
                self._principal_id(request),
                kwargs,
            )
            return error_response(DatabaseUnavailableError())
        except Exception:
            logger.exception(
                'Unhandled error in %s %s (user=%s, params=%s)',
                type(self).__name__,
                request.method,
                self._principal_id(request),
                kwargs,
            )
            return internal_error_response()

    def http_method_not_allowed(
        self,
        request: HttpRequest,
        *args: Any,
        **kwargs: Any,
    ) -> HttpResponse:
        """Answer unsupported methods with the error envelope."""
        response = JsonResponse(
            {'success': False, 'error': 'Method not allowed'},
            status=405,
        )
        response['Allow'] = ', '.join(self._allowed_methods())
        return response

    def _log_api_error(
        self,
        request: HttpRequest,
        error: ApiError,
        params: dict[str, Any],
    ) -> None:
        log = logger.error if error.status_code >= 500 else logger.info
        log(
            '%s %s rejected with %s (%s): %s (user=%s, params=%s)',
            type(self).__name__,
            request.method,
            error.code,
            error.status_code,
            error.message,
            self._principal_id(request),
            params,
        )

    def _principal_id(self, request: HttpRequest) -> str | None:
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        return str(user.pk)
