"""HTTP endpoints for registration and sessions."""

from django.contrib.auth import login, logout
from django.http import HttpRequest, HttpResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import ensure_csrf_cookie

from server.apps.accounts.forms import LoginForm, RegistrationForm
from server.apps.accounts.logic.user_operations import (
    authenticate_user,
    register_user,
)
from server.apps.accounts.presenters import present_user
from server.common.responses import no_content_response, success_response
from server.common.validation import parse_json_body, validate_form
from server.common.views import ApiView


class RegisterView(ApiView):
    """``POST /auth/register``: create an account."""

    login_required = False

    def post(self, request: HttpRequest) -> HttpResponse:
        """Register a user from name, email and password."""
        data = validate_form(RegistrationForm, parse_json_body(request))
        user = register_user(
            name=data['name'],
            email=data['email'],
            password=data['password'],
        )
        return success_response(present_user(user), status=201)


class LoginView(ApiView):
    """``POST /auth/login``: start a session."""

    login_required = False

    def post(self, request: HttpRequest) -> HttpResponse:
        """Authenticate and attach the user to the session."""
        data = validate_form(LoginForm, parse_json_body(request))
        user = authenticate_user(request, data['email'], data['password'])
        login(request, user)
        return success_response(present_user(user))


class LogoutView(ApiView):
    """``POST /auth/logout``: end the session."""

    def post(self, request: HttpRequest) -> HttpResponse:
        """Flush the session."""
        logout(request)
        return no_content_response()


class SessionView(ApiView):
    """``GET /auth/session``: the current principal."""

    def get(self, request: HttpRequest) -> HttpResponse:
        """Return the authenticated user."""
        return success_response(present_user(request.user))


@method_decorator(ensure_csrf_cookie, name='dispatch')
class CsrfView(ApiView):
    """``GET /auth/csrf``: hand the CSRF cookie to browser clients."""

    login_required = False

    def get(self, request: HttpRequest) -> HttpResponse:
        """Respond with an empty success envelope."""
        return success_response(None)
