"""Auth gate decorators and error responses shared by portal views."""

import logging
from functools import wraps

from django.http import HttpResponse
from django.shortcuts import redirect

from ..errors import AuthorizationError, PortalError

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


def error_response(exc: PortalError) -> HttpResponse:
    """Plain-text response for errors that are not re-rendered into a form."""
    return HttpResponse(exc.message, status=exc.status, content_type="text/plain; charset=utf-8")


def login_required(view_func):
    """Send requests without a portal session to the login page."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if getattr(request, "portal_user", None) is None:
            return redirect(LOGIN_PATH)
        return view_func(request, *args, **kwargs)

    return _wrapped


def admin_required(view_func):
    """Login-required, then 403 for anyone whose role is not admin."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        portal_user = request.portal_user
        if not portal_user.is_admin:
            logger.warning(
                "admin_route_forbidden user_id=%s path=%s",
                portal_user.user_id,
                request.path,
            )
            return error_response(AuthorizationError())
        return view_func(request, *args, **kwargs)

    return login_required(_wrapped)
