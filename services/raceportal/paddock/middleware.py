"""Portal session middleware.

Login stores `{id, name, role, email}` in the session. On each request this
middleware turns that record into a `PortalSession` on `request.portal_user`
(or None), re-reading the user row so that:

- a session whose user no longer exists is cleared;
- a promotion to admin applies from the next request, not the next login.
"""

import logging

from .services.accounts import SESSION_KEY, resolve_session_user

logger = logging.getLogger(__name__)

_SESSION_SKIP_PREFIXES = ("/static/",)
_SESSION_SKIP_EXACT = {"/healthz"}


class PortalSessionMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.portal_user = None
        path = (getattr(request, "path", "") or "").strip()
        if path in _SESSION_SKIP_EXACT or any(path.startswith(prefix) for prefix in _SESSION_SKIP_PREFIXES):
            return self.get_response(request)

        record = request.session.get(SESSION_KEY)
        if record:
            portal_user = resolve_session_user(record)
            if portal_user is None:
                logger.info("session_user_cleared path=%s", path)
                request.session.pop(SESSION_KEY, None)
            else:
                fresh = portal_user.as_session_record()
                if fresh != record:
                    request.session[SESSION_KEY] = fresh
                request.portal_user = portal_user

        return self.get_response(request)
