"""Admin review, promotion and file download endpoint callables."""

import logging
import mimetypes

from django.http import FileResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from ..errors import NotFoundError
from ..http.headers import apply_download_safety, apply_no_store, safe_attachment_filename
from ..services.accounts import promote_to_admin
from ..services.file_intake import REPLAY_FIELD, TELEMETRY_FIELD, resolve_stored_file
from ..services.review import all_submissions_with_owner, all_users
from .shared_auth import admin_required, error_response

logger = logging.getLogger(__name__)


@admin_required
@require_GET
def admin_home(request):
    response = render(
        request,
        "paddock/admin.html",
        {
            "submissions": all_submissions_with_owner(),
            "users": all_users(),
        },
    )
    apply_no_store(response)
    return response


@admin_required
@require_POST
def admin_make_admin(request, user_id: int):
    promote_to_admin(user_id)
    logger.info("admin_promotion actor_id=%s target_id=%s", request.portal_user.user_id, user_id)
    return redirect("/admin")


def _stored_file_response(field_name: str, name: str):
    file_path = resolve_stored_file(field_name, name)
    if file_path is None:
        return error_response(NotFoundError())

    filename = safe_attachment_filename(file_path.name, fallback=field_name)
    content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    response = FileResponse(
        open(file_path, "rb"),
        as_attachment=True,
        filename=filename,
        content_type=content_type,
    )
    apply_download_safety(response)
    apply_no_store(response)
    return response


@admin_required
@require_GET
def replay_download(request, name: str):
    return _stored_file_response(REPLAY_FIELD, name)


@admin_required
@require_GET
def telemetry_download(request, name: str):
    return _stored_file_response(TELEMETRY_FIELD, name)


__all__ = [
    "admin_home",
    "admin_make_admin",
    "replay_download",
    "telemetry_download",
]
