"""Driver dashboard and submission create/edit endpoint callables."""

import logging

from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from ..errors import NotFoundError, UploadLimitError, ValidationError
from ..http.headers import apply_no_store
from ..services.file_intake import check_upload_limits
from ..services.submissions import (
    SubmissionFields,
    create_submission,
    edit_submission as edit_owned_submission,
    get_owned_submission,
    list_own_submissions,
)
from .shared_auth import error_response, login_required

logger = logging.getLogger(__name__)


def _reject_over_limit(request):
    """400 response when the upload fields break the limits, else None."""
    try:
        check_upload_limits(request.FILES)
    except UploadLimitError as exc:
        logger.warning(
            "upload_rejected user_id=%s path=%s reason=%s",
            request.portal_user.user_id,
            request.path,
            exc.message,
        )
        return error_response(exc)
    return None


def _render_form(request, *, fields: SubmissionFields | None, error: str, submission=None):
    response = render(
        request,
        "paddock/submission_form.html",
        {
            "fields": fields,
            "error": error,
            "submission": submission,
        },
    )
    apply_no_store(response)
    return response


@login_required
def dashboard(request):
    submissions = list_own_submissions(request.portal_user)
    response = render(request, "paddock/dashboard.html", {"submissions": submissions})
    apply_no_store(response)
    return response


@login_required
@require_http_methods(["GET", "POST"])
def submit(request):
    if request.method != "POST":
        return _render_form(request, fields=None, error="")

    rejected = _reject_over_limit(request)
    if rejected is not None:
        return rejected

    fields = SubmissionFields.from_post(request.POST)
    try:
        create_submission(portal_user=request.portal_user, fields=fields, files=request.FILES)
    except ValidationError as exc:
        return _render_form(request, fields=fields, error=exc.message)
    return redirect("/dashboard")


@login_required
@require_http_methods(["GET", "POST"])
def edit_submission(request, submission_id: int):
    if request.method == "POST":
        rejected = _reject_over_limit(request)
        if rejected is not None:
            return rejected

    try:
        submission = get_owned_submission(portal_user=request.portal_user, submission_id=submission_id)
    except NotFoundError as exc:
        return error_response(exc)

    if request.method != "POST":
        return _render_form(
            request,
            fields=SubmissionFields.from_submission(submission),
            error="",
            submission=submission,
        )

    fields = SubmissionFields.from_post(request.POST)
    try:
        edit_owned_submission(
            portal_user=request.portal_user,
            submission_id=submission_id,
            fields=fields,
            files=request.FILES,
        )
    except ValidationError as exc:
        return _render_form(request, fields=fields, error=exc.message, submission=submission)
    except NotFoundError as exc:
        return error_response(exc)
    return redirect("/dashboard")


__all__ = [
    "dashboard",
    "submit",
    "edit_submission",
]
