"""Submission create/edit lifecycle for drivers.

Ownership rule: a driver can only see or change rows where
`Submission.user_id == portal_user.user_id`. Rows owned by someone else look
exactly like rows that do not exist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import NotFoundError, ValidationError
from ..models import Submission, serialize_telemetry
from .accounts import PortalSession
from .file_intake import (
    REPLAY_FIELD,
    TELEMETRY_FIELD,
    IntakeResult,
    delete_stored_file,
    intake_request_files,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionFields:
    race_date: str
    race_time: str
    series: str
    is_protest: bool = False
    protest_text: str | None = None

    @classmethod
    def from_post(cls, data) -> "SubmissionFields":
        protest_text = (data.get("protest_text") or "").strip()
        return cls(
            race_date=(data.get("race_date") or "").strip(),
            race_time=(data.get("race_time") or "").strip(),
            series=(data.get("series") or "").strip(),
            # Checkbox semantics: any submitted value means checked.
            is_protest=bool(data.get("is_protest")),
            protest_text=protest_text or None,
        )

    @classmethod
    def from_submission(cls, submission: Submission) -> "SubmissionFields":
        return cls(
            race_date=submission.race_date,
            race_time=submission.race_time,
            series=submission.series,
            is_protest=bool(submission.is_protest),
            protest_text=submission.protest_text,
        )

    def validate(self) -> None:
        if not self.race_date or not self.race_time or not self.series:
            raise ValidationError("Please fill required fields.")


def list_own_submissions(portal_user: PortalSession):
    return Submission.objects.filter(user_id=portal_user.user_id).order_by("-created_at", "-id")


def get_owned_submission(*, portal_user: PortalSession, submission_id: int) -> Submission:
    submission = Submission.objects.filter(id=submission_id, user_id=portal_user.user_id).first()
    if submission is None:
        raise NotFoundError()
    return submission


def _discard_intake(intake: IntakeResult) -> None:
    delete_stored_file(REPLAY_FIELD, intake.replay)
    for name in intake.telemetry:
        delete_stored_file(TELEMETRY_FIELD, name)


def create_submission(*, portal_user: PortalSession, fields: SubmissionFields, files) -> Submission:
    """Validate, store uploads, then insert one row owned by the session user."""
    fields.validate()
    intake = intake_request_files(files)
    submission = Submission.objects.create(
        user_id=portal_user.user_id,
        race_date=fields.race_date,
        race_time=fields.race_time,
        series=fields.series,
        is_protest=fields.is_protest,
        protest_text=fields.protest_text,
        replay_file=intake.replay,
        telemetry_files=serialize_telemetry(intake.telemetry),
    )
    logger.info(
        "submission_created submission_id=%s user_id=%s replay=%s telemetry_count=%s",
        submission.id,
        portal_user.user_id,
        bool(intake.replay),
        len(intake.telemetry),
    )
    return submission


def edit_submission(
    *,
    portal_user: PortalSession,
    submission_id: int,
    fields: SubmissionFields,
    files,
) -> Submission:
    """Overwrite an owned submission.

    File policy per kind: a new upload replaces every previous file of that
    kind (old files are deleted from storage); no upload keeps what is there.
    """
    existing = get_owned_submission(portal_user=portal_user, submission_id=submission_id)
    fields.validate()
    intake = intake_request_files(files)

    replay_file = intake.replay or existing.replay_file
    telemetry = list(intake.telemetry) or existing.telemetry_names

    # Filtering on the owner too keeps a forged id from touching another user's row.
    updated = Submission.objects.filter(id=submission_id, user_id=portal_user.user_id).update(
        race_date=fields.race_date,
        race_time=fields.race_time,
        series=fields.series,
        is_protest=fields.is_protest,
        protest_text=fields.protest_text,
        replay_file=replay_file,
        telemetry_files=serialize_telemetry(telemetry),
    )
    if not updated:
        logger.warning(
            "submission_edit_lost_row submission_id=%s user_id=%s",
            submission_id,
            portal_user.user_id,
        )
        _discard_intake(intake)
        raise NotFoundError()

    # Superseded files go only once the row points at their replacements.
    if intake.replay:
        delete_stored_file(REPLAY_FIELD, existing.replay_file)
    if intake.telemetry:
        for name in existing.telemetry_names:
            delete_stored_file(TELEMETRY_FIELD, name)

    logger.info(
        "submission_updated submission_id=%s user_id=%s replay_replaced=%s telemetry_replaced=%s",
        submission_id,
        portal_user.user_id,
        bool(intake.replay),
        bool(intake.telemetry),
    )
    return Submission.objects.get(id=submission_id)
