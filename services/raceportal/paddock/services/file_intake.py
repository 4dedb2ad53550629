"""Upload intake: per-kind directories, collision-resistant names, limits.

Intake only writes and removes files. Recording stored filenames on a
submission row is the caller's job.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.storage import FileSystemStorage

from ..errors import UploadLimitError

logger = logging.getLogger(__name__)

REPLAY_FIELD = "replay"
TELEMETRY_FIELD = "telemetry"

_KIND_SUBDIRS = {
    REPLAY_FIELD: "replays",
    TELEMETRY_FIELD: "telemetry",
}
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")
# Common filesystem limit for a single path component.
MAX_STORED_NAME_LENGTH = 255


@dataclass(frozen=True)
class IntakeResult:
    replay: str | None = None
    telemetry: tuple[str, ...] = ()


def upload_root() -> Path:
    return Path(settings.PADDOCK_UPLOAD_ROOT)


def destination_dir(field_name: str) -> Path:
    """Directory for a file field; unknown fields land in the upload root."""
    subdir = _KIND_SUBDIRS.get(field_name)
    if subdir is None:
        return upload_root()
    return upload_root() / subdir


def storage_for(field_name: str) -> FileSystemStorage:
    return FileSystemStorage(location=str(destination_dir(field_name)))


def ensure_upload_dirs() -> None:
    for path in (upload_root(), *(upload_root() / subdir for subdir in _KIND_SUBDIRS.values())):
        path.mkdir(parents=True, exist_ok=True)


def sanitize_original_name(name: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("_", name or "") or "upload"


def storage_filename(original_name: str, *, now_ms: int | None = None) -> str:
    """Build `<ms timestamp>-<sanitized original name>`.

    The sanitized part only contains `[A-Za-z0-9_.-]`, so the result can never
    carry a path separator. Long names are shortened to fit
    `MAX_STORED_NAME_LENGTH`, keeping the extension where there is room.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    prefix = f"{now_ms}-"
    cleaned = sanitize_original_name(original_name)
    room = MAX_STORED_NAME_LENGTH - len(prefix)
    if len(cleaned) > room:
        stem, dot, ext = cleaned.rpartition(".")
        if dot and stem and len(ext) + 1 < room:
            cleaned = f"{stem[: room - len(ext) - 1]}.{ext}"
        else:
            cleaned = cleaned[:room]
    return prefix + cleaned


def is_bare_filename(name: str) -> bool:
    value = (name or "").strip()
    if not value or value in {".", ".."}:
        return False
    return Path(value).name == value and "\\" not in value


def check_upload_limits(files) -> None:
    """Reject the request when file fields exceed the configured limits.

    `files` is Django's `request.FILES`. Runs before any handler logic, so a
    rejected request never writes to disk.
    """
    limits = getattr(settings, "PADDOCK_UPLOAD_LIMITS", {}) or {}
    for field_name in files.keys():
        if field_name not in limits:
            raise UploadLimitError(f"Unexpected file field: {field_name}")
        count = len(files.getlist(field_name))
        max_count = int(limits[field_name])
        if count > max_count:
            raise UploadLimitError(f"Too many {field_name} files: at most {max_count} allowed.")


def store_upload(field_name: str, upload) -> str:
    """Write one uploaded file and return its stored filename."""
    storage = storage_for(field_name)
    # Storage appends a random suffix if the name is already taken, trimming
    # the stem so the result still fits.
    stored = storage.save(
        storage_filename(getattr(upload, "name", "") or ""),
        upload,
        max_length=MAX_STORED_NAME_LENGTH,
    )
    logger.info(
        "upload_stored field=%s name=%s size_bytes=%s",
        field_name,
        stored,
        int(getattr(upload, "size", 0) or 0),
    )
    return stored


def intake_request_files(files) -> IntakeResult:
    """Store replay/telemetry uploads from `request.FILES`."""
    check_upload_limits(files)
    replay_uploads = files.getlist(REPLAY_FIELD)
    replay = store_upload(REPLAY_FIELD, replay_uploads[0]) if replay_uploads else None
    telemetry = tuple(store_upload(TELEMETRY_FIELD, upload) for upload in files.getlist(TELEMETRY_FIELD))
    return IntakeResult(replay=replay, telemetry=telemetry)


def delete_stored_file(field_name: str, name: str | None) -> None:
    """Remove a stored file; failures are logged and swallowed."""
    if not name or not is_bare_filename(name):
        return
    try:
        storage_for(field_name).delete(name)
    except (OSError, SuspiciousFileOperation):
        logger.exception("upload_delete_failed field=%s name=%s", field_name, name)


def resolve_stored_file(field_name: str, name: str) -> Path | None:
    """Absolute path of a stored file, or None when it is not servable."""
    if not is_bare_filename(name):
        return None
    try:
        path = Path(storage_for(field_name).path(name))
    except SuspiciousFileOperation:
        return None
    if not path.is_file():
        return None
    return path
