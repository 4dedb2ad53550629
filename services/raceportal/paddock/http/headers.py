"""Response hardening for portal pages and stored-file downloads."""

from __future__ import annotations

from django.http import HttpResponse

from ..services.file_intake import sanitize_original_name


def apply_no_store(response: HttpResponse) -> HttpResponse:
    """Keep per-user pages out of browser and shared caches."""
    response["Cache-Control"] = "private, no-store"
    response["Pragma"] = "no-cache"
    return response


def apply_download_safety(response: HttpResponse) -> HttpResponse:
    # Uploaded files are untrusted: never sniff, render or script them.
    response["X-Content-Type-Options"] = "nosniff"
    response["Content-Security-Policy"] = "default-src 'none'; sandbox"
    response["Referrer-Policy"] = "no-referrer"
    return response


def safe_attachment_filename(name: str, *, fallback: str) -> str:
    """Stored names are already sanitized; re-clean them before they reach a header."""
    return sanitize_original_name((name or "").strip()) if name else fallback
