"""Data model for the race submission portal.

Two tables:
- `User`: drivers and admins share one account table, told apart by `role`.
- `Submission`: one race entry owned by exactly one user, with optional
  replay/telemetry attachments stored as bare filenames.

Attachments are never stored as paths. The directory a filename lives in is
fixed by its kind (see `services.file_intake`).
"""

import json

from django.db import models


class Role(models.TextChoices):
    """Closed set of account roles."""

    DRIVER = "driver", "Driver"
    ADMIN = "admin", "Admin"


class User(models.Model):
    """A portal account.

    The role starts as driver. It only becomes admin through the registration
    admin code or an existing admin's promotion.
    """

    name = models.CharField(max_length=200)
    # Unique exactly as typed; no case folding.
    email = models.CharField(max_length=254, unique=True)
    password_hash = models.CharField(max_length=256)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.DRIVER)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}> ({self.role})"


class Submission(models.Model):
    """A race entry submitted by a driver for review."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="submissions")
    race_date = models.CharField(max_length=64)
    race_time = models.CharField(max_length=64)
    series = models.CharField(max_length=200)
    is_protest = models.BooleanField(default=False)
    protest_text = models.TextField(null=True, blank=True)
    replay_file = models.CharField(max_length=255, null=True, blank=True)
    # JSON list of stored telemetry filenames, in upload order.
    telemetry_files = models.TextField(default="[]")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="paddock_sub_user_created_idx"),
            models.Index(fields=["created_at"], name="paddock_sub_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Submission {self.id} ({self.series} {self.race_date} {self.race_time})"

    @property
    def telemetry_names(self) -> list[str]:
        try:
            names = json.loads(self.telemetry_files or "[]")
        except ValueError:
            return []
        if not isinstance(names, list):
            return []
        return [str(name) for name in names if name]


def serialize_telemetry(names) -> str:
    return json.dumps(list(names))
