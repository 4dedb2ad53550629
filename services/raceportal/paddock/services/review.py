"""Admin review queries."""

from ..models import Submission, User


def all_submissions_with_owner():
    return Submission.objects.select_related("user").order_by("-created_at", "-id")


def all_users():
    return User.objects.order_by("-created_at", "-id")
