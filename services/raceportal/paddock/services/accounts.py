"""Account registration, login and the per-request auth context."""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import IntegrityError, transaction
from django.middleware.csrf import rotate_token

from ..errors import AuthenticationError, ConflictError, ValidationError
from ..models import Role, User

logger = logging.getLogger(__name__)

SESSION_KEY = "portal_user"


@dataclass(frozen=True)
class PortalSession:
    """Who is making the request. Never holds password material."""

    user_id: int
    name: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def as_session_record(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "email": self.email,
        }

    @classmethod
    def from_user(cls, user: User) -> "PortalSession | None":
        try:
            role = Role(user.role)
        except ValueError:
            logger.warning("session_unknown_role user_id=%s", user.id)
            return None
        return cls(user_id=int(user.id), name=user.name, email=user.email, role=role)


def _admin_code_matches(admin_code: str) -> bool:
    configured = str(getattr(settings, "PADDOCK_ADMIN_CODE", "") or "")
    if not admin_code or not configured:
        return False
    return hmac.compare_digest(admin_code.encode("utf-8"), configured.encode("utf-8"))


def register_user(*, name: str, email: str, password: str, admin_code: str = "") -> User:
    """Create an account. Does not log the new user in."""
    name = (name or "").strip()
    email = (email or "").strip()
    password = password or ""
    if not name or not email or not password:
        raise ValidationError("All fields are required.")

    role = Role.ADMIN if _admin_code_matches((admin_code or "").strip()) else Role.DRIVER
    try:
        with transaction.atomic():
            user = User.objects.create(
                name=name,
                email=email,
                password_hash=make_password(password),
                role=role,
            )
    except IntegrityError:
        raise ConflictError("Email already in use.")
    logger.info("user_registered user_id=%s role=%s", user.id, user.role)
    return user


def authenticate(*, email: str, password: str) -> PortalSession:
    """Resolve credentials to a session context.

    Unknown email and wrong password fail the same way.
    """
    email = (email or "").strip()
    password = password or ""
    user = User.objects.filter(email=email).first() if email else None
    if user is None:
        # Hash anyway so a miss costs about as much as a wrong password.
        make_password(password)
        logger.info("login_failed reason=credentials")
        raise AuthenticationError("Invalid credentials.")
    if not check_password(password, user.password_hash):
        logger.info("login_failed reason=credentials")
        raise AuthenticationError("Invalid credentials.")
    portal_user = PortalSession.from_user(user)
    if portal_user is None:
        raise AuthenticationError("Invalid credentials.")
    return portal_user


def start_session(request, portal_user: PortalSession) -> None:
    # Rotate identifiers on login to reduce session fixation blast radius.
    request.session.cycle_key()
    request.session[SESSION_KEY] = portal_user.as_session_record()
    rotate_token(request)
    logger.info("login_succeeded user_id=%s role=%s", portal_user.user_id, portal_user.role.value)


def end_session(request) -> None:
    request.session.flush()


def resolve_session_user(record) -> PortalSession | None:
    """Re-read the session's user from the store; None if it is gone."""
    if not isinstance(record, dict):
        return None
    try:
        user_id = int(record.get("id") or 0)
    except (TypeError, ValueError):
        return None
    if not user_id:
        return None
    user = User.objects.filter(id=user_id).first()
    if user is None:
        return None
    return PortalSession.from_user(user)


def promote_to_admin(user_id: int) -> bool:
    """Set a user's role to admin. Idempotent; False when no such user."""
    updated = User.objects.filter(id=user_id).update(role=Role.ADMIN)
    if not updated:
        logger.warning("promote_admin_missing_user user_id=%s", user_id)
        return False
    logger.info("user_promoted_admin user_id=%s", user_id)
    return True
