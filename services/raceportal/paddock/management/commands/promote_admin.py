"""Promote an account to the admin role.

Usage examples:
  python manage.py promote_admin --email driver@example.org
  python manage.py promote_admin --id 7
  python manage.py promote_admin            # bootstrap: earliest registered user
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from paddock.models import Role, User
from paddock.services.accounts import promote_to_admin


class Command(BaseCommand):
    help = "Promote a user to admin (defaults to the earliest registered user)."

    def add_arguments(self, parser):
        target_group = parser.add_mutually_exclusive_group()
        target_group.add_argument("--email", default=None, help="Email of the user to promote")
        target_group.add_argument("--id", type=int, default=None, dest="user_id", help="Id of the user to promote")

    def handle(self, *args, **opts):
        email = (opts.get("email") or "").strip()
        user_id = opts.get("user_id")

        if email:
            user = User.objects.filter(email=email).first()
            if user is None:
                raise CommandError(f"No user with email '{email}'.")
        elif user_id is not None:
            user = User.objects.filter(id=user_id).first()
            if user is None:
                raise CommandError(f"No user with id {user_id}.")
        else:
            user = User.objects.order_by("id").first()
            if user is None:
                self.stdout.write("No users found. Nothing to do.")
                return

        if user.role == Role.ADMIN:
            self.stdout.write(self.style.WARNING(f"User {user.email} (id={user.id}) is already admin."))
            return

        promote_to_admin(user.id)
        self.stdout.write(self.style.SUCCESS(f"Promoted user {user.email} (id={user.id}) to admin."))
