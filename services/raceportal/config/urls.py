"""Top-level URL map for the race submission portal.

Plain-language map:
- `/register`, `/login`, `/logout` manage accounts and sessions.
- `/dashboard`, `/submit`, `/edit/<id>` are the driver flow.
- `/admin...` and `/files/...` are the admin review surface. The Django admin
  site is not mounted, so `/admin` belongs to the portal.
"""

from django.urls import path
from paddock import views

urlpatterns = [
    # Health endpoint for reverse proxy and uptime checks.
    path("healthz", views.healthz),

    # Accounts and sessions.
    path("", views.index),
    path("register", views.register),
    path("login", views.login),
    path("logout", views.logout),

    # Driver flow.
    path("dashboard", views.dashboard),
    path("submit", views.submit),
    path("edit/<int:submission_id>", views.edit_submission),

    # Admin review.
    path("admin", views.admin_home),
    path("admin/users/<int:user_id>/make-admin", views.admin_make_admin),
    path("files/replays/<str:name>", views.replay_download),
    path("files/telemetry/<str:name>", views.telemetry_download),
]
