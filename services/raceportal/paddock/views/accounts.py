"""Registration, login and logout endpoint callables."""

from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from ..errors import AuthenticationError, ConflictError, ValidationError
from ..http.headers import apply_no_store
from ..services.accounts import authenticate, end_session, register_user, start_session


def healthz(request):
    # Used by proxy/ops checks to confirm the app process is alive.
    return HttpResponse("ok", content_type="text/plain")


def index(request):
    if getattr(request, "portal_user", None) is not None:
        return redirect("/dashboard")
    return redirect("/login")


@require_http_methods(["GET", "POST"])
def register(request):
    error = ""
    values = {"name": "", "email": ""}
    if request.method == "POST":
        values = {
            "name": (request.POST.get("name") or "").strip(),
            "email": (request.POST.get("email") or "").strip(),
        }
        try:
            register_user(
                name=values["name"],
                email=values["email"],
                password=request.POST.get("password") or "",
                admin_code=request.POST.get("admin_code") or "",
            )
        except (ValidationError, ConflictError) as exc:
            error = exc.message
        else:
            return redirect("/login")

    response = render(request, "paddock/register.html", {"error": error, "values": values})
    apply_no_store(response)
    return response


@require_http_methods(["GET", "POST"])
def login(request):
    error = ""
    email = ""
    if request.method == "POST":
        email = (request.POST.get("email") or "").strip()
        try:
            portal_user = authenticate(email=email, password=request.POST.get("password") or "")
        except AuthenticationError as exc:
            error = exc.message
        else:
            start_session(request, portal_user)
            return redirect("/dashboard")

    response = render(request, "paddock/login.html", {"error": error, "email": email})
    apply_no_store(response)
    return response


@require_POST
def logout(request):
    end_session(request)
    return redirect("/login")


__all__ = [
    "healthz",
    "index",
    "register",
    "login",
    "logout",
]
