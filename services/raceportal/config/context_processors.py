"""Template context processors for the portal."""


def portal_user(request):
    # Layout navigation reads `user`; anonymous requests get None.
    return {"user": getattr(request, "portal_user", None)}
