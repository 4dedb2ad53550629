from django.apps import AppConfig


class PaddockConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "paddock"

    def ready(self):
        # Upload directories must exist before the first request writes to them.
        from .services.file_intake import ensure_upload_dirs

        ensure_upload_dirs()
