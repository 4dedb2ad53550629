"""Report or remove replay/telemetry files not referenced by any submission."""

from __future__ import annotations

from django.core.management.base import BaseCommand

from paddock.models import Submission
from paddock.services.file_intake import REPLAY_FIELD, TELEMETRY_FIELD, destination_dir, upload_root


def _iter_kind_files(field_name: str):
    base = destination_dir(field_name)
    if not base.exists():
        return
    for path in sorted(base.iterdir()):
        if path.is_file():
            yield path


class Command(BaseCommand):
    help = "Report orphan files under the upload root not referenced by any Submission."

    def add_arguments(self, parser):
        parser.add_argument(
            "--delete",
            action="store_true",
            help="Delete orphan files after reporting. Default is report-only.",
        )
        parser.add_argument(
            "--show",
            type=int,
            default=50,
            help="How many orphan paths to print (default: 50).",
        )

    def handle(self, *args, **options):
        root = upload_root()
        delete = bool(options["delete"])
        show = max(int(options["show"]), 0)

        if not root.exists():
            self.stdout.write(self.style.WARNING(f"Upload root does not exist: {root}"))
            return

        referenced = {REPLAY_FIELD: set(), TELEMETRY_FIELD: set()}
        for submission in Submission.objects.only("replay_file", "telemetry_files"):
            if submission.replay_file:
                referenced[REPLAY_FIELD].add(submission.replay_file)
            referenced[TELEMETRY_FIELD].update(submission.telemetry_names)

        total_files = 0
        orphan_paths = []
        for field_name in (REPLAY_FIELD, TELEMETRY_FIELD):
            for path in _iter_kind_files(field_name):
                total_files += 1
                if path.name not in referenced[field_name]:
                    orphan_paths.append(path)

        self.stdout.write(f"Upload root: {root}")
        self.stdout.write(f"Scanned files: {total_files}")
        self.stdout.write(f"Referenced files: {sum(len(names) for names in referenced.values())}")
        self.stdout.write(f"Orphan files: {len(orphan_paths)}")

        for path in orphan_paths[:show]:
            self.stdout.write(f" - {path.relative_to(root).as_posix()}")
        if len(orphan_paths) > show:
            self.stdout.write(f"... ({len(orphan_paths) - show} more)")

        if not delete:
            self.stdout.write(self.style.WARNING("[report-only] Use --delete to remove orphan files."))
            return

        deleted = 0
        errors = 0
        for path in orphan_paths:
            try:
                path.unlink()
                deleted += 1
            except OSError:
                errors += 1
        self.stdout.write(self.style.SUCCESS(f"Deleted orphan files: {deleted}; errors: {errors}"))
