import tempfile
from pathlib import Path

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from django.utils.datastructures import MultiValueDict

from ..errors import UploadLimitError
from ..services.file_intake import (
    MAX_STORED_NAME_LENGTH,
    check_upload_limits,
    delete_stored_file,
    destination_dir,
    intake_request_files,
    is_bare_filename,
    resolve_stored_file,
    sanitize_original_name,
    storage_filename,
)


class FileNamingTests(SimpleTestCase):
    def test_sanitize_replaces_everything_outside_safe_set(self):
        self.assertEqual(sanitize_original_name("my lap (1).rpy"), "my_lap__1_.rpy")
        self.assertEqual(sanitize_original_name("../../etc/passwd"), ".._.._etc_passwd")
        self.assertEqual(sanitize_original_name("Zandvoort_GT3-v2.csv"), "Zandvoort_GT3-v2.csv")
        self.assertEqual(sanitize_original_name("tëlémetry.csv"), "t_l_metry.csv")

    def test_empty_name_gets_placeholder(self):
        self.assertEqual(sanitize_original_name(""), "upload")

    def test_storage_filename_prefixes_timestamp(self):
        self.assertEqual(storage_filename("a b.rpy", now_ms=1700000000123), "1700000000123-a_b.rpy")
        generated = storage_filename("lap.rpy")
        prefix, _, rest = generated.partition("-")
        self.assertTrue(prefix.isdigit())
        self.assertEqual(rest, "lap.rpy")

    def test_long_names_are_capped_and_keep_extension(self):
        name = storage_filename("a" * 300 + ".rpy", now_ms=1700000000123)
        self.assertEqual(len(name), MAX_STORED_NAME_LENGTH)
        self.assertTrue(name.startswith("1700000000123-aaa"))
        self.assertTrue(name.endswith("a.rpy"))

        no_extension = storage_filename("b" * 400, now_ms=1700000000123)
        self.assertEqual(len(no_extension), MAX_STORED_NAME_LENGTH)

        short = storage_filename("lap.rpy", now_ms=1700000000123)
        self.assertEqual(short, "1700000000123-lap.rpy")

    def test_generated_names_are_always_bare(self):
        for raw in ("../x", "a/b/c", "..\\..\\win", "/abs/path"):
            self.assertTrue(is_bare_filename(storage_filename(raw)), raw)

    def test_is_bare_filename(self):
        self.assertTrue(is_bare_filename("1700-lap.rpy"))
        for name in ("", ".", "..", "a/b", "../a", "a\\b"):
            self.assertFalse(is_bare_filename(name), name)


@override_settings(PADDOCK_UPLOAD_ROOT=Path("/srv/uploads"))
class DestinationTests(SimpleTestCase):
    def test_destination_by_field_name(self):
        self.assertEqual(destination_dir("replay"), Path("/srv/uploads/replays"))
        self.assertEqual(destination_dir("telemetry"), Path("/srv/uploads/telemetry"))
        self.assertEqual(destination_dir("anything"), Path("/srv/uploads"))


class UploadLimitCheckTests(SimpleTestCase):
    def _files(self, **fields):
        return MultiValueDict(
            {name: [SimpleUploadedFile(f"{name}{i}", b"x") for i in range(count)] for name, count in fields.items()}
        )

    def test_within_limits_passes(self):
        check_upload_limits(self._files(replay=1, telemetry=5))
        check_upload_limits(self._files())

    def test_too_many_replays(self):
        with self.assertRaises(UploadLimitError):
            check_upload_limits(self._files(replay=2))

    def test_too_many_telemetry(self):
        with self.assertRaises(UploadLimitError):
            check_upload_limits(self._files(telemetry=6))

    def test_unexpected_field(self):
        with self.assertRaises(UploadLimitError) as ctx:
            check_upload_limits(self._files(avatar=1))
        self.assertEqual(ctx.exception.status, 400)


class IntakeStorageTests(SimpleTestCase):
    def setUp(self):
        super().setUp()
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)
        override = override_settings(PADDOCK_UPLOAD_ROOT=self.root)
        override.enable()
        self.addCleanup(override.disable)

    def test_intake_writes_each_kind_to_its_directory(self):
        files = MultiValueDict(
            {
                "replay": [SimpleUploadedFile("r.rpy", b"r")],
                "telemetry": [SimpleUploadedFile("t1.csv", b"1"), SimpleUploadedFile("t2.csv", b"2")],
            }
        )
        result = intake_request_files(files)

        self.assertTrue((self.root / "replays" / result.replay).is_file())
        self.assertEqual(len(result.telemetry), 2)
        for name in result.telemetry:
            self.assertTrue((self.root / "telemetry" / name).is_file())

    def test_intake_without_files_is_empty(self):
        result = intake_request_files(MultiValueDict())
        self.assertIsNone(result.replay)
        self.assertEqual(result.telemetry, ())

    def test_delete_is_best_effort(self):
        (self.root / "replays").mkdir(parents=True)
        target = self.root / "replays" / "1-old.rpy"
        target.write_bytes(b"old")

        delete_stored_file("replay", "1-old.rpy")
        self.assertFalse(target.exists())

        # Missing, empty and non-bare names are ignored.
        delete_stored_file("replay", "1-old.rpy")
        delete_stored_file("replay", None)
        delete_stored_file("replay", "../escape")

    def test_resolve_stored_file(self):
        (self.root / "telemetry").mkdir(parents=True)
        (self.root / "telemetry" / "1-a.csv").write_bytes(b"a")

        self.assertEqual(resolve_stored_file("telemetry", "1-a.csv"), self.root / "telemetry" / "1-a.csv")
        self.assertIsNone(resolve_stored_file("telemetry", "missing.csv"))
        self.assertIsNone(resolve_stored_file("replay", "1-a.csv"))
        self.assertIsNone(resolve_stored_file("telemetry", ".."))
