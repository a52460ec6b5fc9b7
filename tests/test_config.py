"""Unit tests for app.core.config: defaults and field validators."""

import unittest
from pathlib import Path

from pydantic import SecretStr, ValidationError

from app.core.config import Settings


class TestDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        self.assertEqual(settings.API_PREFIX, "/api")
        self.assertEqual(settings.DATA_DIR, Path("cms-data"))
        self.assertEqual(settings.UPLOAD_DIR, Path("uploads"))
        self.assertEqual(settings.UPLOAD_URL_PREFIX, "/uploads")
        self.assertEqual(settings.MAX_UPLOAD_BYTES, 10 * 1024 * 1024)
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 24 * 60)
        self.assertEqual(settings.DEFAULT_ADMIN_USERNAME, "admin")
        self.assertEqual(settings.DEFAULT_ADMIN_PASSWORD.get_secret_value(), "admin123")

    def test_insecure_defaults_reported(self) -> None:
        settings = Settings(_env_file=None)
        self.assertEqual(
            settings.insecure_defaults(), ["JWT_SECRET", "DEFAULT_ADMIN_PASSWORD"]
        )
        hardened = Settings(
            _env_file=None,
            JWT_SECRET=SecretStr("a-real-secret"),
            DEFAULT_ADMIN_PASSWORD=SecretStr("a-real-password"),
        )
        self.assertEqual(hardened.insecure_defaults(), [])


class TestValidators(unittest.TestCase):
    def test_prefix_trailing_slash_stripped(self) -> None:
        settings = Settings(_env_file=None, API_PREFIX="/api/", UPLOAD_URL_PREFIX="/files/")
        self.assertEqual(settings.API_PREFIX, "/api")
        self.assertEqual(settings.UPLOAD_URL_PREFIX, "/files")

    def test_prefix_must_be_absolute(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, API_PREFIX="api")

    def test_max_upload_bytes_range(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, MAX_UPLOAD_BYTES=0)
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, MAX_UPLOAD_BYTES=101 * 1024 * 1024)

    def test_empty_jwt_secret(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET=SecretStr("  "))

    def test_jwt_expire_minutes_range(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_EXPIRE_MINUTES=0)

    def test_log_level_normalized(self) -> None:
        self.assertEqual(Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="chatty")


if __name__ == "__main__":
    unittest.main()
