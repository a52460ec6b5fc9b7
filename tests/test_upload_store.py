"""Unit tests for app.services.upload_store: allow-list, naming, streamed saves, size ceiling."""

import asyncio
import io
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi import UploadFile
from starlette.datastructures import Headers

from app.services.upload_store import (
    UploadStore,
    UploadStoreError,
    UploadTooLargeError,
    UploadValidationError,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(
    data: bytes = PNG_BYTES,
    filename: str = "photo.png",
    content_type: str = "image/png",
    declare_size: bool = True,
) -> UploadFile:
    """Build an UploadFile the way Starlette does for a multipart part."""
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        size=len(data) if declare_size else None,
        headers=Headers({"content-type": content_type}),
    )


class UploadStoreTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.upload_dir = Path(tmp.name) / "uploads"
        self.store = UploadStore(self.upload_dir, url_prefix="/uploads", max_bytes=1024)

    def _stored_names(self) -> list[str]:
        if not self.upload_dir.exists():
            return []
        return sorted(p.name for p in self.upload_dir.iterdir())


class TestValidate(UploadStoreTestCase):
    """validate requires both an allowed extension and an allowed content type."""

    def test_allowed_combinations(self) -> None:
        for filename, content_type in (
            ("a.jpg", "image/jpeg"),
            ("a.JPEG", "image/jpeg"),
            ("a.png", "image/png"),
            ("a.gif", "image/gif"),
            ("cv.pdf", "application/pdf"),
            ("cv.doc", "application/msword"),
            (
                "cv.docx",
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            ),
        ):
            with self.subTest(filename=filename):
                self.store.validate(filename, content_type)

    def test_exe_rejected_regardless_of_content_type(self) -> None:
        for content_type in ("image/png", "application/pdf", "application/octet-stream", ""):
            with self.subTest(content_type=content_type):
                with self.assertRaises(UploadValidationError):
                    self.store.validate("setup.exe", content_type)

    def test_allowed_extension_with_disallowed_type(self) -> None:
        with self.assertRaises(UploadValidationError) as ctx:
            self.store.validate("photo.png", "text/html")
        self.assertEqual(ctx.exception.message, "Only images and documents are allowed")

    def test_content_type_parameters_ignored(self) -> None:
        self.store.validate("cv.pdf", "application/pdf; charset=binary")

    def test_no_extension(self) -> None:
        with self.assertRaises(UploadValidationError):
            self.store.validate("README", "application/pdf")

    def test_missing_filename(self) -> None:
        with self.assertRaises(UploadValidationError) as ctx:
            self.store.validate("", "image/png")
        self.assertEqual(ctx.exception.message, "No file uploaded")


class TestGenerateFilename(UploadStoreTestCase):
    """generate_filename keeps the lower-cased extension and adds time + random parts."""

    def test_format(self) -> None:
        name = self.store.generate_filename("My Photo.PNG")
        self.assertRegex(name, r"^file-\d{13}-\d{1,9}\.png$")

    def test_distinct(self) -> None:
        names = {self.store.generate_filename("a.png") for _ in range(50)}
        self.assertEqual(len(names), 50)


class TestSave(UploadStoreTestCase):
    """save streams to disk and returns the public URL."""

    def test_saves_file(self) -> None:
        stored = asyncio.run(self.store.save(_upload()))
        self.assertEqual(stored.original_name, "photo.png")
        self.assertEqual(stored.content_type, "image/png")
        self.assertEqual(stored.size, len(PNG_BYTES))
        self.assertEqual(stored.url, f"/uploads/{stored.filename}")
        self.assertEqual((self.upload_dir / stored.filename).read_bytes(), PNG_BYTES)

    def test_same_original_name_stored_twice(self) -> None:
        first = asyncio.run(self.store.save(_upload(data=b"first")))
        second = asyncio.run(self.store.save(_upload(data=b"second")))
        self.assertNotEqual(first.filename, second.filename)
        self.assertEqual((self.upload_dir / first.filename).read_bytes(), b"first")
        self.assertEqual((self.upload_dir / second.filename).read_bytes(), b"second")

    def test_name_collision_retries(self) -> None:
        self.upload_dir.mkdir(parents=True)
        (self.upload_dir / "file-1-1.png").write_bytes(b"existing")
        with patch.object(
            self.store,
            "generate_filename",
            side_effect=["file-1-1.png", "file-1-2.png"],
        ):
            stored = asyncio.run(self.store.save(_upload()))
        self.assertEqual(stored.filename, "file-1-2.png")
        self.assertEqual((self.upload_dir / "file-1-1.png").read_bytes(), b"existing")

    def test_rejected_type_touches_nothing(self) -> None:
        with self.assertRaises(UploadValidationError):
            asyncio.run(self.store.save(_upload(filename="virus.exe", content_type="image/png")))
        self.assertEqual(self._stored_names(), [])

    def test_declared_size_over_ceiling(self) -> None:
        with self.assertRaises(UploadTooLargeError):
            asyncio.run(self.store.save(_upload(data=b"x" * 2048)))
        self.assertEqual(self._stored_names(), [])

    def test_streamed_size_over_ceiling_leaves_no_partial_file(self) -> None:
        with self.assertRaises(UploadTooLargeError) as ctx:
            asyncio.run(self.store.save(_upload(data=b"x" * 2048, declare_size=False)))
        self.assertIn("must not exceed", ctx.exception.message)
        self.assertEqual(self._stored_names(), [])

    def test_exactly_at_ceiling_accepted(self) -> None:
        stored = asyncio.run(self.store.save(_upload(data=b"x" * 1024, declare_size=False)))
        self.assertEqual(stored.size, 1024)

    def test_unwritable_directory(self) -> None:
        with patch("app.services.upload_store.os.open", side_effect=PermissionError("denied")):
            with self.assertLogs("app.services.upload_store", level="ERROR"):
                with self.assertRaises(UploadStoreError) as ctx:
                    asyncio.run(self.store.save(_upload()))
        self.assertEqual(ctx.exception.message, "Upload failed")

    def test_default_ceiling_is_10_mb(self) -> None:
        store = UploadStore(self.upload_dir)
        self.assertEqual(store.max_bytes, 10 * 1024 * 1024)
        self.assertIn("10 MB", UploadTooLargeError(store.max_bytes).message)


if __name__ == "__main__":
    unittest.main()
