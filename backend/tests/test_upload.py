"""
Tests for hris/services/upload_service.py - file name sanitizing and storage.
"""
import pytest


class TestSanitizeFilename:
    """User supplied names never escape the upload directory."""

    def test_strips_directories(self):
        from hris.services.upload_service import sanitize_filename

        assert sanitize_filename("../../etc/passwd.pdf") == "passwd.pdf"

    def test_replaces_unsafe_characters(self):
        from hris.services.upload_service import sanitize_filename

        assert sanitize_filename("kontrak kerja (final)!.pdf") == "kontrak_kerja_final_.pdf"

    def test_removes_leading_dots(self):
        from hris.services.upload_service import sanitize_filename

        assert sanitize_filename(".hidden.png") == "hidden.png"

    def test_empty_name_gets_placeholder(self):
        from hris.services.upload_service import sanitize_filename

        assert sanitize_filename(None).startswith("unnamed_")
        assert sanitize_filename("").startswith("unnamed_")

    def test_long_name_keeps_extension(self):
        from hris.services.upload_service import sanitize_filename

        result = sanitize_filename("a" * 300 + ".docx")

        assert len(result) == 200
        assert result.endswith(".docx")


class TestGuessMimeType:
    def test_declared_type_wins(self):
        from hris.services.upload_service import guess_mime_type

        assert guess_mime_type("file.pdf", "application/x-custom") == "application/x-custom"

    def test_octet_stream_falls_back_to_extension(self):
        from hris.services.upload_service import guess_mime_type

        assert guess_mime_type("slip.PDF", "application/octet-stream") == "application/pdf"
        assert guess_mime_type("photo.jpeg") == "image/jpeg"


class TestSaveUpload:
    """Validate and store uploads under the upload directory."""

    def test_stores_file(self, tmp_path):
        from hris.services.upload_service import save_upload

        result = save_upload(b"%PDF-1.4", "Offer Letter.pdf", "documents", upload_dir=tmp_path)

        stored = tmp_path / "documents"
        files = list(stored.iterdir())
        assert len(files) == 1
        assert files[0].read_bytes() == b"%PDF-1.4"
        assert files[0].name.endswith("_Offer_Letter.pdf")
        assert result["file_name"] == "Offer_Letter.pdf"
        assert result["file_size"] == 8
        assert result["mime_type"] == "application/pdf"
        assert result["file_path"] == str(files[0])

    def test_rejects_unknown_kind(self, tmp_path):
        from hris.services.upload_service import UploadError, save_upload

        with pytest.raises(UploadError):
            save_upload(b"data", "a.pdf", "avatars", upload_dir=tmp_path)

    def test_rejects_disallowed_extension(self, tmp_path):
        from hris.services.upload_service import UploadError, save_upload

        with pytest.raises(UploadError) as exc_info:
            save_upload(b"MZ", "setup.exe", upload_dir=tmp_path)

        assert exc_info.value.code == "UNSUPPORTED_FILE_TYPE"
        assert exc_info.value.status_code == 400

    def test_rejects_empty_file(self, tmp_path):
        from hris.services.upload_service import UploadError, save_upload

        with pytest.raises(UploadError) as exc_info:
            save_upload(b"", "empty.pdf", upload_dir=tmp_path)

        assert exc_info.value.code == "EMPTY_FILE"

    def test_rejects_oversized_file(self, tmp_path, monkeypatch):
        from hris.core.config import settings
        from hris.services.upload_service import UploadError, save_upload

        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 1)

        with pytest.raises(UploadError) as exc_info:
            save_upload(b"x" * (1024 * 1024 + 1), "big.pdf", upload_dir=tmp_path)

        assert exc_info.value.code == "FILE_TOO_LARGE"
