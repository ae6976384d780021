"""Unit tests for the upload service."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import io

import pytest
from fastapi import UploadFile
from app.services.upload_service import save_upload, photo_filename, screenshot_filename


def make_upload(name="foto.jpg", content=b"\xff\xd8jpeg-bytes"):
    return UploadFile(file=io.BytesIO(content), filename=name)


class TestUploadService:
    @pytest.mark.asyncio
    async def test_photo_saved_with_timestamp_prefix(self, tmp_path):
        filename = await save_upload(make_upload(), naming=photo_filename, upload_dir=str(tmp_path))

        assert filename.endswith("-foto.jpg")
        assert filename.split("-", 1)[0].isdigit()
        assert (tmp_path / filename).read_bytes() == b"\xff\xd8jpeg-bytes"

    @pytest.mark.asyncio
    async def test_screenshot_keeps_only_extension(self, tmp_path):
        filename = await save_upload(make_upload("captura pantalla.png"), naming=screenshot_filename,
                                     upload_dir=str(tmp_path))

        assert filename.startswith("reporte_")
        assert filename.endswith(".png")
        assert " " not in filename

    @pytest.mark.asyncio
    async def test_no_file_returns_none(self, tmp_path):
        assert await save_upload(None, upload_dir=str(tmp_path)) is None
        assert list(tmp_path.iterdir()) == []

    def test_photo_name_drops_client_directories(self):
        assert photo_filename("../../etc/passwd").endswith("-passwd")
