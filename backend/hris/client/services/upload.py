from typing import Optional

from hris.client.services.base import BaseService, unwrap


class UploadService(BaseService):
    async def _upload(self, path: str, filename: str, content: bytes, content_type: Optional[str]) -> dict:
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        return unwrap(await self.api.post(path, files=files))

    async def upload_document(self, filename: str, content: bytes, content_type: Optional[str] = None) -> dict:
        """Returns ``{file_path, file_name, file_size, mime_type}``."""
        return await self._upload("/upload/documents", filename, content, content_type)

    async def upload_template(self, filename: str, content: bytes, content_type: Optional[str] = None) -> dict:
        return await self._upload("/upload/templates", filename, content, content_type)
