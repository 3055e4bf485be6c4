from pydantic import BaseModel


class UploadResult(BaseModel):
    file_path: str
    file_name: str
    file_size: int
    mime_type: str
