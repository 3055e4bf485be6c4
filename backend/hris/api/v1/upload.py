from typing import Any

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from hris.api.deps import get_current_user, require_permission
from hris.core.rate_limiter import RateLimits, limiter
from hris.models.user import User
from hris.schemas.common import ApiResponse, ok
from hris.schemas.upload import UploadResult
from hris.services.upload_service import save_upload

router = APIRouter()


@router.post("/documents", response_model=ApiResponse[UploadResult])
@limiter.limit(RateLimits.FILE_UPLOAD)
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Store a document (attachments, employee files) and return its location."""
    content = await file.read()
    stored = await run_in_threadpool(save_upload, content, file.filename, "documents", file.content_type)
    return ok(stored, message="File uploaded")


@router.post("/templates", response_model=ApiResponse[UploadResult])
@limiter.limit(RateLimits.FILE_UPLOAD)
async def upload_template_file(
    request: Request,
    file: UploadFile = File(...),
    current_user: User = Depends(require_permission("template:manage")),
) -> Any:
    content = await file.read()
    stored = await run_in_threadpool(save_upload, content, file.filename, "templates", file.content_type)
    return ok(stored, message="Template file uploaded")
