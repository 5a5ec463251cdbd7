"""Attachment upload and download endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from fastapi.responses import FileResponse

from ..config import Settings, get_settings
from ..core.schemas.files import StoredFile
from ..core.services import FileStorageService
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/files", tags=["files"])


def get_file_service(settings: Settings = Depends(get_settings)) -> FileStorageService:
    return FileStorageService.from_settings(settings)


@router.post("/upload", response_model=StoredFile, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(..., description="PDF attachment"),
    current_user_id: UUID = Depends(get_current_user_id),
    file_service: FileStorageService = Depends(get_file_service),
):
    """Upload a PDF to attach to a note."""
    content = await file_service.read_upload(file)
    return await file_service.store(content, file.filename or "", file.content_type or "")


@router.get("/download/{filename}")
async def download_file(
    filename: str,
    file_service: FileStorageService = Depends(get_file_service),
):
    """Download a stored PDF as an attachment."""
    path = file_service.resolve(filename)
    return FileResponse(
        path=str(path),
        media_type="application/pdf",
        filename=filename,
    )


@router.delete("/{filename}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    filename: str,
    current_user_id: UUID = Depends(get_current_user_id),
    file_service: FileStorageService = Depends(get_file_service),
):
    """Delete a stored file."""
    await file_service.delete(filename)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
