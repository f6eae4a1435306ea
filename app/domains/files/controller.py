"""File API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile

from app.core.config import settings
from app.core.dependencies import get_current_user, get_file_service, validate_token
from app.domains.files.service import FileService, IncomingFile
from app.exceptions.base import ValidationError
from app.exceptions.file import EmptyUploadError, FileTooLargeError
from app.schemas.file import (
    ApplyToSimilarResponse,
    DeleteResponse,
    FileResponse,
    FileUrlResponse,
    TagsUpdate,
)
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/files",
    tags=["files"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)

ROOT_FOLDER = "root"


def parse_folder_id(value: str | None) -> UUID | None:
    """``root``, blank or absent mean "no folder"; anything else must be a UUID."""
    if not value or value == ROOT_FOLDER:
        return None
    try:
        return UUID(value)
    except ValueError as e:
        raise ValidationError("Invalid folder id", details={"folderId": value}) from e


async def read_upload(upload: UploadFile) -> IncomingFile:
    """Read an upload into memory, refusing anything over ``max_file_size``."""
    file_name = upload.filename or ""
    limit = settings.max_file_size
    if upload.size is not None and upload.size > limit:
        raise FileTooLargeError(file_name, limit)

    # Never buffer more than one byte past the limit
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise FileTooLargeError(file_name, limit)

    return IncomingFile(
        file_name=file_name,
        mime_type=upload.content_type or "application/octet-stream",
        data=data,
    )


@router.get("", response_model=list[FileResponse], include_in_schema=False)
@router.get("/", response_model=list[FileResponse])
async def get_files(
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Get all files of the current user, newest first."""
    files = await service.list_files(current_user.id)
    return [FileResponse.model_validate(file) for file in files]


@router.get("/folder", response_model=list[FileResponse])
@router.get("/folder/{folder_id}", response_model=list[FileResponse])
async def get_files_in_folder(
    folder_id: str | None = None,
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Get files in a folder; ``root`` or no id returns unfoldered files."""
    files = await service.list_files_in_folder(parse_folder_id(folder_id), current_user.id)
    return [FileResponse.model_validate(file) for file in files]


@router.post("/upload", response_model=FileResponse, status_code=201)
async def upload_file(
    file: UploadFile | None = File(None),
    folder_id: str | None = Form(None, alias="folderId"),
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Upload one file; it is tagged and filed automatically unless a folder is given."""
    if file is None:
        raise EmptyUploadError()

    incoming = await read_upload(file)
    created = await service.upload_file(incoming, current_user.id, parse_folder_id(folder_id))
    return FileResponse.model_validate(created)


@router.post("/upload-multiple", response_model=list[FileResponse], status_code=201)
async def upload_multiple_files(
    files: list[UploadFile] | None = File(None),
    folder_id: str | None = Form(None, alias="folderId"),
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Upload several files; files that fail are skipped."""
    uploads = files or []
    service.validate_batch_size(len(uploads))
    incoming_files = [await read_upload(upload) for upload in uploads]
    created = await service.upload_files(incoming_files, current_user.id, parse_folder_id(folder_id))
    return [FileResponse.model_validate(file) for file in created]


@router.patch("/{file_id}/tags", response_model=FileResponse)
async def update_file_tags(
    tags_data: TagsUpdate,
    file_id: UUID = Path(..., description="File ID"),
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Replace the tags of a file."""
    file = await service.update_tags(file_id, tags_data.tags, current_user.id)
    return FileResponse.model_validate(file)


@router.post("/{file_id}/reprocess", response_model=FileResponse)
async def reprocess_file(
    file_id: UUID = Path(..., description="File ID"),
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Re-run tagging for a file."""
    file = await service.reprocess_file(file_id, current_user.id)
    return FileResponse.model_validate(file)


@router.post("/{file_id}/apply-to-similar", response_model=ApplyToSimilarResponse)
async def apply_tags_to_similar(
    file_id: UUID = Path(..., description="File ID"),
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Copy a file's tags onto every similar file."""
    result = await service.apply_tags_to_similar(file_id, current_user.id)
    return ApplyToSimilarResponse(
        source_file=FileResponse.model_validate(result.source_file),
        updated_files=[FileResponse.model_validate(file) for file in result.updated_files],
        count=result.count,
        similar_files_found=result.similar_files_found,
    )


@router.get("/{file_id}/url", response_model=FileUrlResponse)
async def get_file_url(
    file_id: UUID = Path(..., description="File ID"),
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    url = await service.get_file_url(file_id, current_user.id)
    return FileUrlResponse(url=url)


@router.delete("/{file_id}", response_model=DeleteResponse)
async def delete_file(
    file_id: UUID = Path(..., description="File ID"),
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Delete a file and its stored bytes."""
    await service.delete_file(file_id, current_user.id)
    logger.info(f"Deleted file {file_id} for user {current_user.id}")
    return DeleteResponse(success=True)
