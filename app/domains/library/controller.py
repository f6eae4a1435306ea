"""Library-wide endpoints: search and storage usage."""

from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_current_user, get_file_service, validate_token
from app.domains.files.service import FileService
from app.schemas.file import FileResponse, SearchParams, StorageUsageResponse
from models.user import User

router = APIRouter(
    prefix="/api",
    tags=["library"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


@router.get("/storage-usage", response_model=StorageUsageResponse)
async def get_storage_usage(
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Bytes used by the current user and the fixed quota."""
    usage = await service.get_storage_usage(current_user.id)
    return StorageUsageResponse(**usage)


@router.get("/search", response_model=list[FileResponse])
async def search_files(
    q: str | None = Query(None, description="Substring of a name or tag"),
    tag: str | None = Query(None, description="Exact tag"),
    type: str | None = Query(None, description="Substring of the MIME type"),
    current_user: User = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    """Search the current user's files; given filters combine with AND."""
    params = SearchParams(q=q, tag=tag, type=type)
    files = await service.search_files(current_user.id, params)
    return [FileResponse.model_validate(file) for file in files]
