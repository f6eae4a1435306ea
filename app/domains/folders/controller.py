"""Folder API controller with FastAPI endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, get_db, validate_token
from app.domains.files.controller import ROOT_FOLDER, parse_folder_id
from app.domains.folders.service import FolderService
from app.schemas.file import DeleteResponse
from app.schemas.folder import FolderCreate, FolderResponse
from models.user import User

router = APIRouter(
    prefix="/api/folders",
    tags=["folders"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


@router.get("", response_model=list[FolderResponse], include_in_schema=False)
@router.get("/", response_model=list[FolderResponse])
async def get_folders(
    parent_id: str | None = Query(None, alias="parentId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List folders.

    Without ``parentId`` every folder of the user is returned; ``root`` lists
    top-level folders and a folder id lists that folder's children.
    """
    service = FolderService(db)
    if parent_id is None:
        folders = await service.list_folders(current_user.id)
    elif parent_id == ROOT_FOLDER:
        folders = await service.list_child_folders(None, current_user.id)
    else:
        folders = await service.list_child_folders(parse_folder_id(parent_id), current_user.id)
    return [FolderResponse.model_validate(folder) for folder in folders]


@router.post("", response_model=FolderResponse, status_code=201, include_in_schema=False)
@router.post("/", response_model=FolderResponse, status_code=201)
async def create_folder(
    folder_data: FolderCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new folder."""
    service = FolderService(db)
    folder = await service.create_folder(folder_data, current_user.id)
    return FolderResponse.model_validate(folder)


@router.get("/{folder_id}", response_model=FolderResponse)
async def get_folder(
    folder_id: UUID = Path(..., description="Folder ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = FolderService(db)
    folder = await service.get_folder(folder_id, current_user.id)
    return FolderResponse.model_validate(folder)


@router.delete("/{folder_id}", response_model=DeleteResponse)
async def delete_folder(
    folder_id: UUID = Path(..., description="Folder ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a folder with its subfolders; its files become unfoldered."""
    service = FolderService(db)
    await service.delete_folder(folder_id, current_user.id)
    return DeleteResponse(success=True)
