"""Auto-organize endpoint."""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_current_user, get_organizer_service, validate_token
from app.domains.organizer.service import OrganizerService
from app.schemas.tagging import OrganizeResult
from models.user import User

router = APIRouter(
    prefix="/api",
    tags=["organizer"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


@router.post("/organize-files", response_model=OrganizeResult)
async def organize_files(
    current_user: User = Depends(get_current_user),
    service: OrganizerService = Depends(get_organizer_service),
):
    """Move every unfoldered file into its AI-suggested folder."""
    report = await service.organize_files(current_user.id)
    return OrganizeResult(
        success=True,
        folders_created=report.folders_created,
        files_moved=report.files_moved,
        message=report.message,
    )
