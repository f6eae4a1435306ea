"""Auto-organizer: routes unfoldered files into AI-suggested folders."""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.files.service import FileService
from app.domains.folders.service import FolderService
from app.domains.tagging.service import TaggingService

logger = logging.getLogger(__name__)


@dataclass
class OrganizeReport:
    folders_created: int = 0
    files_moved: int = 0

    @property
    def message(self) -> str:
        return f"Organized {self.files_moved} files into {self.folders_created} new folders"


class OrganizerService:
    """Re-tags every unfoldered file and moves it into the suggested folder.

    Files are processed sequentially. A failure on one file is logged and the
    loop moves on; the report counts successes only.
    """

    def __init__(self, db: AsyncSession, files: FileService, tagger: TaggingService):
        self.db = db
        self.files = files
        self.tagger = tagger
        self.folders = FolderService(db)

    async def organize_files(self, user_id: UUID) -> OrganizeReport:
        report = OrganizeReport()

        unfoldered = await self.files.list_files_in_folder(None, user_id)
        # Capture plain values; a rollback after a failure expires loaded instances
        pending = [(file.id, file.original_name, file.file_type) for file in unfoldered]

        for file_id, file_name, file_type in pending:
            try:
                tagging = await self.tagger.generate_file_tags(file_name, file_type)
                if not tagging.suggested_folder_name:
                    continue

                folder, created = await self.folders.get_or_create_ai_folder(
                    tagging.suggested_folder_name, user_id
                )
                if created:
                    report.folders_created += 1

                file = await self.files.get_file(file_id, user_id)
                file.folder_id = folder.id
                file.tags = tagging.tags
                await self.db.commit()
                report.files_moved += 1
                logger.info(f"Moved {file_name} to {folder.name}")
            except Exception as e:
                await self.db.rollback()
                logger.error(f"Failed to organize file {file_id} ({file_name}): {str(e)}")

        logger.info(report.message)
        return report
