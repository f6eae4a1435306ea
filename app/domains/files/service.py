"""File service layer with business logic."""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import and_, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.domains.files.matcher import find_similar_files, match_reason
from app.domains.folders.service import FolderService
from app.domains.tagging.service import TaggingService
from app.exceptions.base import UpstreamServiceError
from app.exceptions.file import (
    EmptyUploadError,
    FileRecordNotFoundError,
    FileTooLargeError,
    TooManyFilesError,
)
from app.schemas.file import SearchParams
from app.services.object_storage import ObjectStorageService, StoredObject
from models.file import File

logger = logging.getLogger(__name__)

PREVIEW_MIME_TYPES = ("application/json",)
PREVIEW_CHAR_LIMIT = 1000


@dataclass
class IncomingFile:
    """An uploaded file read fully into memory."""

    file_name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class SimilarFilesResult:
    source_file: File
    updated_files: list[File]
    similar_files_found: int

    @property
    def count(self) -> int:
        return len(self.updated_files)


def content_preview(incoming: IncomingFile) -> str | None:
    """Leading text of text-like uploads, for the tagger."""
    mime = (incoming.mime_type or "").lower()
    if not (mime.startswith("text/") or mime in PREVIEW_MIME_TYPES):
        return None
    return incoming.data[: PREVIEW_CHAR_LIMIT * 4].decode("utf-8", errors="ignore")[:PREVIEW_CHAR_LIMIT]


class FileService:
    """Service class for file business logic. Every query is owner-scoped."""

    def __init__(
        self,
        db: AsyncSession,
        storage: ObjectStorageService,
        tagger: TaggingService,
    ):
        self.db = db
        self.storage = storage
        self.tagger = tagger
        self.folders = FolderService(db)

    # ===== Queries =====
    async def list_files(self, user_id: UUID) -> list[File]:
        """All files of a user, newest first."""
        stmt = select(File).where(File.user_id == user_id).order_by(desc(File.uploaded_at))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_files_in_folder(self, folder_id: UUID | None, user_id: UUID) -> list[File]:
        """Files in ``folder_id``; unfoldered files when it is None."""
        condition = File.folder_id == folder_id if folder_id else File.folder_id.is_(None)
        stmt = (
            select(File)
            .where(and_(condition, File.user_id == user_id))
            .order_by(desc(File.uploaded_at))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_file(self, file_id: UUID, user_id: UUID) -> File:
        file = await self._get_file_by_id_and_user(file_id, user_id)
        if not file:
            raise FileRecordNotFoundError()
        return file

    async def get_file_url(self, file_id: UUID, user_id: UUID) -> str:
        file = await self.get_file(file_id, user_id)
        return await self.storage.get_file_url(file.storage_path)

    async def get_storage_usage(self, user_id: UUID) -> dict[str, int]:
        """Total bytes stored by the user against the fixed quota."""
        files = await self.list_files(user_id)
        used = sum(file.file_size or 0 for file in files)
        return {"used": used, "total": settings.storage_quota_bytes}

    async def search_files(self, user_id: UUID, params: SearchParams) -> list[File]:
        """Filter the user's files; all given filters must match.

        ``q`` is a case-insensitive substring of the original name, display
        name or any tag; ``tag`` is a case-insensitive exact tag; ``type`` is a
        case-insensitive substring of the MIME type.
        """
        files = await self.list_files(user_id)

        if params.q:
            query = params.q.lower()
            files = [
                file
                for file in files
                if query in (file.original_name or "").lower()
                or query in (file.display_name or "").lower()
                or any(query in tag.lower() for tag in file.tags or [])
            ]

        if params.tag:
            tag = params.tag.lower()
            files = [file for file in files if any(t.lower() == tag for t in file.tags or [])]

        if params.type:
            file_type = params.type.lower()
            files = [file for file in files if file_type in (file.file_type or "").lower()]

        return files

    # ===== Uploads =====
    def validate_upload(self, incoming: IncomingFile) -> None:
        if not incoming.file_name:
            raise EmptyUploadError()
        if incoming.size > settings.max_file_size:
            raise FileTooLargeError(incoming.file_name, settings.max_file_size)

    def validate_batch_size(self, count: int) -> None:
        if not count:
            raise EmptyUploadError("No files provided")
        if count > settings.max_files_per_upload:
            raise TooManyFilesError(count, settings.max_files_per_upload)

    async def upload_file(
        self, incoming: IncomingFile, user_id: UUID, folder_id: UUID | None = None
    ) -> File:
        """Store bytes, tag them, pick a folder (unless one is given) and create the record."""
        self.validate_upload(incoming)
        if folder_id:
            await self.folders.get_folder(folder_id, user_id)
        return await self._store_and_record(incoming, user_id, folder_id)

    async def upload_files(
        self, incoming_files: list[IncomingFile], user_id: UUID, folder_id: UUID | None = None
    ) -> list[File]:
        """Upload several files one after another; failed files are logged and skipped."""
        self.validate_batch_size(len(incoming_files))
        for incoming in incoming_files:
            self.validate_upload(incoming)
        if folder_id:
            await self.folders.get_folder(folder_id, user_id)

        uploaded: list[File] = []
        failures = 0
        for incoming in incoming_files:
            try:
                uploaded.append(await self._store_and_record(incoming, user_id, folder_id))
            except Exception as e:
                failures += 1
                logger.error(f"Failed to upload {incoming.file_name}: {str(e)}")

        if failures:
            # a rollback expires every instance loaded in this session
            for file in uploaded:
                await self.db.refresh(file)

        logger.info(f"Successfully uploaded {len(uploaded)} of {len(incoming_files)} files")
        return uploaded

    async def _store_and_record(
        self, incoming: IncomingFile, user_id: UUID, folder_id: UUID | None
    ) -> File:
        stored = await self.storage.upload_file(incoming.data, incoming.file_name, incoming.mime_type)
        try:
            return await self._tag_and_record(incoming, stored, user_id, folder_id)
        except Exception:
            # No record points at the object; remove it
            await self.storage.delete_file(stored.path)
            raise

    async def _tag_and_record(
        self, incoming: IncomingFile, stored: StoredObject, user_id: UUID, folder_id: UUID | None
    ) -> File:
        tagging = await self.tagger.generate_file_tags(
            incoming.file_name, incoming.mime_type, content_preview(incoming)
        )

        target_folder_id = folder_id
        if not folder_id and tagging.suggested_folder_name:
            folder, _ = await self.folders.get_or_create_ai_folder(
                tagging.suggested_folder_name, user_id
            )
            target_folder_id = folder.id

        file = File(
            original_name=incoming.file_name,
            display_name=tagging.suggested_file_name or incoming.file_name,
            file_type=incoming.mime_type,
            file_size=incoming.size,
            storage_path=stored.path,
            user_id=user_id,
            tags=tagging.tags,
            ai_generated=True,
            folder_id=target_folder_id,
            file_metadata={
                "url": stored.url,
                "confidence": tagging.confidence,
                "suggestedFolderName": tagging.suggested_folder_name,
            },
        )

        try:
            self.db.add(file)
            await self.db.commit()
            await self.db.refresh(file)
            return file
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpstreamServiceError(f"Failed to create file: {str(e)}") from e

    # ===== Updates =====
    async def update_tags(self, file_id: UUID, tags: list[str], user_id: UUID) -> File:
        """Replace the file's tag set."""
        file = await self.get_file(file_id, user_id)
        file.tags = list(tags)
        return await self._commit_file(file, "update tags")

    async def reprocess_file(self, file_id: UUID, user_id: UUID) -> File:
        """Re-run tagging on the stored name and type."""
        file = await self.get_file(file_id, user_id)
        tagging = await self.tagger.generate_file_tags(file.original_name, file.file_type)

        file.tags = tagging.tags
        file.display_name = tagging.suggested_file_name or file.display_name
        file.file_metadata = {
            **(file.file_metadata if isinstance(file.file_metadata, dict) else {}),
            "confidence": tagging.confidence,
            "suggestedFolderName": tagging.suggested_folder_name,
        }
        return await self._commit_file(file, "reprocess file")

    async def apply_tags_to_similar(self, file_id: UUID, user_id: UUID) -> SimilarFilesResult:
        """Copy the source file's tags onto every similar file (full replace)."""
        source = await self.get_file(file_id, user_id)
        source_tags = list(source.tags or [])
        logger.info(
            f"Applying tags from source file: {source.original_name} ({source.file_type}) {source_tags}"
        )

        all_files = await self.list_files(user_id)
        similar_files = find_similar_files(source, all_files)
        for file in similar_files:
            logger.debug(
                f"Found similar file: {file.original_name} ({file.file_type}) - "
                f"Reason: {match_reason(source, file).value}"
            )
        logger.info(f"Found {len(similar_files)} similar files to update")

        # Capture identities up front; a rollback expires every loaded instance
        targets = [(file, file.id, file.original_name) for file in similar_files]
        updated_files: list[File] = []
        failures = 0
        for file, target_id, target_name in targets:
            try:
                file.tags = list(source_tags)
                await self.db.commit()
                await self.db.refresh(file)
                updated_files.append(file)
            except Exception as e:
                failures += 1
                await self.db.rollback()
                logger.error(f"Failed to update file {target_id} ({target_name}): {str(e)}")

        if failures:
            await self.db.refresh(source)
            for file in updated_files:
                await self.db.refresh(file)

        logger.info(f"Successfully updated {len(updated_files)} files with tags: {source_tags}")
        return SimilarFilesResult(
            source_file=source,
            updated_files=updated_files,
            similar_files_found=len(similar_files),
        )

    # ===== Deletion =====
    async def delete_file(self, file_id: UUID, user_id: UUID) -> bool:
        """Delete the stored bytes first, then the record."""
        file = await self.get_file(file_id, user_id)

        if not await self.storage.delete_file(file.storage_path):
            logger.warning(f"Object for file {file.id} was not removed from storage: {file.storage_path}")

        try:
            await self.db.delete(file)
            await self.db.commit()
            return True
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpstreamServiceError(f"Failed to delete file: {str(e)}") from e

    # Private helper methods
    async def _get_file_by_id_and_user(self, file_id: UUID, user_id: UUID) -> File | None:
        stmt = select(File).where(and_(File.id == file_id, File.user_id == user_id))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _commit_file(self, file: File, action: str) -> File:
        try:
            await self.db.commit()
            await self.db.refresh(file)
            return file
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpstreamServiceError(f"Failed to {action}: {str(e)}") from e
