"""Folder service layer with business logic."""

import logging
from uuid import UUID

from sqlalchemy import and_, desc, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.base import UpstreamServiceError
from app.exceptions.file import FolderNotFoundError
from app.schemas.folder import FolderCreate
from models.file import File
from models.folder import Folder

logger = logging.getLogger(__name__)


class FolderService:
    """Service class for folder business logic. Every query is owner-scoped."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_folders(self, user_id: UUID) -> list[Folder]:
        """All folders of a user, newest first."""
        stmt = select(Folder).where(Folder.user_id == user_id).order_by(desc(Folder.created_at))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_child_folders(self, parent_id: UUID | None, user_id: UUID) -> list[Folder]:
        """Folders directly under ``parent_id``; top-level folders when it is None."""
        condition = Folder.parent_id == parent_id if parent_id else Folder.parent_id.is_(None)
        stmt = (
            select(Folder)
            .where(and_(condition, Folder.user_id == user_id))
            .order_by(desc(Folder.created_at))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_folder(self, folder_id: UUID, user_id: UUID) -> Folder:
        folder = await self._get_folder_by_id_and_user(folder_id, user_id)
        if not folder:
            raise FolderNotFoundError()
        return folder

    async def create_folder(
        self, folder_data: FolderCreate, user_id: UUID, commit: bool = True
    ) -> Folder:
        """Create a folder; a parent must exist and belong to the same user."""
        if folder_data.parent_id:
            await self.get_folder(folder_data.parent_id, user_id)

        folder = Folder(
            user_id=user_id,
            name=folder_data.name,
            parent_id=folder_data.parent_id,
            is_ai_generated=folder_data.is_ai_generated,
        )

        try:
            self.db.add(folder)
            if commit:
                await self.db.commit()
                await self.db.refresh(folder)
            else:
                await self.db.flush()
            return folder
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpstreamServiceError(f"Failed to create folder: {str(e)}") from e

    async def find_folder_by_name(self, name: str, user_id: UUID) -> Folder | None:
        """Case-insensitive exact name lookup."""
        stmt = (
            select(Folder)
            .where(and_(func.lower(Folder.name) == name.lower(), Folder.user_id == user_id))
            .order_by(Folder.created_at)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_ai_folder(self, name: str, user_id: UUID) -> tuple[Folder, bool]:
        """Reuse a folder named ``name`` (any case) or create an AI-generated one.

        Returns the folder and whether it was created.
        """
        existing = await self.find_folder_by_name(name, user_id)
        if existing:
            return existing, False

        folder = await self.create_folder(
            FolderCreate(name=name, is_ai_generated=True), user_id=user_id
        )
        logger.info(f"Created new AI folder: {name}")
        return folder, True

    async def delete_folder(self, folder_id: UUID, user_id: UUID) -> bool:
        """Delete a folder and its descendants; contained files become unfoldered."""
        folder = await self.get_folder(folder_id, user_id)

        try:
            folder_ids = await self._collect_descendant_ids(folder.id, user_id)
            await self.db.execute(
                update(File)
                .where(and_(File.folder_id.in_(folder_ids), File.user_id == user_id))
                .values(folder_id=None)
            )
            # Children first so parent references never dangle
            for descendant_id in reversed(folder_ids):
                descendant = await self._get_folder_by_id_and_user(descendant_id, user_id)
                if descendant:
                    await self.db.delete(descendant)
                    await self.db.flush()
            await self.db.commit()
            return True
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UpstreamServiceError(f"Failed to delete folder: {str(e)}") from e

    # Private helper methods
    async def _get_folder_by_id_and_user(self, folder_id: UUID, user_id: UUID) -> Folder | None:
        stmt = select(Folder).where(and_(Folder.id == folder_id, Folder.user_id == user_id))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _collect_descendant_ids(self, root_id: UUID, user_id: UUID) -> list[UUID]:
        """Breadth-first list of ``root_id`` and every folder beneath it."""
        collected = [root_id]
        frontier = [root_id]
        while frontier:
            stmt = select(Folder.id).where(
                and_(Folder.parent_id.in_(frontier), Folder.user_id == user_id)
            )
            result = await self.db.execute(stmt)
            frontier = [child_id for child_id in result.scalars().all() if child_id not in collected]
            collected.extend(frontier)
        return collected
