"""
Unit tests for OrganizerService.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select

from app.domains.files.service import FileService
from app.domains.organizer.service import OrganizerService
from app.schemas.tagging import FileTagging
from models import File, Folder

from factories import FolderFactory, create_files, persist


def scripted_tagger(replies: dict[str, FileTagging | Exception]):
    """Tagger double answering by file name."""
    tagger = MagicMock()

    async def generate_file_tags(file_name, file_type, file_content=None):
        reply = replies[file_name]
        if isinstance(reply, Exception):
            raise reply
        return reply

    tagger.generate_file_tags = AsyncMock(side_effect=generate_file_tags)
    return tagger


def tagging(folder: str | None, *tags: str) -> FileTagging:
    return FileTagging(tags=list(tags) or ["misc"], suggested_folder_name=folder, confidence=0.9)


@pytest.fixture
def make_organizer(test_db, mock_storage):
    def _make(tagger) -> OrganizerService:
        files = FileService(test_db, storage=mock_storage, tagger=tagger)
        return OrganizerService(test_db, files=files, tagger=tagger)

    return _make


async def folder_names(test_db) -> list[str]:
    return list((await test_db.execute(select(Folder.name))).scalars().all())


class TestOrganizerService:
    """Test cases for OrganizerService."""

    @pytest.mark.asyncio
    async def test_organize_three_files_into_two_folders(self, test_db, test_user, make_organizer):
        user_id = test_user.id
        created = await create_files(
            test_db,
            user_id,
            [
                ("invoice_jan.pdf", "application/pdf"),
                ("invoice_feb.pdf", "application/pdf"),
                ("beach.jpg", "image/jpeg"),
            ],
            tags=["old"],
        )
        tagger = scripted_tagger(
            {
                "invoice_jan.pdf": tagging("Invoices", "finance", "invoice"),
                "invoice_feb.pdf": tagging("Invoices", "finance", "invoice"),
                "beach.jpg": tagging("Photos", "photo"),
            }
        )

        report = await make_organizer(tagger).organize_files(user_id)

        assert report.folders_created == 2
        assert report.files_moved == 3
        assert report.message == "Organized 3 files into 2 new folders"
        assert sorted(await folder_names(test_db)) == ["Invoices", "Photos"]

        rows = await test_db.execute(select(File.id, File.folder_id, File.tags))
        by_id = {row.id: row for row in rows.all()}
        assert by_id[created[0].id].folder_id == by_id[created[1].id].folder_id
        assert by_id[created[2].id].folder_id is not None
        assert by_id[created[2].id].tags == ["photo"]

    @pytest.mark.asyncio
    async def test_fallback_rules_end_to_end(self, test_db, test_user, make_organizer, fallback_tagger):
        user_id = test_user.id
        await create_files(
            test_db,
            user_id,
            [
                ("invoice_jan.pdf", "application/pdf"),
                ("receipt_feb.pdf", "application/pdf"),
                ("holiday_photo.jpg", "image/jpeg"),
            ],
        )

        report = await make_organizer(fallback_tagger).organize_files(user_id)

        assert report.folders_created == 2
        assert report.files_moved == 3
        assert sorted(await folder_names(test_db)) == ["Financial Documents", "Photos"]

    @pytest.mark.asyncio
    async def test_no_duplicate_folder_names_in_one_run(self, test_db, test_user, make_organizer):
        user_id = test_user.id
        await create_files(
            test_db,
            user_id,
            [("a.pdf", "application/pdf"), ("b.pdf", "application/pdf"), ("c.pdf", "application/pdf")],
        )
        tagger = scripted_tagger(
            {
                "a.pdf": tagging("Invoices"),
                "b.pdf": tagging("INVOICES"),
                "c.pdf": tagging("invoices"),
            }
        )

        report = await make_organizer(tagger).organize_files(user_id)

        assert report.folders_created == 1
        assert report.files_moved == 3
        counts = await test_db.execute(
            select(func.lower(Folder.name), func.count()).group_by(func.lower(Folder.name))
        )
        assert all(count == 1 for _, count in counts.all())

    @pytest.mark.asyncio
    async def test_reuses_existing_folder(self, test_db, test_user, make_organizer):
        user_id = test_user.id
        existing = await persist(test_db, FolderFactory.build(user_id=user_id, name="invoices"))
        existing_id = existing.id
        (file,) = await create_files(test_db, user_id, [("a.pdf", "application/pdf")])
        file_id = file.id

        report = await make_organizer(scripted_tagger({"a.pdf": tagging("Invoices")})).organize_files(
            user_id
        )

        assert report.folders_created == 0
        assert report.files_moved == 1
        moved = await test_db.execute(select(File.folder_id).where(File.id == file_id))
        assert moved.scalar_one() == existing_id

    @pytest.mark.asyncio
    async def test_files_without_suggestion_stay_put(self, test_db, test_user, make_organizer):
        user_id = test_user.id
        (file,) = await create_files(test_db, user_id, [("x.bin", "application/octet-stream")], tags=["keep"])
        file_id = file.id

        report = await make_organizer(scripted_tagger({"x.bin": tagging(None, "other")})).organize_files(
            user_id
        )

        assert report.files_moved == 0
        assert report.folders_created == 0
        row = (await test_db.execute(select(File.folder_id, File.tags).where(File.id == file_id))).one()
        assert row.folder_id is None
        assert row.tags == ["keep"]

    @pytest.mark.asyncio
    async def test_only_unfoldered_files_are_processed(self, test_db, test_user, test_folder, make_organizer):
        user_id, folder_id = test_user.id, test_folder.id
        await create_files(test_db, user_id, [("inside.pdf", "application/pdf")], folder_id=folder_id)
        await create_files(test_db, user_id, [("outside.pdf", "application/pdf")])
        tagger = scripted_tagger({"outside.pdf": tagging("Invoices")})

        report = await make_organizer(tagger).organize_files(user_id)

        assert report.files_moved == 1
        tagger.generate_file_tags.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failures_are_skipped(self, test_db, test_user, make_organizer):
        user_id = test_user.id
        await create_files(
            test_db,
            user_id,
            [("a.pdf", "application/pdf"), ("b.pdf", "application/pdf"), ("c.pdf", "application/pdf")],
        )
        tagger = scripted_tagger(
            {
                "a.pdf": tagging("Invoices"),
                "b.pdf": RuntimeError("tagger exploded"),
                "c.pdf": tagging("Photos"),
            }
        )

        report = await make_organizer(tagger).organize_files(user_id)

        assert report.files_moved == 2
        assert report.folders_created == 2
        assert tagger.generate_file_tags.await_count == 3

    @pytest.mark.asyncio
    async def test_nothing_to_organize(self, test_db, test_user, make_organizer, fallback_tagger):
        report = await make_organizer(fallback_tagger).organize_files(test_user.id)

        assert report.files_moved == 0
        assert report.folders_created == 0
        assert report.message == "Organized 0 files into 0 new folders"
