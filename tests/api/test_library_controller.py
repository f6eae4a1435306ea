"""
API tests for search and storage usage.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from factories import create_files


class TestLibraryController:
    """Test cases for library-wide endpoints."""

    @pytest.mark.asyncio
    async def test_storage_usage(self, authenticated_client: AsyncClient, test_db, test_user, other_users_file):
        await create_files(
            test_db,
            test_user.id,
            [("a.pdf", "application/pdf"), ("b.pdf", "application/pdf")],
            file_size=512,
        )

        response = await authenticated_client.get("/api/storage-usage")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"used": 1024, "total": 1073741824}

    @pytest.mark.asyncio
    async def test_storage_usage_empty(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/storage-usage")

        assert response.json() == {"used": 0, "total": 1073741824}

    @pytest.mark.asyncio
    async def test_search_invoice(self, authenticated_client: AsyncClient, test_db, test_user):
        invoice, photo, tagged = await create_files(
            test_db,
            test_user.id,
            [
                ("INVOICE-2024-01.pdf", "application/pdf"),
                ("photo.jpg", "image/jpeg"),
                ("scan.png", "image/png"),
            ],
        )
        tagged.tags = ["invoice"]
        await test_db.commit()

        response = await authenticated_client.get("/api/search", params={"q": "invoice"})

        assert response.status_code == status.HTTP_200_OK
        assert {f["id"] for f in response.json()} == {str(invoice.id), str(tagged.id)}

    @pytest.mark.asyncio
    async def test_search_filters_combine(self, authenticated_client: AsyncClient, test_db, test_user):
        pdf, png = await create_files(
            test_db,
            test_user.id,
            [("a.pdf", "application/pdf"), ("b.png", "image/png")],
            tags=["Finance"],
        )

        response = await authenticated_client.get(
            "/api/search", params={"tag": "finance", "type": "image"}
        )

        assert [f["id"] for f in response.json()] == [str(png.id)]

    @pytest.mark.asyncio
    async def test_search_is_owner_scoped(self, authenticated_client: AsyncClient, other_users_file):
        response = await authenticated_client.get("/api/search", params={"q": "private"})

        assert response.json() == []
