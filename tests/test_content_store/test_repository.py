"""Tests for the in-memory content repository."""

import pytest

from app.content_store.models import ContentType, Localized, MediaUrl, Text
from app.content_store.repository import InMemoryContentRepository, build_document_update


class TestBuildDocumentUpdate:
    def test_only_value_by_default(self):
        assert build_document_update(Text("Hola")) == {"value": "Hola"}

    def test_all_fields(self):
        update = build_document_update(
            MediaUrl("https://x"), type=ContentType.MEDIA, visible=False, page="home"
        )
        assert update == {
            "value": "https://x",
            "type": "media",
            "visible": False,
            "page": "home",
        }


class TestInMemoryContentRepository:
    @pytest.fixture
    def repository(self, content_documents):
        return InMemoryContentRepository(content_documents)

    async def test_get_missing_key_returns_none(self, repository):
        assert await repository.get("neverWritten") is None

    async def test_get_decodes_document(self, repository):
        entry = await repository.get("heroTitle")
        assert entry is not None
        assert entry.value == Localized(es="Bienvenido", en="Welcome")
        assert entry.page == "home"

    async def test_set_merges_fields(self, repository):
        await repository.set("heroTitle", Text("Hola"))

        assert repository.documents["heroTitle"] == {
            "value": "Hola",
            "type": "text",
            "visible": True,
            "page": "home",
        }

    async def test_set_creates_entry(self, repository):
        await repository.set("newKey", Text("Nuevo"), type=ContentType.TEXT)

        entry = await repository.get("newKey")
        assert entry is not None
        assert entry.value == Text("Nuevo")
        assert entry.visible is True

    async def test_documents_are_copied(self, content_documents):
        repository = InMemoryContentRepository(content_documents)
        content_documents["heroTitle"]["value"] = "changed outside"

        entry = await repository.get("heroTitle")
        assert entry is not None
        assert entry.value == Localized(es="Bienvenido", en="Welcome")

    async def test_list_is_sorted_and_includes_hidden(self, repository):
        ids = [entry.id for entry in await repository.list()]

        assert ids == sorted(ids)
        assert "draftNotice" in ids

    async def test_list_filters_by_page(self, repository):
        entries = await repository.list(page="home")

        assert [entry.id for entry in entries] == ["draftNotice", "heroSubtitle1", "heroTitle"]

    async def test_list_skips_malformed_entries(self):
        repository = InMemoryContentRepository(
            {"good": {"value": "ok"}, "bad": {"value": 3}}
        )

        entries = await repository.list()

        assert [entry.id for entry in entries] == ["good"]
