"""
Integration tests for the category and post repositories.

Run against an in-memory SQLite database with the forum schema.
"""

import json
import re

import pytest
from sqlalchemy import text

from packages.common.category_repository import CategoryRepository, generate_category_id
from packages.common.post_repository import PostRepository


@pytest.fixture
def categories():
    return CategoryRepository()


@pytest.fixture
def posts():
    return PostRepository()


class TestCategoryRepository:

    @pytest.mark.integration
    def test_generated_ids_have_timestamp_and_suffix(self):
        first, second = generate_category_id(), generate_category_id()

        assert re.fullmatch(r"cat_\d{13}_[a-z0-9]{9}", first)
        assert first != second

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_names_sorted_and_blank_names_filtered(self, seeded_session, categories):
        await seeded_session.execute(
            text("INSERT INTO categories (id, name, slug) VALUES ('blank', '   ', 'blank')")
        )

        names = await categories.get_category_names(seeded_session)

        assert names == [
            "Academic", "Business", "Career", "Construction",
            "Design", "Informative", "Jobs", "Other",
        ]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_validate_ids_preserves_order(self, seeded_session, categories):
        check = await categories.validate_ids(["design", "nope", "business", "gone"], seeded_session)

        assert check.valid == ["design", "business"]
        assert check.invalid == ["nope", "gone"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_validate_empty_ids(self, seeded_session, categories):
        check = await categories.validate_ids([], seeded_session)
        assert check.valid == [] and check.invalid == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_ids_by_names_case_insensitive_in_request_order(self, seeded_session, categories):
        refs = await categories.get_ids_by_names(["CAREER", "business", "career", "Missing"], seeded_session)

        assert [(r.id, r.name) for r in refs] == [("career", "Career"), ("business", "Business")]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_create_and_fetch_category(self, db_session, categories):
        created = await categories.create_category("Landscaping", "landscaping", db_session)
        fetched = await categories.get_category(created.id, db_session)

        assert fetched.name == "Landscaping"
        assert fetched.color == "#3B82F6"
        assert fetched.post_count == 0

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_find_by_slug_can_exclude_self(self, seeded_session, categories):
        assert (await categories.find_by_slug("design", seeded_session)).id == "design"
        assert await categories.find_by_slug("design", seeded_session, exclude_id="design") is None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_missing_category_returns_none(self, seeded_session, categories):
        assert await categories.update_category("nope", {"name": "X"}, seeded_session) is None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_ignores_unknown_columns(self, seeded_session, categories):
        updated = await categories.update_category(
            "design", {"name": "Interior Design", "post_count": "99"}, seeded_session
        )

        assert updated.name == "Interior Design"
        assert updated.post_count == 0


class TestPostRepository:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_insert_and_replace_categories(self, seeded_session, posts):
        post_id = await posts.insert_post(
            "Budgeting for a construction company",
            seeded_session,
            tags=["budget", "construction"],
            ai_confidence=0.4,
        )

        assert await posts.replace_post_categories(post_id, ["construction", "business"], seeded_session)
        assert await posts.get_post_category_ids(post_id, seeded_session) == ["construction", "business"]

        row = (await seeded_session.execute(
            text("SELECT primary_category_id, tags FROM posts WHERE id = :id"), {"id": post_id}
        )).fetchone()
        assert row.primary_category_id == "construction"
        assert json.loads(row.tags) == ["budget", "construction"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_replace_rewrites_positions(self, seeded_session, posts):
        post_id = await posts.insert_post("text", seeded_session)
        await posts.replace_post_categories(post_id, ["design", "career"], seeded_session)
        await posts.replace_post_categories(post_id, ["academic"], seeded_session)

        assert await posts.get_post_category_ids(post_id, seeded_session) == ["academic"]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_post_exists(self, seeded_session, posts):
        post_id = await posts.insert_post("text", seeded_session)

        assert await posts.post_exists(post_id, seeded_session) is True
        assert await posts.post_exists("missing", seeded_session) is False

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_replace_for_missing_post_returns_false(self, seeded_session, posts):
        assert await posts.replace_post_categories("missing", ["design"], seeded_session) is False
