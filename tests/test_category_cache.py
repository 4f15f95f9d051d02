"""Unit tests for CategoryNameCache."""

from unittest.mock import AsyncMock

import pytest

from packages.common.category_cache import CategoryNameCache


class TestCategoryNameCache:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_loader_called_once_while_warm(self):
        cache = CategoryNameCache()
        loader = AsyncMock(return_value=["Business", "Design"])

        assert await cache.get_or_load(loader) == ["Business", "Design"]
        assert await cache.get_or_load(loader) == ["Business", "Design"]

        assert loader.await_count == 1
        assert cache.loaded

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self):
        cache = CategoryNameCache()
        loader = AsyncMock(side_effect=[["Business"], ["Business", "Landscaping"]])

        await cache.get_or_load(loader)
        cache.invalidate()

        assert not cache.loaded
        assert await cache.get_or_load(loader) == ["Business", "Landscaping"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalidate_during_load_discards_result(self):
        cache = CategoryNameCache()

        async def racing_loader():
            cache.invalidate()
            return ["Stale"]

        assert await cache.get_or_load(racing_loader) == ["Stale"]
        assert not cache.loaded

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returned_list_is_a_copy(self):
        cache = CategoryNameCache()
        names = await cache.get_or_load(AsyncMock(return_value=["Design"]))
        names.append("Mutated")

        assert await cache.get_or_load(AsyncMock()) == ["Design"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_loader_error_leaves_cache_cold(self):
        cache = CategoryNameCache()

        with pytest.raises(ConnectionError):
            await cache.get_or_load(AsyncMock(side_effect=ConnectionError("db down")))

        assert not cache.loaded
