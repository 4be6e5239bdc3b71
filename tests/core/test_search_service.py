"""
Tests for SearchService.
"""

import pytest


@pytest.fixture
async def populated(todo_service, sample_texts):
    return [await todo_service.create(text) for text in sample_texts]


class TestSearchService:
    """Tests for SearchService.search()."""

    @pytest.mark.asyncio
    async def test_empty_predicate_returns_everything_in_fetch_order(self, search_service, store, populated):
        results = await search_service.search("")

        assert results == await store.fetch_all()

    @pytest.mark.asyncio
    async def test_matches_text(self, search_service, populated):
        results = await search_service.search("buy")

        assert sorted(r.text for r in results) == ["buy milk", "buy stamps"]

    @pytest.mark.asyncio
    async def test_no_match(self, search_service, populated):
        assert await search_service.search("zebra") == []

    @pytest.mark.asyncio
    async def test_matches_non_text_fields(self, search_service, populated):
        """The whole record is searched, including its id and archival marker."""
        target = populated[2]

        results = await search_service.search(target.id)

        assert results == [target]

        assert len(await search_service.search("archival=Active")) == len(populated)

    @pytest.mark.asyncio
    async def test_matches_replaced_marker(self, search_service, todo_service, populated):
        new = await todo_service.edit(populated[0].id, "buy oat milk")

        results = await search_service.search(f"ReplacedBy({new.id})")

        assert [r.id for r in results] == [populated[0].id]

    @pytest.mark.asyncio
    async def test_cap_returns_prefix(self, search_service, populated):
        full = await search_service.search("e")

        for n in range(len(full) + 2):
            capped = await search_service.search("e", max_results=n)
            assert capped == full[:n]

    @pytest.mark.asyncio
    async def test_zero_cap(self, search_service, populated):
        assert await search_service.search("", max_results=0) == []

    @pytest.mark.asyncio
    async def test_negative_cap_rejected(self, search_service):
        with pytest.raises(ValueError):
            await search_service.search("", max_results=-1)

    @pytest.mark.asyncio
    async def test_cap_stops_scan_early(self, store, populated):
        from todor.services.search import SearchService
        from todor.services.store import TodoStore

        pulled = []

        class CountingStore(TodoStore):
            async def fetch_streaming(self):
                async for record in super().fetch_streaming():
                    pulled.append(record.id)
                    yield record

        service = SearchService(store=CountingStore(adapter=store.adapter))

        results = await service.search("", max_results=2)

        assert len(results) == 2
        assert len(pulled) == 2

    @pytest.mark.asyncio
    async def test_stream_failure_discards_partial_results(self, store, populated):
        from todor.errors import StoreError
        from todor.services.search import SearchService
        from todor.services.store import TodoStore

        class FlakyStore(TodoStore):
            async def fetch_streaming(self):
                count = 0
                async for record in super().fetch_streaming():
                    if count == 2:
                        raise StoreError("connection lost")
                    count += 1
                    yield record

        service = SearchService(store=FlakyStore(adapter=store.adapter))

        with pytest.raises(StoreError) as exc:
            await service.search("")

        assert exc.value.operation == "search"
