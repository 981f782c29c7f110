"""Unit tests for the numpy-backed InMemoryVectorStore."""

from __future__ import annotations

import pytest

from lexassist.models.document import VectorRecord
from lexassist.providers.vector_store.memory_provider import InMemoryVectorStore
from lexassist.utils.errors import RetrievalError


def _record(record_id: str, values: list[float], text: str = "") -> VectorRecord:
    return VectorRecord(id=record_id, values=values, metadata={"text": text or record_id})


@pytest.mark.asyncio
async def test_ranks_by_cosine_similarity() -> None:
    store = InMemoryVectorStore()
    await store.upsert(
        [
            _record("far", [0.0, 1.0]),
            _record("near", [1.0, 0.1]),
            _record("exact", [2.0, 0.0]),
        ]
    )
    matches = await store.query([1.0, 0.0], top_k=2)
    assert [m.id for m in matches] == ["exact", "near"]
    assert matches[0].score == pytest.approx(1.0)


@pytest.mark.asyncio
async def test_ties_keep_insertion_order() -> None:
    store = InMemoryVectorStore()
    await store.upsert([_record("first", [1.0, 0.0]), _record("second", [1.0, 0.0])])
    assert [m.id for m in await store.query([1.0, 0.0])] == ["first", "second"]


@pytest.mark.asyncio
async def test_empty_store_and_zero_top_k() -> None:
    store = InMemoryVectorStore()
    assert await store.query([1.0]) == []
    await store.upsert([_record("a", [1.0])])
    assert await store.query([1.0], top_k=0) == []


@pytest.mark.asyncio
async def test_zero_vector_scores_zero() -> None:
    store = InMemoryVectorStore()
    await store.upsert([_record("zero", [0.0, 0.0])])
    matches = await store.query([1.0, 0.0])
    assert matches[0].score == 0.0


@pytest.mark.asyncio
async def test_mixed_dimensions_rejected() -> None:
    store = InMemoryVectorStore()
    await store.upsert([_record("a", [1.0, 0.0])])
    with pytest.raises(RetrievalError, match="Mixed embedding dimensions"):
        await store.upsert([_record("b", [1.0, 0.0, 0.0])])
    with pytest.raises(RetrievalError):
        await store.query([1.0, 0.0, 0.0])


@pytest.mark.asyncio
async def test_upsert_overwrites_and_counts() -> None:
    store = InMemoryVectorStore(collection_name="scratch")
    await store.upsert([_record("a", [1.0], "old")])
    await store.upsert([_record("a", [1.0], "new")])
    assert await store.count() == 1
    assert (await store.query([1.0]))[0].text == "new"
    stats = await store.get_stats()
    assert (stats.total_chunks, stats.provider, stats.collection) == (1, "memory", "scratch")


@pytest.mark.asyncio
async def test_include_metadata_false() -> None:
    store = InMemoryVectorStore()
    await store.upsert([_record("a", [1.0])])
    assert (await store.query([1.0], include_metadata=False))[0].metadata == {}
