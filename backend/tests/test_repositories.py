# backend/tests/test_repositories.py
import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from sentifi.db import ensure_indexes


@pytest.mark.asyncio
async def test_unique_title_index_rejects_duplicates(db, repo, make_article):
    await ensure_indexes(db)
    await repo.insert_article(make_article("Same headline"))

    with pytest.raises(DuplicateKeyError):
        await repo.insert_article(make_article("Same headline", score=90))

    assert await repo.count({}) == 1


@pytest.mark.asyncio
async def test_exists_title_is_exact(repo, make_article):
    await repo.insert_article(make_article("Bitcoin halving done"))

    assert await repo.exists_title("Bitcoin halving done") is True
    assert await repo.exists_title("bitcoin halving done") is False
    assert await repo.exists_title("Bitcoin halving") is False


@pytest.mark.asyncio
async def test_stored_document_shape(repo, make_article):
    article_id = await repo.insert_article(make_article("Shape", score=12, asset="SOL"))

    doc = await repo.find_by_id(article_id)
    assert isinstance(doc["_id"], ObjectId)
    assert doc["sentiment_label"] == "BEARISH"
    assert doc["asset"] == "SOL"
    assert doc["created_at"] is not None


@pytest.mark.asyncio
async def test_find_by_id_rejects_garbage(repo):
    with pytest.raises(ValueError):
        await repo.find_by_id("nope")


@pytest.mark.asyncio
async def test_published_window_bounds_are_inclusive(repo, make_article):
    docs = [make_article(f"W{n}", hours_ago=n) for n in (1, 2, 3)]
    for d in docs:
        await repo.insert_article(d)

    rows = await repo.find_published_between(docs[2].published_at, docs[1].published_at, fields=("title",))
    assert [r["title"] for r in rows] == ["W3", "W2"]
