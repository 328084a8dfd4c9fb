# backend/tests/conftest.py
import os
import asyncio
import tempfile
from datetime import timedelta

import pytest
from mongomock_motor import AsyncMongoMockClient

# must be set before any sentifi module reads settings
os.environ["SCHEDULER_ENABLED"] = "0"
os.environ["INGEST_ON_STARTUP"] = "0"
os.environ["OPENAI_API_KEY"] = ""
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "sentifi-test-logs"))

from sentifi.db import ArticleDocument, ArticleRepository, ensure_indexes  # noqa: E402
from sentifi.core.sentiment import bucket_for_score  # noqa: E402
from sentifi.utils.validators import utcnow  # noqa: E402


def make_article(title, score=50, hours_ago=1, source="CoinDesk", asset=None, category=None,
                 chain=None, keywords=None, label=None, content="", now=None):
    now = now or utcnow()
    return ArticleDocument(
        title=title,
        content=content,
        source=source,
        url=f"https://example.com/{title.lower().replace(' ', '-')}",
        published_at=now - timedelta(hours=hours_ago),
        analyzed_at=now,
        sentiment_score=score,
        sentiment_label=label or bucket_for_score(score),
        asset=asset,
        category=category,
        chain=chain,
        keywords=keywords,
    )


@pytest.fixture(name="make_article")
def make_article_fixture():
    return make_article


@pytest.fixture
def db():
    return AsyncMongoMockClient()["sentifi_test"]


@pytest.fixture
def repo(db):
    return ArticleRepository(db)


@pytest.fixture
def seed(repo):
    """Insert ArticleDocuments from sync tests; returns their ids"""
    def _seed(*articles):
        async def _insert():
            await ensure_indexes(repo.db)
            return [await repo.insert_article(a) for a in articles]
        return asyncio.run(_insert())
    return _seed


@pytest.fixture
def client(monkeypatch, repo):
    import sentifi.main as main
    from sentifi.api.deps import get_article_repository

    async def _noop():
        return None

    # no real Mongo or scheduler in tests
    monkeypatch.setattr(main, "connect_to_mongo", _noop)
    monkeypatch.setattr(main, "close_mongo_connection", _noop)
    monkeypatch.setattr(main, "start_scheduler", lambda: None)
    monkeypatch.setattr(main, "shutdown_scheduler", lambda: None)

    from fastapi.testclient import TestClient

    main.app.dependency_overrides[get_article_repository] = lambda: repo
    try:
        # context manager so lifespan startup/shutdown run
        with TestClient(main.app) as c:
            yield c
    finally:
        main.app.dependency_overrides.clear()
