# backend/tests/test_articles_api.py
import asyncio
from datetime import datetime


def test_root_banner(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"
    assert r.headers["X-Response-Time-Ms"].isdigit()


def test_list_articles_shape(client, seed, make_article):
    seed(
        make_article("Bitcoin rallies", score=81, asset="BTC", category="Price Movement",
                     chain="Bitcoin", keywords="btc, rally"),
        make_article("Ethereum upgrade ships", score=55, hours_ago=2),
    )

    r = client.get("/api/articles", params={"limit": 1})
    assert r.status_code == 200
    data = r.json()

    assert data["pagination"] == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}
    article = data["articles"][0]
    assert article["title"] == "Bitcoin rallies"
    assert article["sentimentScore"] == 81
    assert article["sentiment"] == "BULLISH"
    assert article["asset"] == "BTC"
    assert article["keywords"] == "btc, rally"
    for key in ("id", "publishedAt", "analyzedAt", "createdAt", "url", "source"):
        assert key in article


def test_list_articles_filters(client, seed, make_article):
    seed(
        make_article("Bull run", score=90, source="Decrypt"),
        make_article("Bear trap", score=10, source="Decrypt"),
        make_article("Sideways", score=50, source="CoinDesk"),
    )

    r = client.get("/api/articles", params={"sentiment": "BEARISH"})
    assert [a["title"] for a in r.json()["articles"]] == ["Bear trap"]

    r = client.get("/api/articles", params={"source": "Decrypt", "orderBy": "publishedAt", "order": "asc"})
    assert r.json()["pagination"]["total"] == 2

    r = client.get("/api/articles", params={"search": "TRAP"})
    assert [a["title"] for a in r.json()["articles"]] == ["Bear trap"]


def test_list_articles_empty_store(client):
    r = client.get("/api/articles")
    assert r.status_code == 200
    assert r.json() == {"articles": [], "pagination": {"page": 1, "limit": 20, "total": 0, "totalPages": 0}}


def test_list_articles_validation(client):
    assert client.get("/api/articles", params={"page": 0}).status_code == 422
    assert client.get("/api/articles", params={"limit": 101}).status_code == 422
    assert client.get("/api/articles", params={"sentiment": "HAPPY"}).status_code == 422
    assert client.get("/api/articles", params={"orderBy": "title"}).status_code == 422
    assert client.get("/api/articles", params={"order": "sideways"}).status_code == 422


def test_latest_articles(client, seed, make_article):
    seed(*[make_article(f"News {n}", hours_ago=n) for n in range(1, 5)])

    r = client.get("/api/articles/latest", params={"limit": 3})
    assert r.status_code == 200
    assert [a["title"] for a in r.json()["articles"]] == ["News 1", "News 2", "News 3"]


def test_get_article_by_id(client, seed, make_article):
    [article_id] = seed(make_article("Single", score=20))

    r = client.get(f"/api/articles/{article_id}")
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == article_id
    assert body["sentiment"] == "BEARISH"
    assert datetime.fromisoformat(body["publishedAt"])


def test_get_article_bad_id(client):
    r = client.get("/api/articles/not-an-id")
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid article id."


def test_get_article_missing(client):
    r = client.get("/api/articles/64f1a2b3c4d5e67890ab12cd")
    assert r.status_code == 404
    assert r.json()["detail"] == "Article not found"


def test_rows_without_score_are_served_as_neutral(client, repo):
    legacy_id = asyncio.run(repo.create({
        "title": "Legacy row",
        "content": "stored before scoring existed",
        "source": "CoinDesk",
        "url": None,
        "published_at": datetime(2024, 1, 1, 8, 0),
        "analyzed_at": None,
        "sentiment_score": None,
    }))

    r = client.get("/api/articles", params={"sentiment": "NEUTRAL"})
    assert r.status_code == 200
    [article] = r.json()["articles"]
    assert article["id"] == legacy_id
    assert article["sentimentScore"] == 50
    assert article["sentiment"] == "NEUTRAL"

    assert client.get("/api/articles/latest").json()["articles"][0]["sentimentScore"] == 50
    assert client.get(f"/api/articles/{legacy_id}").json()["sentimentScore"] == 50
