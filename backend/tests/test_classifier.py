# backend/tests/test_classifier.py
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from sentifi.core.sentiment import Sentiment
from sentifi.services.classifier import (
    SentimentClassifier,
    article_text,
    degraded_analysis,
    parse_analysis,
)


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(content=None, side_effect=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_completion(content), side_effect=side_effect)
    return client


class TestParseAnalysis:

    def test_full_answer(self):
        a = parse_analysis(json.dumps({
            "sentimentScore": 82,
            "asset": "btc",
            "category": "Price Movement",
            "chain": "Bitcoin",
            "keywords": "ETF, inflows",
        }))
        assert a.sentiment_score == 82
        assert a.label == Sentiment.BULLISH
        assert a.asset == "BTC"
        assert a.category == "Price Movement"
        assert a.chain == "Bitcoin"
        assert a.keywords == "ETF, inflows"
        assert a.degraded is False

    def test_missing_tags_get_defaults(self):
        a = parse_analysis('{"sentimentScore": 20}')
        assert a.label == Sentiment.BEARISH
        assert (a.asset, a.category, a.chain) == ("GENERAL", "General", "GENERAL")
        assert a.keywords is None

    def test_score_is_clamped(self):
        assert parse_analysis('{"sentimentScore": 250}').sentiment_score == 100
        assert parse_analysis('{"sentimentScore": "n/a"}').sentiment_score == 50

    def test_rejects_non_objects(self):
        with pytest.raises(ValueError):
            parse_analysis("[1, 2, 3]")
        with pytest.raises(ValueError):
            parse_analysis("not json")


def test_article_text_joins_title_and_content():
    assert article_text("Title", "Body") == "Title\n\nBody"
    assert article_text("Title", None) == "Title\n\n"


def test_degraded_analysis():
    a = degraded_analysis()
    assert a.sentiment_score == 50
    assert a.label == Sentiment.ERROR
    assert a.asset is None and a.keywords is None
    assert a.degraded


class TestScoreMode:

    @pytest.mark.asyncio
    async def test_success(self):
        client = _client('{"sentimentScore": 30, "asset": "eth", "keywords": "hack"}')
        a = await SentimentClassifier(client=client, mode="score").analyze("Exchange hacked")

        assert a.sentiment_score == 30
        assert a.label == Sentiment.BEARISH
        assert a.asset == "ETH"
        _, kwargs = client.chat.completions.create.call_args
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "Exchange hacked" in kwargs["messages"][-1]["content"]

    @pytest.mark.asyncio
    async def test_api_error_degrades(self):
        client = _client(side_effect=RuntimeError("rate limited"))
        a = await SentimentClassifier(client=client, mode="score").analyze("anything")
        assert a == degraded_analysis()

    @pytest.mark.asyncio
    async def test_empty_answer_degrades(self):
        a = await SentimentClassifier(client=_client(""), mode="score").analyze("anything")
        assert a.label == Sentiment.ERROR

    @pytest.mark.asyncio
    async def test_malformed_json_degrades(self):
        a = await SentimentClassifier(client=_client("{oops"), mode="score").analyze("anything")
        assert a.label == Sentiment.ERROR
        assert a.sentiment_score == 50


class TestLabelMode:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer,label,score", [
        ("Bullish", Sentiment.BULLISH, 75),
        ("bearish.", Sentiment.BEARISH, 25),
        ("Neutral", Sentiment.NEUTRAL, 50),
        ("No idea", Sentiment.ERROR, 50),
    ])
    async def test_labels_map_to_scores(self, answer, label, score):
        a = await SentimentClassifier(client=_client(answer), mode="label").analyze("text")
        assert a.label == label
        assert a.sentiment_score == score
        assert a.degraded == (label == Sentiment.ERROR)


@pytest.mark.asyncio
async def test_no_api_key_degrades_without_calling_out(monkeypatch):
    from sentifi.core.config import settings

    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    clf = SentimentClassifier()

    assert clf.is_available() is False
    assert (await clf.analyze("text")).label == Sentiment.ERROR
