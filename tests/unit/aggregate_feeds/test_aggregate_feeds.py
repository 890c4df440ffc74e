"""Tests for aggregate_feeds.aggregate_feeds module."""

from aggregate_feeds.aggregate_feeds import AggregationEngine
from aggregate_feeds.config import BucketConfig, Config, TrendingConfig
from aggregate_feeds.fetch_feeds.fetch_feed import parse_feed_document
from aggregate_feeds.models import FeedResult, FeedSource

TOI = FeedSource(url="https://toi.example/rss", source_name="Times of India")
HT = FeedSource(url="https://ht.example/rss", source_name="Hindustan Times")
HINDU = FeedSource(url="https://hindu.example/rss", source_name="The Hindu")
SOURCES = [TOI, HT, HINDU]


def _rss(items: str, title: str = "Feed") -> str:
    return f"""<?xml version="1.0"?>
<rss version="2.0"><channel><title>{title}</title><link>https://feed.example/</link>
{items}
</channel></rss>"""


def _item(title: str, link: str, pub_date: str | None = None, description: str = "", categories=()) -> str:
    date = f"<pubDate>{pub_date}</pubDate>" if pub_date else ""
    tags = "".join(f"<category>{c}</category>" for c in categories)
    return f"<item><title>{title}</title><link>{link}</link>{date}<description>{description}</description>{tags}</item>"


class FakeFetcher:
    """Serves canned feed bodies; None means the feed fails."""

    def __init__(self, bodies: dict[str, str | None]):
        self.bodies = bodies
        self.calls = 0

    def __call__(self, sources, relay, max_workers):
        self.calls += 1
        results = []
        for source in sources:
            body = self.bodies.get(source.source_name)
            if body is None:
                results.append(FeedResult(source=source, error="relay request failed"))
            else:
                results.append(FeedResult(source=source, document=parse_feed_document(body)))
        return results


def _engine(bodies: dict[str, str | None], **config) -> AggregationEngine:
    return AggregationEngine(Config(sources=list(SOURCES), **config), fetcher=FakeFetcher(bodies))


def _loaded_engine() -> AggregationEngine:
    toi = _rss("".join([
        _item("Potholes on Outer Ring Road", "https://toi.example/1", "Mon, 01 Jan 2024 10:00:00 GMT",
              "Potholes slow commuters", ["Civic"]),
        _item("Water supply cut", "https://toi.example/2", "Mon, 01 Jan 2024 08:00:00 GMT",
              "Water board announces cut", ["Civic"]),
    ]))
    ht = _rss("".join([
        _item("Metro Purple Line delay", "https://ht.example/1", "Mon, 01 Jan 2024 11:00:00 GMT",
              "Metro commuters face metro delays as metro signals fail", ["Transport"]),
        _item("Metro fares revised", "https://ht.example/2", "Mon, 01 Jan 2024 09:00:00 GMT",
              "Metro fares rise", ["Transport"]),
    ]))
    hindu = _rss(_item("Lake rejuvenation", "https://hindu.example/1", None, "Lake volunteers gather"))
    engine = _engine({"Times of India": toi, "Hindustan Times": ht, "The Hindu": hindu})
    engine.load()
    return engine


class TestLoad:
    def test_partial_failure_keeps_successful_feed(self) -> None:
        feed_a = _rss(
            "<item><title>With guid</title><link>https://toi.example/g</link><guid>toi-guid-1</guid></item>"
            "<item><title>Without guid</title><link>https://toi.example/nog</link></item>"
        )
        engine = _engine({"Times of India": feed_a, "Hindustan Times": None, "The Hindu": _rss("")})

        snapshot = engine.load()

        articles = engine.state.all_articles
        assert len(articles) == 2
        assert {a.source_name for a in articles} == {"Times of India"}
        assert {a.id for a in articles} == {"toi-guid-1", "https://toi.example/nog"}
        assert snapshot.no_stories is False
        assert engine.is_loaded

    def test_total_failure_signals_no_stories(self) -> None:
        engine = _engine({"Times of India": None, "Hindustan Times": _rss(""), "The Hindu": None})

        snapshot = engine.load()

        assert engine.state.all_articles == []
        assert snapshot.no_stories is True
        assert snapshot.total_count == 0
        assert snapshot.lead_article is None
        assert snapshot.keywords_label == "—"
        assert not engine.is_loaded

    def test_sorted_newest_first_with_undated_last(self) -> None:
        engine = _loaded_engine()

        titles = [a.title for a in engine.state.all_articles]

        assert titles == [
            "Metro Purple Line delay",
            "Potholes on Outer Ring Road",
            "Metro fares revised",
            "Water supply cut",
            "Lake rejuvenation",
        ]

    def test_all_sources_selected_after_load(self) -> None:
        engine = _loaded_engine()

        assert engine.state.selected_sources == frozenset(s.source_name for s in SOURCES)
        assert engine.state.filtered_articles == engine.state.all_articles

    def test_duplicate_ids_across_feeds_are_dropped(self) -> None:
        shared = _item("Shared wire story", "https://wire.example/1", "Mon, 01 Jan 2024 10:00:00 GMT")
        engine = _engine({"Times of India": _rss(shared), "Hindustan Times": _rss(shared), "The Hindu": None})

        engine.load()

        assert len(engine.state.all_articles) == 1
        assert engine.state.all_articles[0].source_name == "Times of India"

    def test_reload_replaces_state(self) -> None:
        engine = _loaded_engine()
        engine._fetcher = FakeFetcher({"The Hindu": _rss(_item("Only story", "https://hindu.example/9"))})

        engine.load()

        assert [a.title for a in engine.state.all_articles] == ["Only story"]

    def test_explicit_sources_override_config(self) -> None:
        fetcher = FakeFetcher({"Hindustan Times": _rss(_item("HT story", "https://ht.example/9"))})
        engine = AggregationEngine(Config(sources=list(SOURCES)), fetcher=fetcher)

        snapshot = engine.load([HT])

        assert [a.source_name for a in snapshot.articles] == ["Hindustan Times"]
        assert engine.state.selected_sources == frozenset({"Hindustan Times"})

    def test_superseded_load_is_discarded(self) -> None:
        engine = AggregationEngine(Config(sources=list(SOURCES)))
        newer = FakeFetcher({"The Hindu": _rss(_item("Newer load", "https://hindu.example/new"))})
        older = FakeFetcher({"Times of India": _rss(_item("Older load", "https://toi.example/old"))})

        def older_then_newer(sources, relay, max_workers):
            # a second load starts and finishes while this one is in flight
            engine._fetcher = newer
            engine.load()
            return older(sources, relay, max_workers)

        engine._fetcher = older_then_newer
        snapshot = engine.load()

        assert [a.title for a in engine.state.all_articles] == ["Newer load"]
        assert [a.title for a in snapshot.articles] == ["Newer load"]


class TestSetSourceFilter:
    def test_filters_articles_in_order(self) -> None:
        engine = _loaded_engine()

        snapshot = engine.set_source_filter({"Times of India"})

        assert [a.title for a in snapshot.articles] == ["Potholes on Outer Ring Road", "Water supply cut"]
        assert snapshot.total_count == 2
        assert snapshot.lead_article.title == "Potholes on Outer Ring Road"
        assert len(engine.state.all_articles) == 5

    def test_keywords_recomputed_from_filtered_subset(self) -> None:
        engine = _loaded_engine()
        assert engine.state.trending_keywords[0] == "metro"

        snapshot = engine.set_source_filter({"Times of India"})

        assert "metro" not in snapshot.trending_keywords
        assert "potholes" in snapshot.trending_keywords

    def test_buckets_recomputed_from_filtered_subset(self) -> None:
        engine = _loaded_engine()
        assert {b.label for b in engine.snapshot().category_buckets} == {"Civic", "Transport"}

        snapshot = engine.set_source_filter({"Times of India"})

        assert [(b.label, b.count) for b in snapshot.category_buckets] == [("Civic", 2)]
        assert "Transport" not in engine.state.category_buckets

    def test_idempotent(self) -> None:
        engine = _loaded_engine()

        first = engine.set_source_filter({"The Hindu", "Hindustan Times"})
        second = engine.set_source_filter({"The Hindu", "Hindustan Times"})

        assert first.articles == second.articles
        assert first.trending_keywords == second.trending_keywords

    def test_does_not_refetch(self) -> None:
        engine = _loaded_engine()

        engine.set_source_filter({"The Hindu"})

        assert engine._fetcher.calls == 1

    def test_empty_selection_keeps_loaded_state(self) -> None:
        engine = _loaded_engine()

        snapshot = engine.set_source_filter(set())

        assert snapshot.articles == []
        assert snapshot.no_stories is False
        assert engine.is_loaded

    def test_uncategorized_articles_bucket_under_general(self) -> None:
        engine = _loaded_engine()

        engine.set_source_filter({"The Hindu"})

        assert [a.title for a in engine.state.category_buckets["General"]] == ["Lake rejuvenation"]


class TestSnapshot:
    def test_exposes_ranked_views(self) -> None:
        engine = _loaded_engine()

        snapshot = engine.snapshot()

        assert snapshot.total_count == 5
        assert snapshot.lead_article.title == "Metro Purple Line delay"
        # equal sizes keep first-seen order; the newest article is Transport
        assert [b.label for b in snapshot.category_buckets] == ["Transport", "Civic"]
        assert snapshot.keywords_label.startswith("metro · ")
        assert len(snapshot.trending_keywords) <= 10

    def test_bucket_and_keyword_settings_apply(self) -> None:
        body = _rss(_item("Metro works", "https://toi.example/m", categories=["Civic"]))
        engine = _engine(
            {"Times of India": body},
            buckets=BucketConfig(general_label="Top stories", min_size=1, preview_size=1),
            trending=TrendingConfig(keyword_limit=1, stopwords=frozenset()),
        )

        snapshot = engine.load()

        assert [(b.label, b.count) for b in snapshot.category_buckets] == [("Civic", 1)]
        assert snapshot.trending_keywords == ["metro"]
