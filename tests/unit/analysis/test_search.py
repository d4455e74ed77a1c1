"""Unit tests for log search."""

from replaygraph.analysis.search import matches_query, search_events
from replaygraph.core.demo import DemoManager
from replaygraph.core.types import LogEvent

EVENTS = DemoManager.SAMPLE_LOGS


class TestMatchesQuery:
    def test_empty_query_matches(self):
        assert matches_query(LogEvent(type="scroll", timestamp=0), "")

    def test_url_method_and_type(self):
        event = LogEvent(type="network-request", timestamp=0,
                         data={"url": "https://a.com/Login", "method": "POST"})
        assert matches_query(event, "login")
        assert matches_query(event, "post")
        assert matches_query(event, "NETWORK")
        assert not matches_query(event, "logout")

    def test_non_string_fields_ignored(self):
        event = LogEvent(type="click", timestamp=0, data={"url": 42})
        assert not matches_query(event, "42")


class TestSearchEvents:
    def test_by_text(self):
        results = search_events(EVENTS, "watchlist")
        assert [e.data["method"] for e in results] == ["POST"]

    def test_by_type_preserves_order(self):
        results = search_events(EVENTS, types=["click"])
        assert [e.data["id"] for e in results] == ["login", "movie-1", "addToWatchlist"]

    def test_text_and_type(self):
        results = search_events(EVENTS, "cdn", types=["network-request"])
        assert len(results) == 1

    def test_no_filters_returns_all(self):
        assert len(search_events(EVENTS)) == len(EVENTS)
