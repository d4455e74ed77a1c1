"""Unit tests for the core type models."""

from datetime import datetime, timezone

import pytest

from replaygraph.core.exceptions import MalformedURL
from replaygraph.core.types import (
    ClickData,
    EdgeKind,
    ErrorData,
    GenericData,
    GraphEdge,
    GraphNode,
    KeydownData,
    LogEvent,
    NetworkRequestData,
    NodeKind,
    NormalizedEvent,
    parse_payload,
)

T0 = datetime(2025, 5, 19, 10, 6, 26, tzinfo=timezone.utc)


class TestLogEvent:
    def test_accepts_camel_case_received_at(self):
        event = LogEvent.model_validate({
            "type": "click",
            "timestamp": "2025-05-19T10:06:26.000Z",
            "receivedAt": "2025-05-19T10:06:26.011Z",
            "data": {"tag": "BUTTON"},
        })
        assert event.received_at == "2025-05-19T10:06:26.011Z"
        assert event.data == {"tag": "BUTTON"}

    def test_data_defaults_to_empty(self):
        event = LogEvent(type="scroll", timestamp=0)
        assert event.data == {}
        assert event.received_at is None


class TestNetworkRequestData:
    def test_hostname_and_path(self):
        data = NetworkRequestData(url="https://api.example.com/api/v1/users/login?x=1")
        assert data.hostname() == "api.example.com"
        assert data.path() == "/api/v1/users/login"

    def test_empty_path_is_root(self):
        assert NetworkRequestData(url="https://example.com").path() == "/"

    @pytest.mark.parametrize("url", [None, "", "not a url", "/relative/path", "http://"])
    def test_malformed_url(self, url):
        with pytest.raises(MalformedURL):
            NetworkRequestData(url=url).hostname()

    @pytest.mark.parametrize("status,expected", [
        (200, "success"),
        (204, "success"),
        (302, "redirect"),
        (404, "client_error"),
        (503, "server_error"),
        (None, "unknown"),
        (0, "unknown"),
    ])
    def test_status_class(self, status, expected):
        assert NetworkRequestData(url="https://a.com", status=status).status_class() == expected

    def test_aliases(self):
        data = NetworkRequestData.model_validate({
            "url": "https://a.com",
            "statusText": "OK",
            "mimeType": "application/json",
            "postData": "{}",
        })
        assert data.status_text == "OK"
        assert data.mime_type == "application/json"
        assert data.post_data == "{}"


class TestParsePayload:
    def test_selects_model_by_type(self):
        assert isinstance(parse_payload("network-request", {"url": "https://a.com"}), NetworkRequestData)
        assert isinstance(parse_payload("keydown", {"key": "Enter"}), KeydownData)
        assert isinstance(parse_payload("error", {"message": "boom"}), ErrorData)

        click = parse_payload("click", {"tag": "BUTTON", "id": "go", "class": "btn"})
        assert isinstance(click, ClickData)
        assert click.element_id == "go"
        assert click.class_name == "btn"

    def test_unknown_type_is_generic(self):
        payload = parse_payload("scroll", {"y": 640})
        assert isinstance(payload, GenericData)
        assert payload.raw == {"y": 640}

    def test_invalid_payload_falls_back_to_generic(self):
        payload = parse_payload("click", {"tag": {"a": 1}})
        assert isinstance(payload, GenericData)
        assert payload.raw["tag"] == {"a": 1}

    @pytest.mark.parametrize("extra", [
        {"status": "OK"},
        {"status": True},
        {"time": "fast"},
        {"time": [1, 2], "statusText": 200},
        {"method": 7},
    ])
    def test_network_request_keeps_url_despite_odd_fields(self, extra):
        payload = parse_payload("network-request", {"url": "https://api.example.com/x", **extra})
        assert isinstance(payload, NetworkRequestData)
        assert payload.hostname() == "api.example.com"
        assert payload.status_class() == "unknown"

    def test_numeric_strings_are_coerced(self):
        payload = parse_payload("network-request", {"url": "https://a.com", "status": "404", "time": "12.5"})
        assert payload.status == 404
        assert payload.time == 12.5
        assert payload.status_class() == "client_error"

    def test_none_data(self):
        assert isinstance(parse_payload("click", None), ClickData)


class TestNormalizedEvent:
    def test_node_id_uses_type_and_index(self):
        source = LogEvent(type="click", timestamp=T0)
        event = NormalizedEvent(
            index=7,
            event_type="click",
            timestamp=T0,
            payload=ClickData(),
            source=source,
        )
        assert event.node_id == "click-7"
        assert event.is_type("keydown", "click")
        assert not event.is_type("error")


class TestGraphModels:
    def test_node_equality_by_id(self):
        a = GraphNode(id="click-0", kind=NodeKind.EVENT, label="a")
        b = GraphNode(id="click-0", kind=NodeKind.EVENT, label="b")
        assert a == b
        assert len({a, b}) == 1

    def test_domain_flag(self):
        assert GraphNode(id="domain:a.com", kind=NodeKind.DOMAIN).is_domain
        assert not GraphNode(id="click-0", kind=NodeKind.EVENT).is_domain

    def test_edge_key(self):
        edge = GraphEdge(source="click-0", target="network-request-1",
                         kind=EdgeKind.CAUSAL, weight=2.0, timestamp=T0, label="Triggered")
        assert edge.key == ("click-0", "network-request-1", "causal")
        assert edge.is_causal()
