import pytest
import requests

from discovery.errors import ConfigurationError, UpstreamError
from discovery.vendors import brave_search


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class DummySession:
    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response
        self.error = error

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params, headers, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def _hit(title, url, description="", **extra):
    item = {"title": title, "url": url, "description": description}
    item.update(extra)
    return item


def _payload(*hits):
    return {"web": {"results": list(hits)}}


def _client(session, api_key="key"):
    return brave_search.BraveSearchClient(api_key=api_key, session=session, timeout=7)


def test_missing_api_key_raises_configuration_error(monkeypatch):
    monkeypatch.delenv("BRAVE_SEARCH_API_KEY", raising=False)
    session = DummySession(DummyResponse(payload=_payload()))
    client = brave_search.BraveSearchClient(session=session)

    assert client.configured is False
    with pytest.raises(ConfigurationError):
        client.search_opportunities("roads")
    assert session.calls == []


def test_api_key_read_from_settings(monkeypatch):
    monkeypatch.setenv("BRAVE_SEARCH_API_KEY", "from-env")
    session = DummySession(DummyResponse(payload=_payload()))
    client = brave_search.BraveSearchClient(session=session)

    client.search_opportunities("roads", filter_gov=False)

    _, _, headers, _ = session.calls[0]
    assert headers["X-Subscription-Token"] == "from-env"


def test_request_params_and_headers():
    session = DummySession(DummyResponse(payload=_payload()))

    response = _client(session).search_opportunities("bridge repair", count=5, freshness="month")

    url, params, headers, timeout = session.calls[0]
    assert url == brave_search.BASE_URL
    assert params == {
        "q": 'bridge repair (site:.gov OR site:.mil OR "government contracts")',
        "count": "5",
        "text_decorations": "false",
        "search_lang": "en",
        "country": "US",
        "freshness": "month",
    }
    assert headers["X-Subscription-Token"] == "key"
    assert headers["Accept"] == "application/json"
    assert timeout == 7
    assert response.query == params["q"]


def test_query_untouched_without_gov_filter():
    session = DummySession(DummyResponse(payload=_payload()))

    response = _client(session).search_opportunities("bridge repair", filter_gov=False)

    _, params, _, _ = session.calls[0]
    assert params["q"] == "bridge repair"
    assert "freshness" not in params
    assert response.query == "bridge repair"


def test_invalid_freshness_rejected():
    session = DummySession(DummyResponse(payload=_payload()))
    with pytest.raises(ValueError):
        _client(session).search_opportunities("roads", freshness="decade")


def test_non_2xx_raises_upstream_error():
    session = DummySession(DummyResponse(status_code=429, text="rate limited"))

    with pytest.raises(UpstreamError) as excinfo:
        _client(session).search_opportunities("roads")

    assert excinfo.value.status_code == 429
    assert excinfo.value.body == "rate limited"
    assert "429" in str(excinfo.value)
    assert len(session.calls) == 1


def test_transport_error_raises_upstream_error():
    session = DummySession(error=requests.Timeout("read timed out"))

    with pytest.raises(UpstreamError) as excinfo:
        _client(session).search_opportunities("roads")

    assert excinfo.value.status_code is None
    assert "read timed out" in excinfo.value.body


def test_invalid_json_raises_upstream_error():
    session = DummySession(DummyResponse(payload=ValueError("bad json"), text="<html>"))
    with pytest.raises(UpstreamError):
        _client(session).search_opportunities("roads")


def test_missing_web_results_is_empty_response(caplog):
    session = DummySession(DummyResponse(payload={"query": {"original": "roads"}}))

    with caplog.at_level("WARNING"):
        response = _client(session).search_opportunities("roads")

    assert response.results == []
    assert response.total_results == 0
    assert "no web results" in " ".join(caplog.messages)


def test_parse_web_results_assigns_rank_and_domain():
    results = brave_search.parse_web_results(
        _payload(
            _hit("A", "https://www.dot.ca.gov/rfp/123", "desc", published_date="2025-01-01"),
            _hit("B", "not a url", age="2 days ago"),
            _hit(None, None),
        )
    )

    assert [r.rank for r in results] == [1, 2, 3]
    assert results[0].domain == "www.dot.ca.gov"
    assert results[0].published_date == "2025-01-01"
    assert results[1].domain == ""
    assert results[1].published_date == "2 days ago"
    assert results[2].title == "" and results[2].url == ""


def test_extract_domain_swallows_bad_urls():
    assert brave_search.extract_domain("https://sam.gov/opp/1") == "sam.gov"
    assert brave_search.extract_domain("http://[::1") == ""
    assert brave_search.extract_domain("") == ""


def test_filtering_keeps_original_ranks():
    session = DummySession(
        DummyResponse(
            payload=_payload(
                _hit("Contracting 101 guide", "https://example.com/blog/contracting-101"),
                _hit("Paving RFP", "https://city.example.org/rfp/2025-04"),
                _hit("Understanding bids", "https://example.com/learn"),
                _hit("Bridge solicitation", "https://county.example.org/solicitation/77"),
                _hit("Company homepage", "https://example.com/"),
            )
        )
    )

    response = _client(session).search_opportunities("roads")

    assert [r.rank for r in response.results] == [2, 4]
    assert response.total_results == 2


def test_tier_two_keeps_gov_results_when_no_opportunities():
    hits = [_hit(f"Learn about bidding {i}", f"https://example{i}.com/page") for i in range(7)]
    hits[1] = _hit("Public works department", "https://www.cityofpaloalto.gov/public-works")
    hits[4] = _hit("Purchasing division", "https://purchasing.state.gov/purchasing")
    hits[6] = _hit("County procurement office", "https://procurement.sanmateocounty.gov/office")
    hits.extend(_hit(f"Blog {i}", f"https://blog{i}.com/x") for i in range(3))
    session = DummySession(DummyResponse(payload=_payload(*hits)))

    response = _client(session).search_opportunities("roads")

    assert len(hits) == 10
    assert [r.rank for r in response.results] == [2, 5, 7]


def test_tier_three_falls_back_to_government_related():
    session = DummySession(
        DummyResponse(
            payload=_payload(
                _hit("Celebrity news", "https://gossip.example.com/today"),
                _hit("Federal procurement trends", "https://example.com/analysis"),
            )
        )
    )

    response = _client(session).search_opportunities("roads")

    assert [r.rank for r in response.results] == [2]


def test_no_filter_returns_everything():
    session = DummySession(
        DummyResponse(payload=_payload(_hit("Celebrity news", "https://gossip.example.com/today")))
    )

    response = _client(session).search_opportunities("roads", filter_gov=False)

    assert response.total_results == 1


def test_apply_fallback_filters_first_non_empty_tier_wins():
    results = brave_search.parse_web_results(
        _payload(_hit("a", "https://a.example.com"), _hit("b", "https://b.example.com"))
    )
    tiers = [
        ("none", lambda r: False),
        ("only_b", lambda r: r.title == "b"),
        ("all", lambda r: True),
    ]

    kept = brave_search.apply_fallback_filters(results, tiers)

    assert [r.title for r in kept] == ["b"]
    assert brave_search.apply_fallback_filters(results, [("none", lambda r: False)]) == []
