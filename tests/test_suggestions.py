from unittest import mock

import pytest
import requests

from suggestions import (
    SuggestionsError,
    fetch_suggestions,
    generate_fallback_suggestions,
    parse_suggestions_payload,
)

URL = 'https://suggest.example/complete/search'


def test_fallback_for_plain_query():
    assert generate_fallback_suggestions("rain") == [
        "rain music",
        "rain song",
        "rain cover",
        "rain live",
        "rain official",
        "rain remix",
    ]


def test_fallback_skips_keywords_already_in_query():
    suggestions = generate_fallback_suggestions("Rain MUSIC")
    assert "Rain MUSIC music" not in suggestions
    assert suggestions[0] == "Rain MUSIC song"
    assert len(suggestions) == 6


def test_fallback_adds_completions_for_longer_queries():
    query = "music song cover live official remix"
    assert generate_fallback_suggestions(query) == [
        f"{query} acoustic",
        f"{query} lyrics",
        f"{query} official music video",
        f"{query} lyrics",
        f"{query} cover",
        f"{query} live performance",
    ]


def test_fallback_short_query_gets_keywords_only():
    assert generate_fallback_suggestions("ab") == [
        "ab music", "ab song", "ab cover", "ab live", "ab official", "ab remix",
    ]


def test_parse_jsonp_payload():
    text = 'window.google.ac.h(["rain",[["rain sounds",0,[512]],["rainbow",0]],{"k":1}])'
    assert parse_suggestions_payload(text) == ["rain sounds", "rainbow"]


def test_parse_json_payload():
    assert parse_suggestions_payload('["rain", ["rain a", "rain b"]]') == ["rain a", "rain b"]


def test_parse_array_without_suggestions():
    assert parse_suggestions_payload('["rain"]') == []


@pytest.mark.parametrize("text", ['{"suggestions": []}', 'not json', 'window.google.ac.h(oops)'])
def test_parse_rejects_unrecognized_payloads(text):
    with pytest.raises(SuggestionsError):
        parse_suggestions_payload(text)


@mock.patch('suggestions.requests.get')
def test_fetch_returns_upstream_suggestions(get, fake_response):
    completions = [f"rain {i}" for i in range(10)]
    get.return_value = fake_response(json_data=["rain", completions])

    suggestions, fallback = fetch_suggestions("rain", URL, limit=8)

    assert suggestions == completions[:8]
    assert fallback is False
    assert get.call_args.kwargs['params'] == {'client': 'youtube', 'ds': 'yt', 'q': 'rain'}


@mock.patch('suggestions.requests.get')
def test_fetch_falls_back_on_network_error(get):
    get.side_effect = requests.ConnectionError("unreachable")

    suggestions, fallback = fetch_suggestions("rain", URL)

    assert fallback is True
    assert suggestions == generate_fallback_suggestions("rain")


@mock.patch('suggestions.requests.get')
def test_fetch_falls_back_on_error_status(get, fake_response):
    get.return_value = fake_response(status=503, text='unavailable')

    suggestions, fallback = fetch_suggestions("rain", URL)

    assert fallback is True
    assert len(suggestions) == 6


@mock.patch('suggestions.requests.get')
def test_fetch_falls_back_on_unparseable_body(get, fake_response):
    get.return_value = fake_response(text='<html>nope</html>')

    _, fallback = fetch_suggestions("rain", URL)

    assert fallback is True
