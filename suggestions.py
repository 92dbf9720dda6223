import json
import logging

import requests

logger = logging.getLogger(__name__)

MUSIC_KEYWORDS = ["music", "song", "cover", "live", "official", "remix", "acoustic", "lyrics"]
JSONP_PREFIX = "window.google.ac.h("
MAX_FALLBACK_SUGGESTIONS = 6

HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36',
    'Accept': 'application/json, text/plain, */*',
}


class SuggestionsError(Exception):
    pass


def generate_fallback_suggestions(query):
    """Music flavoured completions for when the autocomplete service fails"""
    lowered = query.lower()
    suggestions = [f"{query} {keyword}" for keyword in MUSIC_KEYWORDS if keyword not in lowered]

    if len(query) > 2:
        suggestions += [
            f"{query} official music video",
            f"{query} lyrics",
            f"{query} cover",
            f"{query} live performance",
        ]

    return suggestions[:MAX_FALLBACK_SUGGESTIONS]


def parse_suggestions_payload(text):
    """Extract the suggestion strings from a JSON or JSONP autocomplete body.

    The body is an array whose second element lists the completions, each
    either a plain string or an array starting with the string.
    """
    if text.startswith(JSONP_PREFIX):
        start = text.find("[")
        end = text.rfind("]") + 1
        if start == -1 or end <= start:
            raise SuggestionsError("Malformed JSONP payload")
        text = text[start:end]

    try:
        data = json.loads(text)
    except ValueError as e:
        raise SuggestionsError(f"Unparseable payload: {e}") from e

    if not isinstance(data, list):
        raise SuggestionsError("Payload is not an array")
    if len(data) < 2 or not isinstance(data[1], list):
        return []

    suggestions = []
    for entry in data[1]:
        if isinstance(entry, list) and entry and isinstance(entry[0], str):
            entry = entry[0]
        if isinstance(entry, str):
            suggestions.append(entry)
    return suggestions


def fetch_suggestions(query, url, limit=8, timeout=10):
    """Returns (suggestions, fallback), never raises for upstream problems."""
    try:
        response = requests.get(
            url,
            params={'client': 'youtube', 'ds': 'yt', 'q': query},
            headers=HEADERS,
            timeout=timeout,
        )
        response.raise_for_status()
        suggestions = parse_suggestions_payload(response.text)
        return suggestions[:limit], False
    except (requests.RequestException, SuggestionsError) as e:
        logger.warning("Suggestions unavailable for %r, using fallback: %s", query, e)
        return generate_fallback_suggestions(query), True
