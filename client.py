"""Small HTTP client for the search and suggestion routes."""
import logging
import threading

import requests

from debounce import Debouncer
from models import Video

logger = logging.getLogger(__name__)


class ClientError(Exception):
    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def needs_api_key(self):
        return "API key" in self.message


class SoundWaveClient:
    def __init__(self, base_url, timeout=10):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

    def _get(self, path, params):
        try:
            response = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ClientError(str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = data.get('message') or data.get('error') or f"Request failed with status {response.status_code}"
            raise ClientError(message, response.status_code)
        return data

    def search(self, query, max_results=12):
        query = query.strip()
        if not query:
            return []
        data = self._get('/api/youtube/search', {'q': query, 'maxResults': max_results})
        return [Video.model_validate(v) for v in data.get('videos', [])]

    def suggestions(self, query):
        """Returns (suggestions, fallback)"""
        data = self._get('/api/youtube/suggestions', {'q': query})
        return data.get('suggestions', []), bool(data.get('fallback'))


class SuggestionBox:
    """Search-as-you-type: fetches suggestions once typing pauses.

    Results for anything but the latest text are dropped, so a slow answer
    for an old query never replaces a newer one.
    """

    def __init__(self, client, on_results, delay=0.3):
        self.client = client
        self.on_results = on_results
        self.debouncer = Debouncer(delay)
        self._lock = threading.Lock()
        self._generation = 0

    def type(self, text):
        with self._lock:
            self._generation += 1
            generation = self._generation

        if not text.strip():
            self.debouncer.cancel()
            self.on_results([])
            return
        self.debouncer.call(self._fetch, text, generation)

    def _fetch(self, text, generation):
        try:
            suggestions, _ = self.client.suggestions(text)
        except ClientError as e:
            logger.warning("Suggestion request failed: %s", e)
            suggestions = []

        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale suggestions for %r", text)
                return
        self.on_results(suggestions)
