import json
import logging

from pydantic import ValidationError

from database import db, StorageItem
from models import SessionUser, Song, User, Video

logger = logging.getLogger(__name__)

USER_KEY = 'musicapp_user'
USERS_KEY = 'musicapp_users'
SONGS_KEY = 'musicapp_songs'
FAVORITES_KEY = 'musicapp_favorites'
RECENT_SEARCHES_KEY = 'musicapp_recent_searches'


class LocalStore:
    """Key-value storage of one client, values are strings."""

    def __init__(self, client):
        self.client = client

    def _find(self, key):
        return StorageItem.query.filter_by(client_id=self.client.id, key=key).first()

    def get_item(self, key):
        item = self._find(key)
        return item.value if item else None

    def set_item(self, key, value):
        item = self._find(key)
        if item:
            item.value = value
        else:
            db.session.add(StorageItem(client_id=self.client.id, key=key, value=value))
        db.session.commit()

    def remove_item(self, key):
        item = self._find(key)
        if item:
            db.session.delete(item)
            db.session.commit()

    def get_json(self, key, default=None):
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable value under %r", key)
            return default

    def set_json(self, key, value):
        self.set_item(key, json.dumps(value))


def _parse_records(model, raw, key):
    if not isinstance(raw, list):
        return []

    records = []
    seen = set()
    for entry in raw:
        try:
            record = model.model_validate(entry)
        except ValidationError as e:
            logger.warning("Skipping invalid entry under %r: %s", key, e)
            continue
        if record.id in seen:
            continue
        seen.add(record.id)
        records.append(record)
    return records


class ClientState:
    """Everything a client keeps in its local storage.

    Call load() before reading and save() after changing anything. Only the
    keys whose content changed since load() are written back.
    """

    def __init__(self, store):
        self.store = store
        self.user = None
        self.users = []
        self.songs = []
        self.favorites = []
        self.recent_searches = []
        self._snapshot = {}

    def load(self):
        raw_user = self.store.get_json(USER_KEY)
        try:
            self.user = SessionUser.model_validate(raw_user) if raw_user else None
        except ValidationError:
            logger.warning("Discarding invalid session record")
            self.user = None

        self.users = _parse_records(User, self.store.get_json(USERS_KEY, []), USERS_KEY)
        self.songs = _parse_records(Song, self.store.get_json(SONGS_KEY, []), SONGS_KEY)
        self.favorites = _parse_records(Video, self.store.get_json(FAVORITES_KEY, []), FAVORITES_KEY)

        searches = self.store.get_json(RECENT_SEARCHES_KEY, [])
        if not isinstance(searches, list):
            searches = []
        self.recent_searches = [q for q in searches if isinstance(q, str)]

        self._snapshot = self._serialize()
        return self

    def save(self):
        current = self._serialize()
        for key, value in current.items():
            if self._snapshot.get(key) == value:
                continue
            if value is None:
                self.store.remove_item(key)
            else:
                self.store.set_item(key, value)
        self._snapshot = current

    def _serialize(self):
        return {
            USER_KEY: json.dumps(self.user.to_json()) if self.user else None,
            USERS_KEY: json.dumps([u.to_json() for u in self.users]),
            SONGS_KEY: json.dumps([s.to_json() for s in self.songs]),
            FAVORITES_KEY: json.dumps([v.to_json() for v in self.favorites]),
            RECENT_SEARCHES_KEY: json.dumps(self.recent_searches),
        }
