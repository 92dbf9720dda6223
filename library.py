import base64
import io
import logging
import os
from datetime import datetime, timezone

import mutagen

from accounts import timestamp_id
from models import Song

logger = logging.getLogger(__name__)

MAX_RECENT_SEARCHES = 5
ALREADY_IN_FAVORITES = 'Already in favorites'


class UploadError(Exception):
    pass


def add_favorite(state, video):
    """Append a video to the favorites; returns False if it was already there."""
    if any(fav.id == video.id for fav in state.favorites):
        return False
    state.favorites.append(video)
    return True


def remove_favorite(state, video_id):
    state.favorites = [fav for fav in state.favorites if fav.id != video_id]


def _unique_song_id(state):
    taken = {song.id for song in state.songs}
    song_id = int(timestamp_id())
    while str(song_id) in taken:
        song_id += 1
    return str(song_id)


def add_song(state, title, artist, file, duration):
    song = Song(
        id=_unique_song_id(state),
        title=title,
        artist=artist,
        file=file,
        duration=duration or 0,
        uploaded_at=datetime.now(timezone.utc).isoformat(),
    )
    state.songs.append(song)
    return song


def delete_song(state, song_id):
    state.songs = [song for song in state.songs if song.id != song_id]


def read_duration(data):
    """Duration in seconds of an audio file's bytes, 0 when unknown."""
    try:
        audio = mutagen.File(io.BytesIO(data))
    except mutagen.MutagenError as e:
        logger.warning("Could not read audio tags: %s", e)
        return 0
    if audio is None or audio.info is None:
        return 0
    return float(audio.info.length)


def audio_upload_to_song(state, upload, title=None, artist=None):
    """Add an uploaded audio file (a werkzeug FileStorage) to the library."""
    mimetype = upload.mimetype or ''
    if not mimetype.startswith('audio/'):
        raise UploadError('Only audio files can be uploaded')

    if not title:
        title = os.path.splitext(upload.filename or '')[0]
    if not title or not artist:
        raise UploadError('Title and artist are required')

    data = upload.read()
    if not data:
        raise UploadError('Uploaded file is empty')

    encoded = base64.b64encode(data).decode('ascii')
    file_url = f"data:{mimetype};base64,{encoded}"
    return add_song(state, title, artist, file_url, read_duration(data))


def remember_search(state, query):
    query = (query or '').strip()
    if not query:
        return state.recent_searches

    searches = [q for q in state.recent_searches if q != query]
    state.recent_searches = [query] + searches[:MAX_RECENT_SEARCHES - 1]
    return state.recent_searches
