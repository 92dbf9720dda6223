import base64
import io
from unittest import mock

import mutagen
import pytest
from werkzeug.datastructures import FileStorage

import library
from models import Video
from store import ClientState


@pytest.fixture
def state():
    return ClientState(store=None)


def test_add_favorite_ignores_duplicates(state):
    video = Video(id='abc', title='Song')

    assert library.add_favorite(state, video) is True
    assert library.add_favorite(state, Video(id='abc', title='Song, again')) is False

    assert len(state.favorites) == 1
    assert state.favorites[0].title == 'Song'


def test_remove_favorite_keeps_order(state):
    for video_id in 'abc':
        library.add_favorite(state, Video(id=video_id, title=video_id))

    library.remove_favorite(state, 'b')
    library.remove_favorite(state, 'missing')

    assert [v.id for v in state.favorites] == ['a', 'c']


def test_added_songs_get_unique_ids(state):
    with mock.patch('library.timestamp_id', return_value='1700000000000'):
        first = library.add_song(state, 'One', 'Artist', 'data:audio/mpeg;base64,AA==', 61.5)
        second = library.add_song(state, 'Two', 'Artist', 'data:audio/mpeg;base64,AA==', None)

    assert first.id == '1700000000000'
    assert second.id == '1700000000001'
    assert second.duration == 0
    assert first.uploaded_at

    library.delete_song(state, first.id)
    assert [s.id for s in state.songs] == [second.id]


def test_upload_becomes_a_data_url(state):
    upload = FileStorage(stream=io.BytesIO(b'fake mp3'), filename='Rain Song.mp3', content_type='audio/mpeg')

    with mock.patch('library.read_duration', return_value=183.2):
        song = library.audio_upload_to_song(state, upload, artist='Sam')

    assert song.title == 'Rain Song'
    assert song.duration == 183.2
    assert song.file == 'data:audio/mpeg;base64,' + base64.b64encode(b'fake mp3').decode()
    assert state.songs == [song]


def test_upload_rejects_non_audio(state):
    upload = FileStorage(stream=io.BytesIO(b'<html>'), filename='page.html', content_type='text/html')

    with pytest.raises(library.UploadError):
        library.audio_upload_to_song(state, upload, 'Title', 'Artist')
    assert state.songs == []


def test_upload_requires_artist(state):
    upload = FileStorage(stream=io.BytesIO(b'fake mp3'), filename='a.mp3', content_type='audio/mpeg')

    with pytest.raises(library.UploadError):
        library.audio_upload_to_song(state, upload, 'Title', None)


def test_read_duration_uses_tags():
    audio = mock.Mock()
    audio.info.length = 42.5
    with mock.patch('library.mutagen.File', return_value=audio):
        assert library.read_duration(b'data') == 42.5


@pytest.mark.parametrize('result', [None, mutagen.MutagenError('bad header')])
def test_read_duration_unknown_audio(result):
    kwargs = {'side_effect': result} if isinstance(result, Exception) else {'return_value': result}
    with mock.patch('library.mutagen.File', **kwargs):
        assert library.read_duration(b'data') == 0


def test_recent_searches_are_bounded_and_deduplicated(state):
    for query in ['a', 'b', 'c', 'd', 'e', 'f']:
        library.remember_search(state, query)
    assert state.recent_searches == ['f', 'e', 'd', 'c', 'b']

    library.remember_search(state, '  c ')
    assert state.recent_searches == ['c', 'f', 'e', 'd', 'b']

    library.remember_search(state, '   ')
    assert state.recent_searches == ['c', 'f', 'e', 'd', 'b']
