from flask import Blueprint, Flask, current_app, jsonify, request, session
from flask_cors import CORS
from functools import wraps
import logging
import os
import uuid

from pydantic import ValidationError

import accounts
import library
from config import Config
from database import db, Client
from models import Video
from playback import PlaybackQueue
from store import ClientState, LocalStore
from suggestions import fetch_suggestions
from youtube import YouTubeAPIError, search_youtube

logger = logging.getLogger(__name__)

MAX_RESULTS_LIMIT = 50

api = Blueprint('api', __name__)

def get_or_create_client():
    """Get or create the storage owner for this browser's session"""
    if 'client_id' not in session:
        session['client_id'] = str(uuid.uuid4())

    client = Client.query.filter_by(session_id=session['client_id']).first()
    if not client:
        client = Client(session_id=session['client_id'])
        db.session.add(client)
        db.session.commit()

    return client

def load_state():
    return ClientState(LocalStore(get_or_create_client())).load()

def login_required(view):
    """Pass the loaded client state to the view, or refuse with 401"""
    @wraps(view)
    def wrapper(*args, **kwargs):
        state = load_state()
        if state.user is None:
            return jsonify({'error': 'Not logged in'}), 401
        return view(state, *args, **kwargs)
    return wrapper

@api.route('/api/youtube/search', methods=['GET'])
def youtube_search():
    """Search YouTube for music videos"""
    query = request.args.get('q')
    if not query:
        return jsonify({'error': 'Query parameter is required'}), 400

    config = current_app.config
    max_results = request.args.get('maxResults', config['DEFAULT_MAX_RESULTS'], type=int)
    max_results = max(1, min(MAX_RESULTS_LIMIT, max_results))

    api_key = config.get('YOUTUBE_API_KEY')
    if not api_key:
        logger.error("YouTube API key not found in environment variables")
        return jsonify({
            'error': 'YouTube API key not configured',
            'message': 'Please add your YouTube API key as YOUTUBE_API_KEY to your .env file',
        }), 500

    try:
        videos = search_youtube(query, max_results, api_key, config['YOUTUBE_API_URL'], config['REQUEST_TIMEOUT'])
    except YouTubeAPIError as e:
        logger.error("YouTube search failed: %s", e)
        return jsonify({
            'error': 'Failed to search YouTube',
            'message': str(e),
            'details': 'Check your API key and ensure YouTube Data API v3 is enabled',
        }), 500

    return jsonify({'videos': [video.to_json() for video in videos]})

@api.route('/api/youtube/suggestions', methods=['GET'])
def youtube_suggestions():
    """Autocomplete a search query, with generated suggestions when upstream fails"""
    query = request.args.get('q')
    if not query:
        return jsonify({'error': 'Query parameter is required'}), 400

    config = current_app.config
    suggestions, fallback = fetch_suggestions(
        query, config['SUGGEST_URL'], config['MAX_SUGGESTIONS'], config['REQUEST_TIMEOUT'])

    body = {'suggestions': suggestions}
    if fallback:
        body['fallback'] = True
    return jsonify(body)

@api.route('/api/auth/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    email = data.get('email')
    password = data.get('password')

    if not name or not email or not password:
        return jsonify({'error': 'Name, email and password are required'}), 400

    state = load_state()
    try:
        user = accounts.register(state, name, email, password)
    except accounts.AuthError as e:
        return jsonify({'error': str(e)}), 400
    state.save()

    return jsonify({'success': True, 'message': 'Account created successfully.', 'user': user.to_json()})

@api.route('/api/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = data.get('email')
    password = data.get('password')

    if not email or not password:
        return jsonify({'error': 'Email and password are required'}), 400

    state = load_state()
    try:
        user = accounts.login(state, email, password)
    except accounts.AuthError as e:
        return jsonify({'error': str(e)}), 401
    state.save()

    return jsonify({'success': True, 'message': 'Successfully logged in.', 'user': user.to_json()})

@api.route('/api/auth/logout', methods=['POST'])
def logout():
    state = load_state()
    accounts.logout(state)
    state.save()
    return jsonify({'success': True, 'message': 'Successfully logged out.'})

@api.route('/api/auth/session', methods=['GET'])
def current_session():
    state = load_state()
    return jsonify({'user': state.user.to_json() if state.user else None})

@api.route('/api/favorites', methods=['GET'])
@login_required
def get_favorites(state):
    return jsonify({'favorites': [video.to_json() for video in state.favorites]})

@api.route('/api/favorites', methods=['POST'])
@login_required
def add_favorite(state):
    data = request.get_json(silent=True) or {}
    try:
        video = Video.model_validate(data.get('video'))
    except ValidationError:
        return jsonify({'error': 'Invalid video'}), 400

    added = library.add_favorite(state, video)
    if added:
        state.save()
    message = 'Added to favorites' if added else library.ALREADY_IN_FAVORITES

    return jsonify({
        'success': True,
        'added': added,
        'message': message,
        'favorites': [fav.to_json() for fav in state.favorites],
    })

@api.route('/api/favorites/<video_id>', methods=['DELETE'])
@login_required
def remove_favorite(state, video_id):
    library.remove_favorite(state, video_id)
    state.save()
    return jsonify({'success': True, 'favorites': [fav.to_json() for fav in state.favorites]})

@api.route('/api/library', methods=['GET'])
@login_required
def get_library(state):
    return jsonify({'songs': [song.to_json() for song in state.songs]})

@api.route('/api/library', methods=['POST'])
@login_required
def upload_song(state):
    """Add a song, either as an audio file upload or as JSON"""
    upload = request.files.get('file')
    try:
        if upload:
            song = library.audio_upload_to_song(
                state, upload, request.form.get('title'), request.form.get('artist'))
        else:
            data = request.get_json(silent=True) or {}
            if not data.get('title') or not data.get('artist') or not data.get('file'):
                return jsonify({'error': 'Title, artist and file are required'}), 400
            song = library.add_song(state, data['title'], data['artist'], data['file'], data.get('duration'))
    except library.UploadError as e:
        return jsonify({'error': str(e)}), 400
    except ValidationError:
        return jsonify({'error': 'Invalid song'}), 400

    state.save()
    return jsonify({'success': True, 'message': 'Song uploaded successfully.', 'song': song.to_json()})

@api.route('/api/library/<song_id>', methods=['DELETE'])
@login_required
def delete_song(state, song_id):
    library.delete_song(state, song_id)
    state.save()
    return jsonify({'success': True, 'message': 'Song removed from library.'})

@api.route('/api/recent-searches', methods=['GET', 'POST', 'DELETE'])
@login_required
def recent_searches(state):
    if request.method == 'POST':
        data = request.get_json(silent=True) or {}
        library.remember_search(state, data.get('query'))
        state.save()
    elif request.method == 'DELETE':
        state.recent_searches = []
        state.save()

    return jsonify({'searches': state.recent_searches})

@api.route('/api/player/<action>', methods=['POST'])
@login_required
def player_step(state, action):
    """Pick the next item to play from the favorites or the library"""
    if action not in ('next', 'previous', 'ended'):
        return jsonify({'error': 'Unknown player action'}), 404

    data = request.get_json(silent=True) or {}
    source = data.get('queue', 'favorites')
    if source == 'favorites':
        items = state.favorites
    elif source == 'library':
        items = state.songs
    else:
        return jsonify({'error': 'Unknown queue'}), 400

    queue = PlaybackQueue(items, shuffle=bool(data.get('shuffle')), repeat=bool(data.get('repeat')))
    current = next((item for item in items if item.id == data.get('currentId')), None)

    if action == 'next':
        item = queue.next(current)
    elif action == 'previous':
        item = queue.previous(current)
    else:
        item = queue.after_ended(current)

    return jsonify({'item': item.to_json() if item else None})

@api.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({'status': 'ok'})

def not_found(e):
    return jsonify({'error': 'Not found'}), 404

def internal_error(e):
    return jsonify({'error': 'Internal server error'}), 500

def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    db.init_app(app)
    CORS(app)

    app.register_blueprint(api)
    app.register_error_handler(404, not_found)
    app.register_error_handler(500, internal_error)

    with app.app_context():
        db.create_all()

    return app

def main():
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=False)

if __name__ == '__main__':
    main()
