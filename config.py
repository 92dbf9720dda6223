import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

db_path = Path(__file__).parent / 'soundwave.db'


class Config:
    """Application configuration, read from the environment."""
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", f'sqlite:///{db_path}')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    YOUTUBE_API_KEY = os.environ.get("YOUTUBE_API_KEY")
    YOUTUBE_API_URL = os.environ.get("YOUTUBE_API_URL", "https://www.googleapis.com/youtube/v3")
    SUGGEST_URL = os.environ.get("SUGGEST_URL", "https://clients1.google.com/complete/search")

    REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", 10))
    DEFAULT_MAX_RESULTS = 12
    MAX_SUGGESTIONS = 8

    # Uploaded songs are kept inline as data URLs
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024
