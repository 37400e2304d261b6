"""Configuration and environment settings."""

import os
from dotenv import load_dotenv

# Force reload of environment variables
load_dotenv(override=True)

# Directory Settings
DATA_DIR = os.getenv("DATA_DIR", "data")
CREDENTIALS_DIR = os.getenv("CREDENTIALS_DIR", os.path.join(DATA_DIR, "credentials"))
CREDENTIALS_FILE = os.getenv("CREDENTIALS_FILE", os.path.join(CREDENTIALS_DIR, "tokens.json"))

# OAuth Settings
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
APP_URL = os.getenv("APP_URL", "http://localhost:3001")
REDIRECT_URI = os.getenv("REDIRECT_URI", APP_URL)
AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
YOUTUBE_SCOPES = [
    "https://www.googleapis.com/auth/youtube.readonly",
    "https://www.googleapis.com/auth/youtube",
]

# Token Exchange Service (backend relay endpoints)
TOKEN_EXCHANGE_URL = os.getenv("TOKEN_EXCHANGE_URL", f"{APP_URL}/api/auth/exchange")
TOKEN_REFRESH_URL = os.getenv("TOKEN_REFRESH_URL", f"{APP_URL}/api/auth/refresh")
DEFAULT_EXPIRES_IN = 3600
TOKEN_SWEEP_INTERVAL = 60  # seconds between expiry checks

# Pipeline Settings
PAGE_SIZE = 50
VIDEO_BATCH_SIZE = 50  # videos.list accepts at most 50 ids
CHANNEL_VIDEO_LIMIT = 5
PLAYLIST_VIDEO_LIMIT = 50
MIN_DURATION_SECONDS = 60
MAX_DURATION_SECONDS = 1200
CHANNEL_DELAY_SECONDS = 0.25
