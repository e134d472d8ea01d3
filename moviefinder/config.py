from os import getenv
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# OMDb settings
OMDB_BASE_URL = getenv("OMDB_BASE_URL", "https://www.omdbapi.com/")
OMDB_API_KEY = getenv("OMDB_API_KEY", "2f1654d6")

# Database settings
DATABASE_URL = getenv("DATABASE_URL", "sqlite+aiosqlite:///movie_database.db")

# Bot settings
BOT_TOKEN = getenv("BOT_TOKEN")

# Error logging channel
ERROR_CHANNEL_ID = getenv("ERROR_CHANNEL_ID")
if ERROR_CHANNEL_ID:
    try:
        ERROR_CHANNEL_ID = int(ERROR_CHANNEL_ID)
    except ValueError:
        raise ValueError("ERROR_CHANNEL_ID must be an integer chat id")

LOG_LEVEL = getenv("LOG_LEVEL", "INFO").upper()

# Optional self-hosted Bot API server, e.g. http://localhost:8081
TELEGRAM_API_SERVER = getenv("TELEGRAM_API_SERVER")
