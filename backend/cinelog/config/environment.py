from pathlib import Path
import os
from dotenv import load_dotenv

env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

APP_ENV = os.getenv('APP_ENV', 'development').lower()

# Tokens are issued by the external identity provider; we only verify them.
JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'local-development-secret')
JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
JWT_AUDIENCE = os.getenv('JWT_AUDIENCE') or None

DATABASE_URL = os.getenv('DATABASE_URL')
DB_USER = os.getenv('DB_USER')
DB_PASSWORD = os.getenv('DB_PASSWORD')
DB_HOST = os.getenv('DB_HOST')
DB_PORT = os.getenv('DB_PORT', '5432')
DB_NAME = os.getenv('DB_NAME', 'cinelog')
USE_SQLITE = os.getenv('USE_SQLITE', 'true' if not DB_HOST else 'false').lower() == 'true'
SQLITE_PATH = os.getenv('SQLITE_PATH', './cinelog.db')

TMDB_API_KEY = os.getenv('TMDB_API_KEY')
TMDB_BASE_URL = os.getenv('TMDB_BASE_URL', 'https://api.themoviedb.org/3')
TMDB_TIMEOUT_SECONDS = float(os.getenv('TMDB_TIMEOUT_SECONDS', '10'))

LOG_DIR = os.getenv('LOG_DIR', 'logs')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()


def get_database_url() -> str:
    if DATABASE_URL:
        return DATABASE_URL
    if USE_SQLITE:
        return f"sqlite:///{SQLITE_PATH}"
    return f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
