from cinelog.config.environment import *

VERSION = "0.1.0"
API_TITLE = "Cinelog API"
API_DESCRIPTION = "API for movie reviews, ratings and watchlists"

# Rating bounds for a single review
MIN_RATING = 1
MAX_RATING = 5

# Catalog listing sizes used by the home page
FEATURED_LIMIT = 6
TOP_RATED_LIMIT = 4
RECENT_REVIEWS_LIMIT = 5
TRENDING_LIMIT = 20


def validate_config():
    if MIN_RATING >= MAX_RATING:
        raise ValueError("MIN_RATING must be less than MAX_RATING")
    if not JWT_ALGORITHM:
        raise ValueError("JWT_ALGORITHM must be set")
    if APP_ENV == 'production' and JWT_SECRET_KEY == 'local-development-secret':
        raise ValueError("JWT_SECRET_KEY must be set in production")
    if TMDB_TIMEOUT_SECONDS <= 0:
        raise ValueError("TMDB_TIMEOUT_SECONDS must be positive")


validate_config()
