import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from cinelog.config import TMDB_API_KEY, TMDB_BASE_URL, TMDB_TIMEOUT_SECONDS, TRENDING_LIMIT
from cinelog.exceptions.service import InvalidInputException
from cinelog.exceptions.search import SearchConfigurationException, SearchFailedException

logger = logging.getLogger(__name__)

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
BACKDROP_BASE_URL = "https://image.tmdb.org/t/p/w1280"
NO_SYNOPSIS = "No synopsis available"


def _release_year(release_date: Optional[str]) -> Optional[int]:
    if not release_date:
        return None
    try:
        return date.fromisoformat(release_date).year
    except ValueError:
        return None


def _one_decimal(value: Optional[float]) -> float:
    # half-up, not Python's banker's rounding
    return math.floor((value or 0) * 10 + 0.5) / 10


def to_search_result(movie: Dict[str, Any]) -> Dict[str, Any]:
    """Map a movie database record to the shape the frontend consumes."""
    poster_path = movie.get('poster_path')
    backdrop_path = movie.get('backdrop_path')
    return {
        'id': str(movie['id']),
        'title': movie.get('title') or '',
        'synopsis': movie.get('overview') or NO_SYNOPSIS,
        'poster_url': f"{POSTER_BASE_URL}{poster_path}" if poster_path else None,
        'backdrop_url': f"{BACKDROP_BASE_URL}{backdrop_path}" if backdrop_path else None,
        'release_year': _release_year(movie.get('release_date')),
        'average_rating': _one_decimal(movie.get('vote_average')),
        'total_reviews': movie.get('vote_count') or 0,
        'genre_ids': movie.get('genre_ids') or [],
        'external_id': movie['id'],
    }


def _map_results(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    results = []
    for movie in data.get('results') or []:
        if not isinstance(movie, dict) or movie.get('id') is None:
            logger.warning('Skipping movie database record without an id')
            continue
        results.append(to_search_result(movie))
    return results


class SearchService:
    """Thin proxy over the external movie database API."""

    def __init__(
        self,
        api_key: Optional[str] = TMDB_API_KEY,
        base_url: str = TMDB_BASE_URL,
        timeout: float = TMDB_TIMEOUT_SECONDS
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise SearchConfigurationException("TMDB API key not configured")

        try:
            response = requests.get(
                f"{self.base_url}{path}",
                params={'api_key': self.api_key, **params},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Movie database request to {path} failed: {str(e)}")
            raise SearchFailedException(f"Movie database unreachable: {str(e)}") from e

        if response.status_code != 200:
            logger.error(f"Movie database returned {response.status_code} for {path}")
            raise SearchFailedException(f"TMDB API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise SearchFailedException("TMDB API returned malformed JSON") from e
        if not isinstance(data, dict):
            raise SearchFailedException("TMDB API returned an unexpected payload")
        return data

    def search(self, query: str, page: int = 1) -> Dict[str, Any]:
        if not query or not query.strip():
            raise InvalidInputException("Search query is required")
        if page < 1:
            raise InvalidInputException("page must be at least 1")

        data = self._get('/search/movie', {'query': query.strip(), 'page': page})
        movies: List[Dict[str, Any]] = _map_results(data)

        return {
            'movies': movies,
            'total_pages': data.get('total_pages', 0),
            'total_results': data.get('total_results', 0),
            'current_page': page,
        }

    def trending(self) -> Dict[str, Any]:
        data = self._get('/trending/movie/week', {})
        return {'movies': _map_results(data)[:TRENDING_LIMIT]}
