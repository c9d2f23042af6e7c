from datetime import datetime
from decimal import Decimal
from typing import Optional, List


class Movie:
    def __init__(
        self,
        title: str,
        genre: List[str],
        release_year: int,
        director: str = "",
        actors: Optional[List[str]] = None,
        synopsis: str = "",
        poster_url: Optional[str] = None,
        trailer_url: Optional[str] = None,
        runtime: Optional[int] = None,
        average_rating: Decimal = Decimal("0.00"),
        total_reviews: int = 0,
        id: Optional[str] = None,
        created_at: datetime = None,
        updated_at: datetime = None
    ):
        self.title = title
        self.genre = genre
        self.release_year = release_year
        self.director = director
        self.actors = actors or []
        self.synopsis = synopsis
        self.poster_url = poster_url
        self.trailer_url = trailer_url
        self.runtime = runtime
        self.average_rating = average_rating
        self.total_reviews = total_reviews
        self.id = id
        self.created_at = created_at
        self.updated_at = updated_at


class Profile:
    def __init__(
        self,
        user_id: str,
        username: str,
        display_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
        bio: Optional[str] = None,
        favorite_genres: Optional[List[str]] = None,
        id: Optional[str] = None,
        created_at: datetime = None,
        updated_at: datetime = None
    ):
        self.user_id = user_id
        self.username = username
        self.display_name = display_name
        self.avatar_url = avatar_url
        self.bio = bio
        self.favorite_genres = favorite_genres or []
        self.id = id
        self.created_at = created_at
        self.updated_at = updated_at


class Review:
    def __init__(
        self,
        user_id: str,
        movie_id: str,
        rating: int,
        review_text: Optional[str] = None,
        id: Optional[str] = None,
        created_at: datetime = None,
        updated_at: datetime = None,
        author: Optional[Profile] = None,
        movie: Optional[Movie] = None
    ):
        self.user_id = user_id
        self.movie_id = movie_id
        self.rating = rating
        self.review_text = review_text
        self.id = id
        self.created_at = created_at
        self.updated_at = updated_at
        # joined snapshots, only filled by the listing queries
        self.author = author
        self.movie = movie


class WatchlistEntry:
    def __init__(
        self,
        user_id: str,
        movie_id: str,
        id: Optional[str] = None,
        added_at: datetime = None,
        movie: Optional[Movie] = None
    ):
        self.user_id = user_id
        self.movie_id = movie_id
        self.id = id
        self.added_at = added_at
        self.movie = movie


class ProfileStats:
    def __init__(
        self,
        total_reviews: int,
        average_rating: Decimal,
        watchlist_count: int,
        favorite_genre: str
    ):
        self.total_reviews = total_reviews
        self.average_rating = average_rating
        self.watchlist_count = watchlist_count
        self.favorite_genre = favorite_genre
