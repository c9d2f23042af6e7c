from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from typing import Optional, List


class TokenData(BaseModel):
    user_id: str
    email: Optional[str] = None
    username: Optional[str] = None
    display_name: Optional[str] = None


class MovieResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    genre: List[str]
    release_year: int
    director: str
    actors: List[str]
    synopsis: str
    poster_url: Optional[str] = None
    trailer_url: Optional[str] = None
    runtime: Optional[int] = None
    average_rating: float
    total_reviews: int


class AuthorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    display_name: Optional[str] = None


class MovieSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    poster_url: Optional[str] = None


class ReviewCreate(BaseModel):
    movie_id: str
    # strict so 4.5 or "4" is rejected instead of coerced
    rating: StrictInt = Field(..., ge=1, le=5)
    review_text: Optional[str] = Field(None, max_length=5000)


class ReviewUpdate(BaseModel):
    rating: StrictInt = Field(..., ge=1, le=5)
    review_text: Optional[str] = Field(None, max_length=5000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    movie_id: str
    rating: int
    review_text: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    author: Optional[AuthorSummary] = None
    movie: Optional[MovieSummary] = None


class WatchlistAdd(BaseModel):
    movie_id: str


class WatchlistEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    movie_id: str
    added_at: datetime
    movie: Optional[MovieResponse] = None


class WatchlistStatus(BaseModel):
    movie_id: str
    in_watchlist: bool


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    favorite_genres: List[str] = []


class ProfileUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=1000)
    favorite_genres: Optional[List[str]] = None

    @field_validator('favorite_genres')
    @classmethod
    def limit_genres(cls, v):
        if v is not None and len(v) > 20:
            raise ValueError('At most 20 favorite genres are allowed')
        return v


class ProfileStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_reviews: int
    average_rating: float
    watchlist_count: int
    favorite_genre: str


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    page: int = Field(1, ge=1)


class SearchMovie(BaseModel):
    id: str
    title: str
    synopsis: str
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    release_year: Optional[int] = None
    average_rating: float
    total_reviews: int
    genre_ids: List[int]
    external_id: int


class SearchResponse(BaseModel):
    movies: List[SearchMovie]
    total_pages: int
    total_results: int
    current_page: int


class TrendingResponse(BaseModel):
    movies: List[SearchMovie]
