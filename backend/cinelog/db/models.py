import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Numeric, JSON, ForeignKey,
    CheckConstraint, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship
from cinelog.db.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MovieORM(Base):
    __tablename__ = "movies"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(Text, nullable=False, index=True)
    genre = Column(JSON, nullable=False, default=list)
    release_year = Column(Integer, nullable=False)
    director = Column(Text, nullable=False, default="")
    actors = Column(JSON, nullable=False, default=list)
    synopsis = Column(Text, nullable=False, default="")
    poster_url = Column(Text)
    trailer_url = Column(Text)
    runtime = Column(Integer)
    # written only by the rating aggregator
    average_rating = Column(Numeric(3, 2), nullable=False, default=0)
    total_reviews = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    reviews = relationship("ReviewORM", back_populates="movie", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("average_rating >= 0 AND average_rating <= 5", name="check_average_rating_range"),
        CheckConstraint("total_reviews >= 0", name="check_total_reviews_non_negative"),
    )


class ProfileORM(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False)
    display_name = Column(String(100))
    avatar_url = Column(Text)
    bio = Column(Text)
    favorite_genres = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


class ReviewORM(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False)
    movie_id = Column(String(36), ForeignKey("movies.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)
    review_text = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    movie = relationship("MovieORM", back_populates="reviews")
    author = relationship("ProfileORM", primaryjoin="ReviewORM.user_id == ProfileORM.user_id", viewonly=True)

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
        UniqueConstraint("user_id", "movie_id", name="unique_review_user_movie"),
        Index("idx_reviews_movie", "movie_id"),
        Index("idx_reviews_created", "created_at"),
    )


class WatchlistORM(Base):
    __tablename__ = "watchlist"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False)
    movie_id = Column(String(36), ForeignKey("movies.id", ondelete="CASCADE"), nullable=False)
    added_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    movie = relationship("MovieORM")

    __table_args__ = (
        UniqueConstraint("user_id", "movie_id", name="unique_watchlist_user_movie"),
        Index("idx_watchlist_user", "user_id"),
    )
