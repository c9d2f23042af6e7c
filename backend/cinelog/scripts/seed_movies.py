import argparse
import logging

from cinelog.config.logging import setup_logging
from cinelog.db.database import SessionLocal, engine, Base, transaction
from cinelog.domain.models import Movie
from cinelog.repositories import SQLAlchemyMovieRepo

logger = logging.getLogger(__name__)

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"

SAMPLE_MOVIES = [
    Movie(
        title="The Shawshank Redemption",
        genre=["Drama"],
        release_year=1994,
        director="Frank Darabont",
        actors=["Tim Robbins", "Morgan Freeman"],
        synopsis="Two imprisoned men bond over years, finding solace and redemption.",
        runtime=142,
        poster_url=f"{POSTER_BASE_URL}/9cqNxx0GxF0bflyCy3FpPiy3BXg.jpg"
    ),
    Movie(
        title="The Godfather",
        genre=["Crime", "Drama"],
        release_year=1972,
        director="Francis Ford Coppola",
        actors=["Marlon Brando", "Al Pacino"],
        synopsis="The aging patriarch of an organized crime dynasty transfers control to his son.",
        runtime=175,
        poster_url=f"{POSTER_BASE_URL}/3bhkrj58Vtu7enYsRolD1fZdja1.jpg"
    ),
    Movie(
        title="The Dark Knight",
        genre=["Action", "Crime", "Drama"],
        release_year=2008,
        director="Christopher Nolan",
        actors=["Christian Bale", "Heath Ledger"],
        synopsis="Batman faces the Joker's chaos in Gotham.",
        runtime=152,
        poster_url=f"{POSTER_BASE_URL}/qJ2tW6WMUDux911r6m7haRef0WH.jpg"
    ),
    Movie(
        title="Pulp Fiction",
        genre=["Crime", "Drama"],
        release_year=1994,
        director="Quentin Tarantino",
        actors=["John Travolta", "Uma Thurman", "Samuel L. Jackson"],
        synopsis="Interwoven tales of crime and redemption.",
        runtime=154,
        poster_url=f"{POSTER_BASE_URL}/d5iIlFn5s0ImszYzBPb8JPIfbXD.jpg"
    ),
    Movie(
        title="Inception",
        genre=["Action", "Sci-Fi", "Thriller"],
        release_year=2010,
        director="Christopher Nolan",
        actors=["Leonardo DiCaprio", "Marion Cotillard"],
        synopsis="A thief who steals secrets through dream-sharing is tasked with inception.",
        runtime=148,
        poster_url=f"{POSTER_BASE_URL}/9gk7adHYeDvHkCSEqAvQNLV5Uge.jpg"
    ),
]


def seed_movies(session, movies=SAMPLE_MOVIES) -> int:
    """Insert the sample catalog, but only into an empty movies table.

    Returns:
        int: number of movies added
    """
    movie_repo = SQLAlchemyMovieRepo(session)

    with transaction(session):
        if movie_repo.count() > 0:
            logger.info("Catalog already has movies, skipping seed")
            return 0

        for movie in movies:
            movie_repo.add_movie(movie)

    logger.info(f"Seeded {len(movies)} movies")
    return len(movies)


def main():
    parser = argparse.ArgumentParser(description="Create the schema and seed the sample movie catalog")
    parser.add_argument("--no-create", action="store_true", help="do not create missing tables first")
    args = parser.parse_args()

    setup_logging()
    if not args.no_create:
        Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        seed_movies(session)
    finally:
        session.close()


if __name__ == "__main__":
    main()
