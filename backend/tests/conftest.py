import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cinelog.db.models import Base, MovieORM, ProfileORM


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database, shared across threads for the API tests."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """SQLite database on disk: each session gets its own connection, so uncommitted
    writes are invisible to other sessions, and foreign keys are enforced."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'cinelog.db'}",
        connect_args={"check_same_thread": False, "timeout": 30}
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def catalog(session):
    """Two profiles and three movies with empty aggregates."""
    profiles = [
        ProfileORM(user_id="user-1", username="alice", display_name="Alice"),
        ProfileORM(user_id="user-2", username="bob", display_name="Bob"),
        ProfileORM(user_id="user-3", username="carol", display_name="Carol"),
    ]
    movies = [
        MovieORM(
            id="movie-1",
            title="Inception",
            genre=["Action", "Sci-Fi", "Thriller"],
            release_year=2010,
            director="Christopher Nolan",
            actors=["Leonardo DiCaprio", "Marion Cotillard"],
            synopsis="A thief who steals secrets through dream-sharing is tasked with inception.",
            runtime=148
        ),
        MovieORM(
            id="movie-2",
            title="The Godfather",
            genre=["Crime", "Drama"],
            release_year=1972,
            director="Francis Ford Coppola",
            actors=["Marlon Brando", "Al Pacino"],
            synopsis="The aging patriarch of an organized crime dynasty transfers control to his son.",
            runtime=175
        ),
        MovieORM(
            id="movie-3",
            title="Pulp Fiction",
            genre=["Crime", "Drama"],
            release_year=1994,
            director="Quentin Tarantino",
            actors=["John Travolta", "Uma Thurman", "Samuel L. Jackson"],
            synopsis="Interwoven tales of crime and redemption.",
            runtime=154
        ),
    ]
    session.add_all(profiles + movies)
    session.commit()
    return {"profiles": profiles, "movies": movies}
