from cinelog.repositories.interface.movie_repository import MovieRepository
from cinelog.repositories.interface.review_repository import ReviewRepository
from cinelog.repositories.interface.watchlist_repository import WatchlistRepository
from cinelog.repositories.interface.profile_repository import ProfileRepository
from cinelog.repositories.implementation.sql_alchemy_movie_repo import SQLAlchemyMovieRepo
from cinelog.repositories.implementation.sql_alchemy_review_repo import SQLAlchemyReviewRepo
from cinelog.repositories.implementation.sql_alchemy_watchlist_repo import SQLAlchemyWatchlistRepo
from cinelog.repositories.implementation.sql_alchemy_profile_repo import SQLAlchemyProfileRepo
