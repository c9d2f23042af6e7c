import logging
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinelog.config import VERSION, API_TITLE, API_DESCRIPTION
from cinelog.config.logging import setup_logging
from cinelog.db.database import engine, Base
from cinelog.controllers.movie_controller import router as movie_router
from cinelog.controllers.review_controller import router as review_router
from cinelog.controllers.watchlist_controller import router as watchlist_router
from cinelog.controllers.profile_controller import router as profile_router
from cinelog.controllers.search_controller import router as search_router
from cinelog.exceptions.repository import RepositoryException
from cinelog.exceptions.search import SearchConfigurationException, SearchFailedException
from cinelog.exceptions.service import (
    ServiceException,
    InvalidInputException,
    DuplicateEntryException,
    ForbiddenException,
    NotFoundException,
    AggregationFailureException
)

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=VERSION
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include controllers
app.include_router(movie_router)
app.include_router(review_router)
app.include_router(watchlist_router)
app.include_router(profile_router)
app.include_router(search_router)

# most specific first; the first isinstance match wins
ERROR_STATUS = [
    (InvalidInputException, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (DuplicateEntryException, status.HTTP_409_CONFLICT),
    (ForbiddenException, status.HTTP_403_FORBIDDEN),
    (NotFoundException, status.HTTP_404_NOT_FOUND),
    (AggregationFailureException, status.HTTP_503_SERVICE_UNAVAILABLE),
    (SearchConfigurationException, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (SearchFailedException, status.HTTP_502_BAD_GATEWAY),
]


def status_for(exc: Exception) -> int:
    for exc_type, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(ServiceException)
@app.exception_handler(SearchConfigurationException)
@app.exception_handler(SearchFailedException)
async def service_exception_handler(request: Request, exc: Exception):
    code = status_for(exc)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {str(exc)}")
    detail = str(exc)
    if isinstance(exc, AggregationFailureException):
        detail = "Temporary failure while saving your review, please try again"
    return JSONResponse(status_code=code, content={"detail": detail})


@app.exception_handler(RepositoryException)
async def repository_exception_handler(request: Request, exc: RepositoryException):
    logger.error(f"{request.method} {request.url.path} storage error: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage error"}
    )


def init_db():
    Base.metadata.create_all(bind=engine)


@app.on_event("startup")
async def startup_event():
    init_db()
    logger.info("Database schema ready")


@app.get("/")
async def root():
    return {"message": API_TITLE}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
