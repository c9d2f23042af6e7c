from fastapi import APIRouter, Depends

from cinelog.domain.dto import SearchRequest, SearchResponse, TrendingResponse
from cinelog.service.dependencies import get_search_service
from cinelog.service.search_service import SearchService


router = APIRouter(
    prefix="/search",
    tags=["Search"]
)


@router.post("/movies", response_model=SearchResponse)
def search_movies(
    request: SearchRequest,
    search_service: SearchService = Depends(get_search_service)
):
    return search_service.search(request.query, request.page)


@router.get("/trending", response_model=TrendingResponse)
def trending_movies(search_service: SearchService = Depends(get_search_service)):
    return search_service.trending()
