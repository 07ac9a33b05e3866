"""Manual search endpoints - GET /manuals/search, GET /manuals/categories."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from manualbot.app.api.deps import get_corpus, get_search_engine
from manualbot.app.db.repositories import CorpusAccess
from manualbot.app.errors import InvalidQuery, PersistenceError
from manualbot.app.models.common import MatchKind
from manualbot.app.models.manual import Manual
from manualbot.app.permissions import level_of
from manualbot.app.search.engine import SearchEngine

router = APIRouter(prefix="/manuals", tags=["manuals"])


class ManualHit(BaseModel):
    """Single search result."""

    id: str
    title: str
    category: str
    score: float
    match_kind: MatchKind


class ManualSearchResponse(BaseModel):
    """Response for GET /manuals/search."""

    query: str
    results: list[ManualHit]
    detail: bool


class CategoryCount(BaseModel):
    name: str
    count: int


class CategoryListResponse(BaseModel):
    """Response for GET /manuals/categories."""

    categories: list[CategoryCount]


async def _load(corpus: CorpusAccess) -> list[Manual]:
    try:
        return await corpus.all_active()
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Manual store unavailable",
        ) from e


@router.get("/search", response_model=ManualSearchResponse)
async def search_manuals(
    corpus: Annotated[CorpusAccess, Depends(get_corpus)],
    engine: Annotated[SearchEngine, Depends(get_search_engine)],
    q: Annotated[str, Query(description="Keyword")],
    level: Annotated[str, Query(description="Permission label, e.g. 一般")] = "一般",
) -> ManualSearchResponse:
    """Keyword search as a given permission level.

    Raises:
        HTTPException: 422 if the query length is out of bounds, 503 if the
            corpus cannot be loaded
    """
    manuals = await _load(corpus)

    try:
        results = engine.search(q, level_of(level), manuals)
    except InvalidQuery as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.reason
        ) from e

    return ManualSearchResponse(
        query=q,
        results=[
            ManualHit(
                id=r.document.id,
                title=r.document.title,
                category=r.document.category_path.label(),
                score=r.score,
                match_kind=r.match_kind,
            )
            for r in results
        ],
        detail=engine.is_detail_candidate(results),
    )


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(
    corpus: Annotated[CorpusAccess, Depends(get_corpus)],
    engine: Annotated[SearchEngine, Depends(get_search_engine)],
    level: Annotated[str, Query(description="Permission label, e.g. 一般")] = "一般",
) -> CategoryListResponse:
    """Major categories visible at a permission level with manual counts."""
    manuals = await _load(corpus)
    counts = engine.available_categories(level_of(level), manuals)
    return CategoryListResponse(
        categories=[CategoryCount(name=name, count=count) for name, count in counts.items()]
    )
