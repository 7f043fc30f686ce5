import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pvinspect.config import DEFAULT_RECOMMENDED_LIMIT, DEFAULT_SEARCH_LIMIT
from pvinspect.dependencies import get_aggregator
from pvinspect.models import CatalogStatistics, CategoryBreakdown, DemoEntry, DemoSearchResponse, PanelCondition
from pvinspect.services.result_aggregator import EmptyCatalogError, ResultAggregator

router = APIRouter(prefix="/api/demo", tags=["demo"])

logger = logging.getLogger(__name__)

@router.get("", response_model=List[DemoEntry])
async def list_demos(aggregator: ResultAggregator = Depends(get_aggregator)):
    return aggregator.get_all()

@router.get("/random", response_model=DemoEntry)
async def random_demo(aggregator: ResultAggregator = Depends(get_aggregator)):
    try:
        return aggregator.get_random()
    except EmptyCatalogError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.get("/recommended", response_model=List[DemoEntry])
async def recommended_demos(
    limit: int = Query(DEFAULT_RECOMMENDED_LIMIT, ge=0),
    aggregator: ResultAggregator = Depends(get_aggregator),
):
    return aggregator.get_recommended(limit)

@router.get("/stats", response_model=CatalogStatistics)
async def demo_statistics(aggregator: ResultAggregator = Depends(get_aggregator)):
    return aggregator.get_statistics()

@router.get("/categories", response_model=List[CategoryBreakdown])
async def demo_categories(aggregator: ResultAggregator = Depends(get_aggregator)):
    return aggregator.get_category_breakdown()

@router.get("/search", response_model=DemoSearchResponse)
async def search_demos(
    q: str = "",
    category: Optional[PanelCondition] = None,
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1),
    aggregator: ResultAggregator = Depends(get_aggregator),
):
    matches = aggregator.search(q)
    if category is not None:
        matches = tuple(entry for entry in matches if entry.category == category)

    logger.info(f"Demo search '{q}' (category={category}): {len(matches)} matches, returning {min(len(matches), limit)}")
    return DemoSearchResponse(
        results=list(matches[:limit]),
        total=len(matches),
        query=q,
        category=category
    )

@router.get("/category/{category}", response_model=List[DemoEntry])
async def demos_by_category(category: PanelCondition, aggregator: ResultAggregator = Depends(get_aggregator)):
    return aggregator.get_by_category(category)

@router.get("/{demo_id}", response_model=DemoEntry)
async def get_demo(demo_id: str, aggregator: ResultAggregator = Depends(get_aggregator)):
    entry = aggregator.get_by_id(demo_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Demo entry not found")
    return entry
