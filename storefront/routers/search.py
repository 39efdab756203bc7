import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from storefront.core.config import settings
from storefront.core.mongo import get_mongo_db
from storefront.schemas.catalog import Customer, Language, Store, WorkContext
from storefront.schemas.search import PagingCommand, SearchModel, SearchTermStat, SearchTermStatsResponse
from storefront.services.currency_service import CurrencyService
from storefront.services.search_service import SearchRequestAggregator, get_search_aggregator
from storefront.services.search_term_service import SearchTermService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


def get_currency_service() -> CurrencyService:
    db = get_mongo_db()
    return CurrencyService(db)


def get_search_term_service() -> SearchTermService:
    db = get_mongo_db()
    return SearchTermService(db)


async def get_work_context(
    x_store_id: str | None = Header(default=None),
    x_language_id: str | None = Header(default=None),
    x_currency_code: str | None = Header(default=None),
    x_customer_id: str | None = Header(default=None),
    x_customer_roles: str | None = Header(default=None),
    currency_service: CurrencyService = Depends(get_currency_service),
) -> WorkContext:
    """Resolve customer, store, language and currency from request headers."""
    role_ids = [role.strip() for role in (x_customer_roles or "").split(",") if role.strip()]
    if not role_ids:
        role_ids = [settings.DEFAULT_CUSTOMER_ROLE]

    return WorkContext(
        customer=Customer(id=x_customer_id or "", role_ids=role_ids),
        store=Store(id=x_store_id or settings.DEFAULT_STORE_ID),
        language=Language(id=x_language_id or settings.DEFAULT_LANGUAGE_ID),
        currency=await currency_service.get_working_currency(x_currency_code),
    )


@router.get("", response_model=SearchModel)
async def search(
    q: str | None = Query(default=None, description="Search terms"),
    cid: str = Query(default="", description="Category id (advanced search)"),
    isc: bool = Query(default=False, description="Include subcategories"),
    mid: str = Query(default="", description="Manufacturer id (advanced search)"),
    vid: str = Query(default="", description="Vendor id (advanced search)"),
    pf: str | None = Query(default=None, description="Price from"),
    pt: str | None = Query(default=None, description="Price to"),
    sid: bool = Query(default=False, description="Search in product descriptions"),
    adv: bool = Query(default=False, description="Advanced search"),
    box: bool = Query(default=False, description="Submitted from the search box"),
    orderby: int | None = Query(default=None),
    pagesize: int = Query(default=0),
    pagenumber: int = Query(default=1),
    viewmode: str | None = Query(default=None),
    context: WorkContext = Depends(get_work_context),
    aggregator: SearchRequestAggregator = Depends(get_search_aggregator),
):
    """
    Search products.

    Returns the search page model: the normalized query, category/manufacturer/vendor
    options for the advanced search form, matching products and paging details.

    📝 **Examples:**
        ```
        /search?q=lamp
        /search?q=lamp&adv=true&cid=<category id>&isc=true&pf=10&pt=99.99
        /search?q=lamp&orderby=10&pagesize=9&pagenumber=2
        ```
    """
    model = SearchModel(q=q, cid=cid, isc=isc, mid=mid, vid=vid, pf=pf, pt=pt, sid=sid, adv=adv, box=box)
    command = PagingCommand(page_number=pagenumber, page_size=pagesize, order_by=orderby, view_mode=viewmode)

    try:
        return await aggregator.handle(model, command, context)
    except Exception as e:
        logger.exception("Search request failed")
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}") from e


@router.get("/terms", response_model=SearchTermStatsResponse)
async def search_term_stats(
    pagenumber: int = Query(default=1, ge=1),
    pagesize: int = Query(default=20, ge=1, le=1000),
    context: WorkContext = Depends(get_work_context),
    service: SearchTermService = Depends(get_search_term_service),
):
    """Most popular search terms of the current store."""
    stats = await service.get_stats(context.store.id, page_index=pagenumber - 1, page_size=pagesize)
    return SearchTermStatsResponse(
        store_id=context.store.id,
        terms=[SearchTermStat(keyword=term.keyword, count=term.count) for term in stats.items],
        page_number=pagenumber,
        page_size=pagesize,
        total_items=stats.total_count,
        total_pages=stats.total_pages,
    )


@router.get("/health")
async def search_health():
    """Check if search dependencies are reachable"""
    try:
        db = get_mongo_db()
        await db.command("ping")
        return {"status": "healthy", "database": settings.MONGO_DB_NAME}
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
