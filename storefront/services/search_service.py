"""Search page aggregation: facets, product search, paging and search-term statistics"""

import logging
import re
from decimal import Decimal

from storefront.core.cache import SEARCH_CATEGORIES_MODEL_KEY, MemoryCacheManager, get_cache_manager
from storefront.core.config import Settings, settings
from storefront.core.mongo import get_mongo_db
from storefront.core.pagination import PagedList
from storefront.schemas.catalog import Currency, SearchTerm, WorkContext
from storefront.schemas.search import (
    PagingCommand,
    ProductSortingEnum,
    SearchCategoryOption,
    SearchModel,
    SelectListItem,
)
from storefront.services.catalog_options_service import CatalogOptionsService
from storefront.services.category_service import CategoryService
from storefront.services.currency_service import CurrencyService
from storefront.services.localization_service import LocalizationService, get_localized
from storefront.services.manufacturer_service import ManufacturerService
from storefront.services.product_service import ProductService
from storefront.services.product_view_model_service import ProductViewModelService
from storefront.services.search_term_service import SearchTermService
from storefront.services.vendor_service import VendorService

logger = logging.getLogger(__name__)

BREADCRUMB_SEPARATOR = " >> "
PRICE_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")


def parse_price(value: str | None) -> Decimal | None:
    """
    Parse a price bound typed by the customer; anything unparseable means no bound.

    Accepts an optional sign, digits with "," group separators and one decimal
    point. Exponents, underscores, NaN and infinity are rejected.
    """
    if not value:
        return None
    text = value.strip().replace(",", "")
    if not PRICE_PATTERN.fullmatch(text):
        return None
    return Decimal(text)


class SearchRequestAggregator:
    """
    Builds the search page model.

    Flow for one request:
    1. Normalize the query and the advanced-search toggles
    2. Resolve sorting, view mode and page size
    3. Load category (cached), manufacturer and vendor facets
    4. When a query is present: check its length, assemble filters,
       search products and record search-term statistics
    5. Copy paging totals into the model

    Collaborator errors (database, cancellation) propagate to the caller.
    """

    def __init__(
        self,
        category_service: CategoryService,
        manufacturer_service: ManufacturerService,
        vendor_service: VendorService,
        currency_service: CurrencyService,
        product_service: ProductService,
        product_view_model_service: ProductViewModelService,
        search_term_service: SearchTermService,
        localization_service: LocalizationService,
        catalog_options_service: CatalogOptionsService,
        cache_manager: MemoryCacheManager,
        settings: Settings,
    ):
        self.category_service = category_service
        self.manufacturer_service = manufacturer_service
        self.vendor_service = vendor_service
        self.currency_service = currency_service
        self.product_service = product_service
        self.product_view_model_service = product_view_model_service
        self.search_term_service = search_term_service
        self.localization_service = localization_service
        self.catalog_options_service = catalog_options_service
        self.cache_manager = cache_manager
        self.settings = settings

    async def handle(
        self,
        model: SearchModel | None,
        command: PagingCommand,
        context: WorkContext,
    ) -> SearchModel:
        if model is None:
            model = SearchModel()

        search_terms = (model.q or "").strip()
        model.q = search_terms

        if model.box:
            model.sid = self.settings.SEARCH_BY_DESCRIPTION
        if model.sid:
            model.adv = True

        # view/sorting/page size
        paging_model, command = await self.catalog_options_service.get_view_sort_size_options(
            command=command,
            paging_filtering_model=model.paging_filtering_context,
            language_id=context.language.id,
            allow_customers_to_select_page_size=self.settings.SEARCH_PAGE_ALLOW_CUSTOMERS_TO_SELECT_PAGE_SIZE,
            page_size_options=self.settings.SEARCH_PAGE_PAGE_SIZE_OPTIONS,
            page_size=self.settings.SEARCH_PAGE_PRODUCTS_PER_PAGE,
        )
        model.paging_filtering_context = paging_model

        await self._prepare_categories(model, context)
        await self._prepare_manufacturers(model, context)
        await self._prepare_vendors(model, context)

        products: PagedList = PagedList.empty()

        if search_terms:
            minimum_length = self.settings.PRODUCT_SEARCH_TERM_MINIMUM_LENGTH
            if len(search_terms) < minimum_length:
                resource = await self.localization_service.get_resource(
                    "Search.SearchTermMinimumLengthIsNCharacters", context.language.id
                )
                model.warning = resource.format(minimum_length)
                logger.info(f"🔍 Search term '{search_terms}' shorter than {minimum_length} characters")
            else:
                products = await self._search_products(model, command, context, search_terms)
                model.products = await self.product_view_model_service.prepare_product_overview_models(
                    products.items,
                    language_id=context.language.id,
                    currency=context.currency,
                    prepare_specification_attributes=self.settings.SHOW_SPEC_ATTRIBUTE_ON_CATALOG_PAGES,
                )
                model.no_results = not model.products

                await self._record_search_term(search_terms, context.store.id)

        model.paging_filtering_context.load_paged_list(products)
        return model

    @staticmethod
    def categories_cache_key(context: WorkContext) -> str:
        return SEARCH_CATEGORIES_MODEL_KEY.format(
            context.language.id,
            ",".join(context.customer.role_ids),
            context.store.id,
        )

    async def _load_category_options(self, context: WorkContext) -> list[SearchCategoryOption]:
        store_id = context.store.id
        role_ids = context.customer.role_ids
        all_categories = await self.category_service.get_all_categories(store_id, role_ids)

        options = []
        for category in all_categories:
            breadcrumb = self.category_service.get_category_breadcrumb(category, all_categories, store_id, role_ids)
            text = BREADCRUMB_SEPARATOR.join(get_localized(c, "name", context.language.id) for c in breadcrumb)
            options.append(SearchCategoryOption(id=category.id, breadcrumb=text))
        return options

    async def _all_option(self, context: WorkContext) -> SelectListItem:
        text = await self.localization_service.get_resource("Common.All", context.language.id)
        return SelectListItem(value="", text=text)

    async def _prepare_categories(self, model: SearchModel, context: WorkContext) -> None:
        categories = await self.cache_manager.get_or_set(
            self.categories_cache_key(context),
            lambda: self._load_category_options(context),
        )
        if not categories:
            return
        model.available_categories.append(await self._all_option(context))
        for category in categories:
            model.available_categories.append(
                SelectListItem(value=category.id, text=category.breadcrumb, selected=model.cid == category.id)
            )

    async def _prepare_manufacturers(self, model: SearchModel, context: WorkContext) -> None:
        manufacturers = await self.manufacturer_service.get_all_manufacturers(context.store.id)
        if not manufacturers:
            return
        model.available_manufacturers.append(await self._all_option(context))
        for manufacturer in manufacturers:
            model.available_manufacturers.append(
                SelectListItem(
                    value=manufacturer.id,
                    text=get_localized(manufacturer, "name", context.language.id),
                    selected=model.mid == manufacturer.id,
                )
            )

    async def _prepare_vendors(self, model: SearchModel, context: WorkContext) -> None:
        model.asv = self.settings.ALLOW_SEARCH_BY_VENDOR
        if not model.asv:
            return
        vendors = await self.vendor_service.get_all_vendors()
        if not vendors:
            return
        model.available_vendors.append(await self._all_option(context))
        for vendor in vendors:
            model.available_vendors.append(
                SelectListItem(
                    value=vendor.id,
                    text=get_localized(vendor, "name", context.language.id),
                    selected=model.vid == vendor.id,
                )
            )

    async def _convert_price(self, value: str | None, currency: Currency) -> Decimal | None:
        price = parse_price(value)
        if price is None:
            return None
        return await self.currency_service.convert_to_primary_store_currency(price, currency)

    async def _search_products(
        self,
        model: SearchModel,
        command: PagingCommand,
        context: WorkContext,
        search_terms: str,
    ) -> PagedList:
        category_ids: list[str] = []
        manufacturer_id = ""
        min_price_converted = None
        max_price_converted = None
        search_in_descriptions = False
        vendor_id = ""

        if model.adv:
            if model.cid:
                category_ids.append(model.cid)
                if model.isc:
                    category_ids.extend(
                        await self.category_service.get_child_category_ids(
                            model.cid, context.store.id, context.customer.role_ids
                        )
                    )
            manufacturer_id = model.mid
            min_price_converted = await self._convert_price(model.pf, context.currency)
            max_price_converted = await self._convert_price(model.pt, context.currency)
            search_in_descriptions = model.sid
            if model.asv:
                vendor_id = model.vid

        logger.info(f"🔍 Search terms: {search_terms}")
        logger.info(
            f"🔍 Filters: categories={category_ids} manufacturer={manufacturer_id!r} vendor={vendor_id!r} "
            f"price=[{min_price_converted}, {max_price_converted}] descriptions={search_in_descriptions}"
        )

        products = await self.product_service.search_products(
            category_ids=category_ids,
            manufacturer_id=manufacturer_id,
            store_id=context.store.id,
            vendor_id=vendor_id,
            visible_individually_only=True,
            price_min=min_price_converted,
            price_max=max_price_converted,
            keywords=search_terms,
            search_descriptions=search_in_descriptions,
            search_sku=search_in_descriptions,
            search_product_tags=search_in_descriptions,
            language_id=context.language.id,
            order_by=command.order_by if command.order_by is not None else ProductSortingEnum.POSITION,
            page_index=command.page_number - 1,
            page_size=command.page_size,
        )
        logger.info(f"✅ Search returned {len(products.items)} of {products.total_count} products")
        return products

    async def _record_search_term(self, keyword: str, store_id: str) -> None:
        search_term = await self.search_term_service.get_search_term_by_keyword(keyword, store_id)
        if search_term is not None:
            search_term.count += 1
            await self.search_term_service.update_search_term(search_term)
        else:
            await self.search_term_service.insert_search_term(
                SearchTerm(keyword=keyword, store_id=store_id, count=1)
            )


def build_search_aggregator(db, cache_manager: MemoryCacheManager, app_settings: Settings) -> SearchRequestAggregator:
    """Wire the aggregator to motor-backed collaborators."""
    localization_service = LocalizationService(db)
    currency_service = CurrencyService(db)
    return SearchRequestAggregator(
        category_service=CategoryService(db),
        manufacturer_service=ManufacturerService(db),
        vendor_service=VendorService(db),
        currency_service=currency_service,
        product_service=ProductService(db),
        product_view_model_service=ProductViewModelService(currency_service),
        search_term_service=SearchTermService(db),
        localization_service=localization_service,
        catalog_options_service=CatalogOptionsService(localization_service, app_settings),
        cache_manager=cache_manager,
        settings=app_settings,
    )


def get_search_aggregator() -> SearchRequestAggregator:
    """Build a search aggregator bound to the current database connection"""
    return build_search_aggregator(get_mongo_db(), get_cache_manager(), settings)
