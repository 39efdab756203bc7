"""
Test configuration and in-memory collaborators for the search aggregator.

The fakes keep the same async method signatures as the motor-backed
services, so SearchRequestAggregator can be exercised without MongoDB.
"""

import asyncio
from decimal import Decimal

import pytest

from storefront.core.cache import MemoryCacheManager
from storefront.core.config import Settings
from storefront.core.pagination import PagedList
from storefront.schemas.catalog import (
    Category,
    Currency,
    Customer,
    Language,
    Manufacturer,
    Product,
    SearchTerm,
    Store,
    Vendor,
    WorkContext,
)
from storefront.services.catalog_options_service import CatalogOptionsService
from storefront.services.category_service import CategoryService, is_category_authorized
from storefront.services.currency_service import CurrencyService
from storefront.services.product_view_model_service import ProductViewModelService
from storefront.services.search_service import SearchRequestAggregator


def run(coro):
    return asyncio.run(coro)


class FakeLocalizationService:
    def __init__(self, resources: dict[str, str] | None = None):
        self.resources = resources or {}

    async def get_resource(self, key: str, language_id: str) -> str:
        return self.resources.get(key, key)


class FakeCategoryService:
    get_category_breadcrumb = staticmethod(CategoryService.get_category_breadcrumb)

    def __init__(self, categories: list[Category] | None = None):
        self.categories = categories or []
        self.get_all_calls = 0

    async def get_all_categories(self, store_id: str, role_ids: list[str]) -> list[Category]:
        self.get_all_calls += 1
        return [c for c in self.categories if c.published and is_category_authorized(c, store_id, role_ids)]

    async def get_child_category_ids(self, parent_category_id: str, store_id: str, role_ids: list[str]) -> list[str]:
        result = []
        pending = [parent_category_id]
        while pending:
            parent_id = pending.pop()
            for category in self.categories:
                if category.parent_category_id == parent_id:
                    result.append(category.id)
                    pending.append(category.id)
        return result


class FakeManufacturerService:
    def __init__(self, manufacturers: list[Manufacturer] | None = None):
        self.manufacturers = manufacturers or []

    async def get_all_manufacturers(self, store_id: str = "") -> list[Manufacturer]:
        return list(self.manufacturers)


class FakeVendorService:
    def __init__(self, vendors: list[Vendor] | None = None):
        self.vendors = vendors or []
        self.calls = 0

    async def get_all_vendors(self, show_hidden: bool = False) -> list[Vendor]:
        self.calls += 1
        return list(self.vendors)


class FakeCurrencyService:
    convert_currency = staticmethod(CurrencyService.convert_currency)

    def __init__(self, primary: Currency | None = None, currencies: list[Currency] | None = None):
        self.primary = primary or Currency(code="USD", rate=Decimal("1"))
        self.currencies = {c.code: c for c in (currencies or [])}

    async def get_primary_store_currency(self) -> Currency:
        return self.primary

    async def get_working_currency(self, code: str | None) -> Currency:
        return self.currencies.get((code or "").upper(), self.primary)

    async def convert_to_primary_store_currency(self, amount: Decimal, source: Currency) -> Decimal:
        return self.convert_currency(amount, source, self.primary)

    async def convert_from_primary_store_currency(self, amount: Decimal, target: Currency) -> Decimal:
        return self.convert_currency(amount, self.primary, target)


class FakeProductService:
    def __init__(self, products: list[Product] | None = None):
        self.products = products or []
        self.calls: list[dict] = []

    async def search_products(self, **kwargs) -> PagedList[Product]:
        self.calls.append(kwargs)
        page_index = kwargs.get("page_index", 0)
        page_size = kwargs.get("page_size", 10)
        start = page_index * page_size
        return PagedList(
            items=self.products[start:start + page_size],
            page_index=page_index,
            page_size=page_size,
            total_count=len(self.products),
        )


class FakeSearchTermService:
    """
    Mirrors the database semantics: updates are server-side increments and
    inserts are upserts keyed on (keyword, store_id). Lookups yield to the
    event loop so concurrent requests interleave like real round trips.
    """

    def __init__(self):
        self.terms: dict[tuple[str, str], SearchTerm] = {}
        self.inserts = 0
        self.updates = 0

    async def get_search_term_by_keyword(self, keyword: str, store_id: str) -> SearchTerm | None:
        term = self.terms.get((keyword, store_id))
        await asyncio.sleep(0)
        return term.model_copy() if term else None

    async def insert_search_term(self, search_term: SearchTerm) -> SearchTerm:
        self.inserts += 1
        key = (search_term.keyword, search_term.store_id)
        if key in self.terms:
            self.terms[key].count += search_term.count
        else:
            search_term.id = f"term-{len(self.terms) + 1}"
            self.terms[key] = search_term.model_copy()
        return search_term

    async def update_search_term(self, search_term: SearchTerm) -> bool:
        self.updates += 1
        self.terms[(search_term.keyword, search_term.store_id)].count += 1
        return True

    async def get_stats(self, store_id: str, page_index: int = 0, page_size: int = 20) -> PagedList[SearchTerm]:
        terms = sorted(
            (t for t in self.terms.values() if t.store_id == store_id),
            key=lambda t: (-t.count, t.keyword),
        )
        start = page_index * page_size
        return PagedList(items=terms[start:start + page_size], page_index=page_index,
                         page_size=page_size, total_count=len(terms))


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        PRODUCT_SEARCH_TERM_MINIMUM_LENGTH=3,
        SEARCH_PAGE_PRODUCTS_PER_PAGE=6,
        SEARCH_PAGE_ALLOW_CUSTOMERS_TO_SELECT_PAGE_SIZE=True,
        SEARCH_PAGE_PAGE_SIZE_OPTIONS="6, 3, 9, 18",
        SEARCH_BY_DESCRIPTION=True,
        ALLOW_SEARCH_BY_VENDOR=False,
    )


@pytest.fixture
def context() -> WorkContext:
    return WorkContext(
        customer=Customer(id="c1", role_ids=["registered", "guests"]),
        store=Store(id="store-1"),
        language=Language(id="en"),
        currency=Currency(code="USD", rate=Decimal("1")),
    )


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id="cat-a", name="Lighting", display_order=1),
        Category(id="cat-b", name="Lamps", parent_category_id="cat-a", display_order=2),
        Category(id="cat-c", name="Desk Lamps", parent_category_id="cat-b", display_order=3),
    ]


@pytest.fixture
def lamp() -> Product:
    return Product(id="p1", name="Brass Lamp", sku="LAMP-1", price=Decimal("49.99"))


@pytest.fixture
def collaborators(categories, lamp):
    return {
        "category_service": FakeCategoryService(categories),
        "manufacturer_service": FakeManufacturerService([Manufacturer(id="m1", name="Acme")]),
        "vendor_service": FakeVendorService([Vendor(id="v1", name="Lamp House")]),
        "currency_service": FakeCurrencyService(),
        "product_service": FakeProductService([lamp]),
        "search_term_service": FakeSearchTermService(),
        "localization_service": FakeLocalizationService(),
        "cache_manager": MemoryCacheManager(),
    }


@pytest.fixture
def make_aggregator(collaborators, test_settings):
    """Factory building an aggregator from the fakes, with optional settings overrides."""

    def _make(**setting_overrides) -> SearchRequestAggregator:
        app_settings = test_settings.model_copy(update=setting_overrides) if setting_overrides else test_settings
        localization_service = collaborators["localization_service"]
        return SearchRequestAggregator(
            category_service=collaborators["category_service"],
            manufacturer_service=collaborators["manufacturer_service"],
            vendor_service=collaborators["vendor_service"],
            currency_service=collaborators["currency_service"],
            product_service=collaborators["product_service"],
            product_view_model_service=ProductViewModelService(collaborators["currency_service"]),
            search_term_service=collaborators["search_term_service"],
            localization_service=localization_service,
            catalog_options_service=CatalogOptionsService(localization_service, app_settings),
            cache_manager=collaborators["cache_manager"],
            settings=app_settings,
        )

    return _make
