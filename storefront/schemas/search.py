from enum import IntEnum

from pydantic import BaseModel, Field

from storefront.core.pagination import PagedList


class ProductSortingEnum(IntEnum):
    POSITION = 0
    NAME_ASC = 5
    NAME_DESC = 6
    PRICE_ASC = 10
    PRICE_DESC = 11
    CREATED_ON = 15


class SelectListItem(BaseModel):
    """One option of a drop-down list"""

    value: str
    text: str
    selected: bool = False


class SearchCategoryOption(BaseModel):
    """Cached category entry with its full breadcrumb"""

    id: str
    breadcrumb: str


class PagingCommand(BaseModel):
    """Paging/sorting/view options requested by the customer"""

    page_number: int = 1
    page_size: int = 0
    order_by: int | None = None
    view_mode: str | None = None


class CatalogPagingFilteringModel(BaseModel):
    allow_product_sorting: bool = False
    available_sort_options: list[SelectListItem] = Field(default_factory=list)
    allow_product_view_mode_changing: bool = False
    available_view_modes: list[SelectListItem] = Field(default_factory=list)
    view_mode: str | None = None
    allow_customers_to_select_page_size: bool = False
    page_size_options: list[SelectListItem] = Field(default_factory=list)

    # Paged list context
    page_index: int = 0
    page_number: int = 1
    page_size: int = 0
    total_items: int = 0
    total_pages: int = 0
    first_item: int = 0
    last_item: int = 0
    has_previous_page: bool = False
    has_next_page: bool = False

    def load_paged_list(self, paged_list: PagedList) -> None:
        """Copy paging totals from a product page into this model."""
        self.page_index = paged_list.page_index
        self.page_number = paged_list.page_index + 1
        self.page_size = paged_list.page_size
        self.total_items = paged_list.total_count
        self.total_pages = paged_list.total_pages
        self.first_item = paged_list.page_index * paged_list.page_size + 1
        self.last_item = min(
            paged_list.total_count,
            paged_list.page_index * paged_list.page_size + paged_list.page_size,
        )
        self.has_previous_page = paged_list.has_previous_page
        self.has_next_page = paged_list.has_next_page


class SpecificationAttributeModel(BaseModel):
    name: str
    value: str


class ProductOverviewModel(BaseModel):
    """Product tile shown in search results"""

    id: str
    name: str
    short_description: str | None = None
    sku: str | None = None
    price: float
    old_price: float | None = None
    currency_code: str
    specification_attributes: list[SpecificationAttributeModel] = Field(default_factory=list)


class SearchModel(BaseModel):
    """
    Search page model.

    The short field names mirror the storefront query string:
    q (query), cid (category), isc (include subcategories), mid (manufacturer),
    vid (vendor), pf/pt (price from/to), sid (search in descriptions),
    adv (advanced search), asv (vendor search allowed), box (search box submit).
    """

    q: str | None = None
    cid: str = ""
    isc: bool = False
    mid: str = ""
    vid: str = ""
    pf: str | None = None
    pt: str | None = None
    sid: bool = False
    adv: bool = False
    asv: bool = False
    box: bool = False

    warning: str | None = None
    no_results: bool = False
    products: list[ProductOverviewModel] = Field(default_factory=list)
    available_categories: list[SelectListItem] = Field(default_factory=list)
    available_manufacturers: list[SelectListItem] = Field(default_factory=list)
    available_vendors: list[SelectListItem] = Field(default_factory=list)
    paging_filtering_context: CatalogPagingFilteringModel = Field(default_factory=CatalogPagingFilteringModel)


class SearchTermStat(BaseModel):
    keyword: str
    count: int


class SearchTermStatsResponse(BaseModel):
    """Response model for search term statistics"""

    store_id: str
    terms: list[SearchTermStat]
    page_number: int
    page_size: int
    total_items: int
    total_pages: int
