from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class LocalizedProperty(BaseModel):
    """Translated value of one entity property for one language"""

    language_id: str
    locale_key: str
    locale_value: str


class LocalizedEntity(BaseModel):
    id: str
    name: str
    locales: list[LocalizedProperty] = Field(default_factory=list)


class Category(LocalizedEntity):
    parent_category_id: str = ""
    published: bool = True
    display_order: int = 0
    subject_to_acl: bool = False
    customer_roles: list[str] = Field(default_factory=list)
    limited_to_stores: bool = False
    stores: list[str] = Field(default_factory=list)


class Manufacturer(LocalizedEntity):
    published: bool = True
    display_order: int = 0
    limited_to_stores: bool = False
    stores: list[str] = Field(default_factory=list)


class Vendor(LocalizedEntity):
    active: bool = True
    deleted: bool = False
    display_order: int = 0


class SpecificationAttribute(BaseModel):
    name: str
    value: str
    show_on_product_page: bool = True
    display_order: int = 0


class Product(LocalizedEntity):
    short_description: str | None = None
    full_description: str | None = None
    sku: str | None = None
    price: Decimal = Decimal("0")
    old_price: Decimal = Decimal("0")
    published: bool = True
    visible_individually: bool = True
    category_ids: list[str] = Field(default_factory=list)
    manufacturer_ids: list[str] = Field(default_factory=list)
    vendor_id: str = ""
    limited_to_stores: bool = False
    stores: list[str] = Field(default_factory=list)
    product_tags: list[str] = Field(default_factory=list)
    specification_attributes: list[SpecificationAttribute] = Field(default_factory=list)
    display_order: int = 0
    created_on: datetime | None = None


class Currency(BaseModel):
    code: str
    name: str = ""
    rate: Decimal = Decimal("1")
    published: bool = True


class SearchTerm(BaseModel):
    """Analytics row: how often a keyword was searched in a store"""

    id: str | None = None
    keyword: str
    store_id: str
    count: int = 0


# ============================================================================
# Request Context
# ============================================================================


class Customer(BaseModel):
    id: str = ""
    role_ids: list[str] = Field(default_factory=list)


class Store(BaseModel):
    id: str


class Language(BaseModel):
    id: str


class WorkContext(BaseModel):
    """Who is searching, where, and in which language and currency"""

    customer: Customer
    store: Store
    language: Language
    currency: Currency
