from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", frozen=True)

    APP_NAME: str = "Storefront Search API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # MongoDB settings
    MONGO_URL: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "storefront"

    # Collection names
    CATEGORIES_COLLECTION: str = "categories"
    MANUFACTURERS_COLLECTION: str = "manufacturers"
    VENDORS_COLLECTION: str = "vendors"
    PRODUCTS_COLLECTION: str = "products"
    CURRENCIES_COLLECTION: str = "currencies"
    LOCALE_RESOURCES_COLLECTION: str = "locale_string_resources"
    SEARCH_TERMS_COLLECTION: str = "search_terms"

    # Work context defaults (used when request headers are absent)
    DEFAULT_STORE_ID: str = "default"
    DEFAULT_LANGUAGE_ID: str = "en"
    DEFAULT_CUSTOMER_ROLE: str = "guests"
    PRIMARY_STORE_CURRENCY_CODE: str = "USD"

    # Cache settings
    CACHE_TIME_MINUTES: int = 60
    CACHE_MAX_ENTRIES: int = 1024

    # Catalog settings
    PRODUCT_SEARCH_TERM_MINIMUM_LENGTH: int = 3
    SEARCH_PAGE_PRODUCTS_PER_PAGE: int = 6
    SEARCH_PAGE_ALLOW_CUSTOMERS_TO_SELECT_PAGE_SIZE: bool = True
    SEARCH_PAGE_PAGE_SIZE_OPTIONS: str = "6, 3, 9, 18"
    SEARCH_BY_DESCRIPTION: bool = False
    SHOW_SPEC_ATTRIBUTE_ON_CATALOG_PAGES: bool = False
    ALLOW_PRODUCT_SORTING: bool = True
    ALLOW_PRODUCT_VIEW_MODE_CHANGING: bool = True
    DEFAULT_VIEW_MODE: str = "grid"

    # Vendor settings
    ALLOW_SEARCH_BY_VENDOR: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
