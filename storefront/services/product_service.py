import logging
import re
from decimal import Decimal
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront.core.config import settings
from storefront.core.pagination import PagedList
from storefront.schemas.catalog import Product
from storefront.schemas.search import ProductSortingEnum

logger = logging.getLogger(__name__)

SORT_KEYS: dict[ProductSortingEnum, list[tuple[str, int]]] = {
    ProductSortingEnum.POSITION: [("display_order", 1), ("name", 1)],
    ProductSortingEnum.NAME_ASC: [("name", 1)],
    ProductSortingEnum.NAME_DESC: [("name", -1)],
    ProductSortingEnum.PRICE_ASC: [("price", 1)],
    ProductSortingEnum.PRICE_DESC: [("price", -1)],
    ProductSortingEnum.CREATED_ON: [("created_on", -1)],
}


class ProductService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.PRODUCTS_COLLECTION]

    def build_search_filter(
        self,
        category_ids: list[str] | None = None,
        manufacturer_id: str = "",
        store_id: str = "",
        vendor_id: str = "",
        visible_individually_only: bool = False,
        price_min: Decimal | None = None,
        price_max: Decimal | None = None,
        keywords: str | None = None,
        search_descriptions: bool = False,
        search_sku: bool = True,
        search_product_tags: bool = False,
        language_id: str = "",
    ) -> dict[str, Any]:
        """Translate search options into a MongoDB filter document."""
        conditions: list[dict[str, Any]] = [{"published": True}]

        if visible_individually_only:
            conditions.append({"visible_individually": True})
        if store_id:
            conditions.append({"$or": [{"limited_to_stores": {"$ne": True}}, {"stores": store_id}]})
        if category_ids:
            conditions.append({"category_ids": {"$in": category_ids}})
        if manufacturer_id:
            conditions.append({"manufacturer_ids": manufacturer_id})
        if vendor_id:
            conditions.append({"vendor_id": vendor_id})

        price_range: dict[str, float] = {}
        if price_min is not None:
            price_range["$gte"] = float(price_min)
        if price_max is not None:
            price_range["$lte"] = float(price_max)
        if price_range:
            conditions.append({"price": price_range})

        if keywords:
            pattern = {"$regex": re.escape(keywords), "$options": "i"}
            keyword_conditions: list[dict[str, Any]] = [{"name": pattern}]
            if language_id:
                keyword_conditions.append(
                    {"locales": {"$elemMatch": {"language_id": language_id, "locale_key": "name", "locale_value": pattern}}}
                )
            if search_descriptions:
                keyword_conditions.append({"short_description": pattern})
                keyword_conditions.append({"full_description": pattern})
            if search_sku:
                keyword_conditions.append({"sku": {"$regex": f"^{re.escape(keywords)}$", "$options": "i"}})
            if search_product_tags:
                keyword_conditions.append({"product_tags": pattern})
            conditions.append({"$or": keyword_conditions})

        return {"$and": conditions}

    async def search_products(
        self,
        category_ids: list[str] | None = None,
        manufacturer_id: str = "",
        store_id: str = "",
        vendor_id: str = "",
        visible_individually_only: bool = False,
        price_min: Decimal | None = None,
        price_max: Decimal | None = None,
        keywords: str | None = None,
        search_descriptions: bool = False,
        search_sku: bool = True,
        search_product_tags: bool = False,
        language_id: str = "",
        order_by: ProductSortingEnum | int = ProductSortingEnum.POSITION,
        page_index: int = 0,
        page_size: int = 2147483647,
    ) -> PagedList[Product]:
        """
        Search the product catalog.

        Args:
            category_ids: Match products in any of these categories
            manufacturer_id: Match products of this manufacturer
            store_id: Limit to products available in this store
            vendor_id: Match products of this vendor
            visible_individually_only: Skip products only shown as part of a group
            price_min: Lowest price, in primary store currency
            price_max: Highest price, in primary store currency
            keywords: Text matched against product names (and optionally more)
            search_descriptions: Also match short and full descriptions
            search_sku: Also match the exact SKU
            search_product_tags: Also match product tags
            language_id: Also match localized names in this language
            order_by: Sort order
            page_index: Zero-based page index
            page_size: Page size

        Returns:
            PagedList of products with the total number of matches
        """
        query = self.build_search_filter(
            category_ids=category_ids,
            manufacturer_id=manufacturer_id,
            store_id=store_id,
            vendor_id=vendor_id,
            visible_individually_only=visible_individually_only,
            price_min=price_min,
            price_max=price_max,
            keywords=keywords,
            search_descriptions=search_descriptions,
            search_sku=search_sku,
            search_product_tags=search_product_tags,
            language_id=language_id,
        )
        page_index = max(page_index, 0)
        sort = SORT_KEYS.get(order_by, SORT_KEYS[ProductSortingEnum.POSITION])

        total_count = await self.collection.count_documents(query)
        cursor = self.collection.find(query).sort(sort).skip(page_index * page_size).limit(page_size)
        documents = await cursor.to_list(length=page_size)

        products = []
        for document in documents:
            document["id"] = str(document.pop("_id"))
            products.append(Product(**document))

        logger.debug(f"Product search matched {total_count} products (page {page_index}, size {page_size})")
        return PagedList(items=products, page_index=page_index, page_size=page_size, total_count=total_count)
