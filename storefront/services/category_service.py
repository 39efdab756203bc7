from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront.core.config import settings
from storefront.schemas.catalog import Category


def _to_category(document: dict[str, Any]) -> Category:
    document["id"] = str(document.pop("_id"))
    return Category(**document)


def is_category_authorized(category: Category, store_id: str, role_ids: list[str]) -> bool:
    """Check store mapping and customer-role ACL for a category."""
    if category.limited_to_stores and store_id not in category.stores:
        return False
    if category.subject_to_acl and not set(category.customer_roles) & set(role_ids):
        return False
    return True


class CategoryService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.CATEGORIES_COLLECTION]

    def _visibility_filter(self, store_id: str, role_ids: list[str]) -> dict[str, Any]:
        return {
            "published": True,
            "$and": [
                {"$or": [{"limited_to_stores": {"$ne": True}}, {"stores": store_id}]},
                {"$or": [{"subject_to_acl": {"$ne": True}}, {"customer_roles": {"$in": role_ids}}]},
            ],
        }

    async def get_all_categories(self, store_id: str, role_ids: list[str]) -> list[Category]:
        """Get all published categories visible in a store to the given customer roles."""
        cursor = self.collection.find(self._visibility_filter(store_id, role_ids)).sort(
            [("display_order", 1), ("name", 1)]
        )
        documents = await cursor.to_list(length=None)
        return [_to_category(document) for document in documents]

    async def get_child_category_ids(self, parent_category_id: str, store_id: str, role_ids: list[str]) -> list[str]:
        """Get ids of all descendants of a category, depth first."""
        category_ids: list[str] = []
        visited = {parent_category_id}
        pending = [parent_category_id]
        while pending:
            parent_id = pending.pop()
            query = self._visibility_filter(store_id, role_ids)
            query["parent_category_id"] = parent_id
            cursor = self.collection.find(query, {"_id": 1}).sort("display_order", 1)
            for document in await cursor.to_list(length=None):
                child_id = str(document["_id"])
                if child_id in visited:
                    continue
                visited.add(child_id)
                category_ids.append(child_id)
                pending.append(child_id)
        return category_ids

    @staticmethod
    def get_category_breadcrumb(
        category: Category,
        all_categories: list[Category],
        store_id: str,
        role_ids: list[str],
    ) -> list[Category]:
        """
        Walk from a category up to its root.

        The walk stops at the first ancestor that is missing, unpublished,
        not authorized for the store/roles, or already visited (cycle).

        Returns:
            Categories ordered root first
        """
        by_id = {c.id: c for c in all_categories}
        breadcrumb: list[Category] = []
        visited: set[str] = set()
        current: Category | None = category
        while (
            current is not None
            and current.published
            and is_category_authorized(current, store_id, role_ids)
            and current.id not in visited
        ):
            breadcrumb.append(current)
            visited.add(current.id)
            current = by_id.get(current.parent_category_id) if current.parent_category_id else None
        breadcrumb.reverse()
        return breadcrumb
