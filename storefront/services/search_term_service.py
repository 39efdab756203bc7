import logging

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront.core.config import settings
from storefront.core.pagination import PagedList
from storefront.schemas.catalog import SearchTerm

logger = logging.getLogger(__name__)


class SearchTermService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.SEARCH_TERMS_COLLECTION]

    def _to_object_id(self, id_str: str) -> ObjectId | None:
        """Convert string to ObjectId, returning None if invalid."""
        try:
            return ObjectId(id_str)
        except (InvalidId, TypeError):
            return None

    async def get_search_term_by_keyword(self, keyword: str, store_id: str) -> SearchTerm | None:
        """Get the statistics record for a keyword in a store."""
        if not keyword:
            return None
        document = await self.collection.find_one({"keyword": keyword, "store_id": store_id})
        if document is None:
            return None
        document["id"] = str(document.pop("_id"))
        return SearchTerm(**document)

    async def ensure_indexes(self) -> None:
        """One statistics record per (keyword, store)."""
        await self.collection.create_index([("keyword", 1), ("store_id", 1)], unique=True)

    async def insert_search_term(self, search_term: SearchTerm) -> SearchTerm:
        """
        Record a keyword for a store.

        Upserts on (keyword, store_id), so two first-time searches racing
        each other end up in the same record with both counts added.
        """
        result = await self.collection.update_one(
            {"keyword": search_term.keyword, "store_id": search_term.store_id},
            {"$inc": {"count": search_term.count}},
            upsert=True,
        )
        if result.upserted_id is not None:
            search_term.id = str(result.upserted_id)
            logger.info(f"New search term recorded: '{search_term.keyword}' (store {search_term.store_id})")
        return search_term

    async def update_search_term(self, search_term: SearchTerm) -> bool:
        """Count one more search of an existing record; the increment is applied by the server."""
        obj_id = self._to_object_id(search_term.id)
        if obj_id is None:
            raise ValueError(f"Invalid search term id: {search_term.id}")
        result = await self.collection.update_one({"_id": obj_id}, {"$inc": {"count": 1}})
        return result.modified_count > 0

    async def get_stats(self, store_id: str, page_index: int = 0, page_size: int = 20) -> PagedList[SearchTerm]:
        """Most searched keywords of a store, highest count first."""
        query = {"store_id": store_id}
        total_count = await self.collection.count_documents(query)
        cursor = (
            self.collection.find(query)
            .sort([("count", -1), ("keyword", 1)])
            .skip(page_index * page_size)
            .limit(page_size)
        )
        terms = []
        async for document in cursor:
            document["id"] = str(document.pop("_id"))
            terms.append(SearchTerm(**document))
        return PagedList(items=terms, page_index=page_index, page_size=page_size, total_count=total_count)
