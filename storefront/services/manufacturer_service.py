from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront.core.config import settings
from storefront.schemas.catalog import Manufacturer


class ManufacturerService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.MANUFACTURERS_COLLECTION]

    async def get_all_manufacturers(self, store_id: str = "") -> list[Manufacturer]:
        """Get published manufacturers, limited to those mapped to store_id when given."""
        query: dict = {"published": True}
        if store_id:
            query["$or"] = [{"limited_to_stores": {"$ne": True}}, {"stores": store_id}]
        cursor = self.collection.find(query).sort([("display_order", 1), ("name", 1)])
        manufacturers = []
        async for document in cursor:
            document["id"] = str(document.pop("_id"))
            manufacturers.append(Manufacturer(**document))
        return manufacturers
