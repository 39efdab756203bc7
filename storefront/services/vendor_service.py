from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront.core.config import settings
from storefront.schemas.catalog import Vendor


class VendorService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.VENDORS_COLLECTION]

    async def get_all_vendors(self, show_hidden: bool = False) -> list[Vendor]:
        """Get vendors that are not deleted; inactive ones only when show_hidden."""
        query: dict = {"deleted": {"$ne": True}}
        if not show_hidden:
            query["active"] = True
        cursor = self.collection.find(query).sort([("display_order", 1), ("name", 1)])
        vendors = []
        async for document in cursor:
            document["id"] = str(document.pop("_id"))
            vendors.append(Vendor(**document))
        return vendors
