import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront.core.config import settings
from storefront.schemas.catalog import LocalizedEntity

logger = logging.getLogger(__name__)

# Built-in texts used when a resource has not been stored for the language
DEFAULT_RESOURCES = {
    "common.all": "All",
    "search.searchtermminimumlengthisncharacters": "Search term minimum length is {0} characters",
    "enums.productsorting.position": "Position",
    "enums.productsorting.nameasc": "Name: A to Z",
    "enums.productsorting.namedesc": "Name: Z to A",
    "enums.productsorting.priceasc": "Price: Low to High",
    "enums.productsorting.pricedesc": "Price: High to Low",
    "enums.productsorting.createdon": "Created on",
    "catalog.viewmode.grid": "Grid",
    "catalog.viewmode.list": "List",
}


def get_localized(entity: LocalizedEntity, key: str, language_id: str) -> str:
    """Return the entity property translated to language_id, falling back to the stored value."""
    for locale in entity.locales:
        if locale.language_id == language_id and locale.locale_key == key and locale.locale_value:
            return locale.locale_value
    return getattr(entity, key, "") or ""


class LocalizationService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.LOCALE_RESOURCES_COLLECTION]

    async def get_resource(self, key: str, language_id: str) -> str:
        """Get a localized text resource; unknown keys are returned as-is."""
        resource_name = key.strip().lower()
        document = await self.collection.find_one(
            {"language_id": language_id, "resource_name": resource_name},
            {"resource_value": 1, "_id": 0},
        )
        if document and document.get("resource_value"):
            return document["resource_value"]

        if resource_name in DEFAULT_RESOURCES:
            return DEFAULT_RESOURCES[resource_name]

        logger.warning(f"Resource string ({key}) not found. Language ID = {language_id}")
        return key
