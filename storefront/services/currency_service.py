from decimal import Decimal

from motor.motor_asyncio import AsyncIOMotorDatabase

from storefront.core.config import settings
from storefront.schemas.catalog import Currency


class CurrencyService:
    """Currency lookup and exchange-rate conversion against the primary store currency."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[settings.CURRENCIES_COLLECTION]
        self.primary_currency_code = settings.PRIMARY_STORE_CURRENCY_CODE

    async def get_currency_by_code(self, code: str) -> Currency | None:
        document = await self.collection.find_one({"code": code.upper()}, {"_id": 0})
        return Currency(**document) if document else None

    async def get_primary_store_currency(self) -> Currency:
        currency = await self.get_currency_by_code(self.primary_currency_code)
        return currency or Currency(code=self.primary_currency_code, rate=Decimal("1"))

    async def get_working_currency(self, code: str | None) -> Currency:
        """Resolve the customer's currency, falling back to the primary store currency."""
        if code:
            currency = await self.get_currency_by_code(code)
            if currency and currency.published:
                return currency
        return await self.get_primary_store_currency()

    @staticmethod
    def convert_currency(amount: Decimal, source: Currency, target: Currency) -> Decimal:
        if source.code == target.code or amount == 0:
            return amount
        if source.rate == 0:
            raise ValueError(f"Exchange rate not found for currency [{source.code}]")
        return amount / source.rate * target.rate

    async def convert_to_primary_store_currency(self, amount: Decimal, source: Currency) -> Decimal:
        primary = await self.get_primary_store_currency()
        return self.convert_currency(amount, source, primary)

    async def convert_from_primary_store_currency(self, amount: Decimal, target: Currency) -> Decimal:
        primary = await self.get_primary_store_currency()
        return self.convert_currency(amount, primary, target)
