from decimal import ROUND_HALF_UP, Decimal

from storefront.schemas.catalog import Currency, Product
from storefront.schemas.search import ProductOverviewModel, SpecificationAttributeModel
from storefront.services.currency_service import CurrencyService
from storefront.services.localization_service import get_localized

CENTS = Decimal("0.01")


class ProductViewModelService:
    """Builds product tiles for listing pages"""

    def __init__(self, currency_service: CurrencyService):
        self.currency_service = currency_service

    async def _to_working_currency(self, amount: Decimal, currency: Currency) -> float:
        converted = await self.currency_service.convert_from_primary_store_currency(amount, currency)
        return float(converted.quantize(CENTS, rounding=ROUND_HALF_UP))

    async def prepare_product_overview_models(
        self,
        products: list[Product],
        language_id: str,
        currency: Currency,
        prepare_specification_attributes: bool = False,
    ) -> list[ProductOverviewModel]:
        models = []
        for product in products:
            old_price = None
            if product.old_price > 0:
                old_price = await self._to_working_currency(product.old_price, currency)

            specification_attributes = []
            if prepare_specification_attributes:
                specification_attributes = [
                    SpecificationAttributeModel(name=attribute.name, value=attribute.value)
                    for attribute in sorted(product.specification_attributes, key=lambda a: a.display_order)
                    if attribute.show_on_product_page
                ]

            models.append(
                ProductOverviewModel(
                    id=product.id,
                    name=get_localized(product, "name", language_id),
                    short_description=get_localized(product, "short_description", language_id) or None,
                    sku=product.sku,
                    price=await self._to_working_currency(product.price, currency),
                    old_price=old_price,
                    currency_code=currency.code,
                    specification_attributes=specification_attributes,
                )
            )
        return models
