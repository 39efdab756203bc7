"""Sorting, view-mode and page-size options shared by catalog listing pages."""

import re

from storefront.core.config import Settings
from storefront.schemas.search import (
    CatalogPagingFilteringModel,
    PagingCommand,
    ProductSortingEnum,
    SelectListItem,
)
from storefront.services.localization_service import LocalizationService

SORTING_RESOURCE_KEYS = {
    ProductSortingEnum.POSITION: "Enums.ProductSorting.Position",
    ProductSortingEnum.NAME_ASC: "Enums.ProductSorting.NameAsc",
    ProductSortingEnum.NAME_DESC: "Enums.ProductSorting.NameDesc",
    ProductSortingEnum.PRICE_ASC: "Enums.ProductSorting.PriceAsc",
    ProductSortingEnum.PRICE_DESC: "Enums.ProductSorting.PriceDesc",
    ProductSortingEnum.CREATED_ON: "Enums.ProductSorting.CreatedOn",
}

VIEW_MODES = {"grid": "Catalog.ViewMode.Grid", "list": "Catalog.ViewMode.List"}


def parse_page_size_options(page_size_options: str | None) -> list[str]:
    """Split a "6, 3, 9" style option string into its raw entries."""
    if not page_size_options:
        return []
    return [entry for entry in re.split(r"[,\s]+", page_size_options) if entry]


class CatalogOptionsService:
    def __init__(self, localization_service: LocalizationService, settings: Settings):
        self.localization_service = localization_service
        self.settings = settings

    async def get_view_sort_size_options(
        self,
        command: PagingCommand,
        paging_filtering_model: CatalogPagingFilteringModel,
        language_id: str,
        allow_customers_to_select_page_size: bool,
        page_size_options: str | None,
        page_size: int,
    ) -> tuple[CatalogPagingFilteringModel, PagingCommand]:
        """
        Fill sort/view/page-size choices and normalize the paging command.

        Returns:
            The updated paging model and command
        """
        await self._prepare_sorting(command, paging_filtering_model, language_id)
        await self._prepare_view_modes(command, paging_filtering_model, language_id)
        self._prepare_page_sizes(
            command, paging_filtering_model, allow_customers_to_select_page_size, page_size_options, page_size
        )

        if command.page_number <= 0:
            command.page_number = 1
        return paging_filtering_model, command

    async def _prepare_sorting(
        self, command: PagingCommand, model: CatalogPagingFilteringModel, language_id: str
    ) -> None:
        active_options = list(ProductSortingEnum)
        if command.order_by is None:
            command.order_by = int(active_options[0])

        model.allow_product_sorting = self.settings.ALLOW_PRODUCT_SORTING
        model.available_sort_options = []
        if not model.allow_product_sorting:
            return
        for option in active_options:
            text = await self.localization_service.get_resource(SORTING_RESOURCE_KEYS[option], language_id)
            model.available_sort_options.append(
                SelectListItem(value=str(int(option)), text=text, selected=int(option) == command.order_by)
            )

    async def _prepare_view_modes(
        self, command: PagingCommand, model: CatalogPagingFilteringModel, language_id: str
    ) -> None:
        model.allow_product_view_mode_changing = self.settings.ALLOW_PRODUCT_VIEW_MODE_CHANGING
        view_mode = command.view_mode or self.settings.DEFAULT_VIEW_MODE
        model.view_mode = view_mode
        model.available_view_modes = []
        if not model.allow_product_view_mode_changing:
            return
        for mode, resource_key in VIEW_MODES.items():
            text = await self.localization_service.get_resource(resource_key, language_id)
            model.available_view_modes.append(SelectListItem(value=mode, text=text, selected=view_mode == mode))

    def _prepare_page_sizes(
        self,
        command: PagingCommand,
        model: CatalogPagingFilteringModel,
        allow_customers_to_select_page_size: bool,
        page_size_options: str | None,
        page_size: int,
    ) -> None:
        model.page_size_options = []
        page_sizes = parse_page_size_options(page_size_options)

        if allow_customers_to_select_page_size and page_sizes:
            # first entry is the default when the requested size is not one of the options
            if command.page_size <= 0 or str(command.page_size) not in page_sizes:
                first = page_sizes[0]
                if first.isdigit() and int(first) > 0:
                    command.page_size = int(first)

            options = []
            for entry in page_sizes:
                if not entry.isdigit() or int(entry) <= 0:
                    continue
                options.append(SelectListItem(value=entry, text=entry, selected=entry == str(command.page_size)))

            if options:
                model.page_size_options = sorted(options, key=lambda item: int(item.text))
                model.allow_customers_to_select_page_size = True
                if command.page_size <= 0:
                    command.page_size = int(model.page_size_options[0].text)
        else:
            command.page_size = page_size

        if command.page_size <= 0:
            command.page_size = page_size
