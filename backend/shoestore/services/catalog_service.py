"""
Shoe Product Catalog Service

CRUD over the repository with validation in front of every write, and the
list/search orchestration: substring filter, page size, opaque cursor,
in-page sorting, field projection and the total count.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from shoestore.core.config import settings
from shoestore.core.exceptions import ValidationError
from shoestore.core.logging_config import log_with_context
from shoestore.core.validation import parse_page_size, validate_shoe_product, validate_sort
from shoestore.models.shoe_product import SHOE_PRODUCT_KEY, ShoeProduct
from shoestore.repositories import PageCursor, ShoeProductRepository, shoe_product_repository

logger = logging.getLogger(__name__)

@dataclass
class ListParams:
    """Parsed list/search query parameters"""
    query: Optional[str] = None
    page_size: int = 10
    cursor: Optional[PageCursor] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    exclude_fields: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def sort_requested(self) -> bool:
        return self.sort_by is not None or self.sort_order is not None

    @property
    def projection_requested(self) -> bool:
        return bool(self.exclude_fields)

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "ListParams":
        """
        Build from raw query string parameters.

        Accepted: query, pageSize, nextPageKey (alias: page), sortBy,
        sortOrder, excludeFields (comma separated).

        Raises:
            ValidationError: unknown sortBy / sortOrder values
        """
        sort_by = params.get("sortBy") or None
        sort_order = params.get("sortOrder") or None

        violations = validate_sort(sort_by, sort_order)
        if violations:
            raise ValidationError([v.to_dict() for v in violations])

        token = params.get("nextPageKey") or params.get("page") or None
        exclude = params.get("excludeFields") or ""

        return cls(
            query=params.get("query") or None,
            page_size=parse_page_size(
                params.get("pageSize"),
                default=settings.DEFAULT_PAGE_SIZE,
                maximum=settings.MAX_PAGE_SIZE
            ),
            cursor=PageCursor(token) if token else None,
            sort_by=sort_by,
            sort_order=sort_order.lower() if sort_order else None,
            exclude_fields=frozenset(name.strip() for name in exclude.split(",") if name.strip()),
        )


def sort_page(records: List[ShoeProduct], sort_by: Optional[str], sort_order: Optional[str]) -> List[ShoeProduct]:
    """
    Sort one page in memory. Defaults to ascending identifier order.
    Price ties keep identifier order.
    """
    descending = sort_order == "desc"
    if (sort_by or "id") == "price":
        key = lambda record: (record.price, record.shoe_product_id)
    else:
        key = lambda record: record.shoe_product_id
    return sorted(records, key=key, reverse=descending)


def project_record(record: Dict[str, Any], exclude_fields: FrozenSet[str]) -> Dict[str, Any]:
    """Drop the excluded fields (never the key) and keep only the first media entry"""
    projected = {
        name: value
        for name, value in record.items()
        if name == SHOE_PRODUCT_KEY or name not in exclude_fields
    }
    if projected.get("media"):
        projected["media"] = projected["media"][:1]
    return projected


class ShoeProductService:
    """Catalog operations used by the HTTP layer"""

    def __init__(self, repository: Optional[ShoeProductRepository] = None):
        self.repository = repository or shoe_product_repository

    async def create_product(self, body: Any) -> ShoeProduct:
        fields = validate_shoe_product(body)
        product = await self.repository.create(fields)
        log_with_context(logger, logging.INFO, "Shoe product stored", shoe_product_id=product.shoe_product_id)
        return product

    async def get_product(self, shoe_product_id: str) -> ShoeProduct:
        return await self.repository.get(shoe_product_id)

    async def update_product(self, shoe_product_id: str, body: Any) -> ShoeProduct:
        fields = validate_shoe_product(body)
        return await self.repository.update(shoe_product_id, fields)

    async def delete_product(self, shoe_product_id: str) -> None:
        await self.repository.delete(shoe_product_id)

    async def list_products(self, params: ListParams) -> Dict[str, Any]:
        """
        One page of the catalog

        Returns:
            {"data": [...], "pagination": {"pageSize", "totalCount", "nextPageKey"}}
            totalCount counts every match of the query, ignoring pagination,
            and is None when INCLUDE_TOTAL_COUNT is off.
        """
        page = await self.repository.search(
            query=params.query,
            limit=params.page_size,
            cursor=params.cursor
        )

        records = page.items
        if params.sort_requested:
            records = sort_page(records, params.sort_by, params.sort_order)

        data = [record.to_response() for record in records]
        if params.projection_requested:
            data = [project_record(record, params.exclude_fields) for record in data]

        total_count = None
        if settings.INCLUDE_TOTAL_COUNT:
            total_count = await self.repository.count(params.query)

        logger.debug(
            f"Listed {len(data)} shoe product(s): query={params.query!r}, "
            f"page_size={params.page_size}, has_next={page.next_cursor is not None}"
        )

        return {
            "data": data,
            "pagination": {
                "pageSize": params.page_size,
                "totalCount": total_count,
                "nextPageKey": str(page.next_cursor) if page.next_cursor else None,
            }
        }


# Global instance
shoe_product_service = ShoeProductService()
