"""
Shoe Product Repository

DynamoDB access for the shoe product table:
- create: unconditional put under a fresh UUID
- get: get_item by key
- update / delete: single conditional write on key existence, so a missing
  id is reported as not found and never recreated
- search: one Limit-ed scan with an optional contains() filter, resumable
  through an opaque PageCursor
- count: unbounded Select=COUNT scan with the same filter

Blocking boto3 calls run in a worker thread via asyncio.to_thread.
"""

import asyncio
import base64
import binascii
import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from shoestore.core.config import settings
from shoestore.core.database import db_manager
from shoestore.core.exceptions import ShoeProductNotFoundError, ValidationError, raise_database_error
from shoestore.core.monitoring import monitor_performance
from shoestore.models.shoe_product import (
    SHOE_PRODUCT_KEY,
    ShoeProduct,
    ShoeProductFields,
    decimal_to_native,
)

logger = logging.getLogger(__name__)

# "name" is a DynamoDB reserved word, so attribute names go through placeholders
SEARCH_FILTER_EXPRESSION = "contains(#name, :query) OR contains(#description, :query)"
SEARCH_ATTRIBUTE_NAMES = {"#name": "name", "#description": "description"}

KEY_EXISTS_CONDITION = "attribute_exists(#pk)"


class PageCursor:
    """
    Opaque resume position of a paged scan.

    Callers only ever hold the token string: they receive it in a response
    and hand it back on the next request. Encoding and decoding of the
    underlying store key happen inside this module only.
    """

    __slots__ = ("token",)

    def __init__(self, token: str):
        self.token = token

    def __str__(self) -> str:
        return self.token

    def __repr__(self) -> str:
        return f"PageCursor({self.token!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, PageCursor) and other.token == self.token

    def __hash__(self) -> int:
        return hash(self.token)


def _encode_cursor(last_evaluated_key: Dict[str, Any]) -> PageCursor:
    raw = json.dumps(decimal_to_native(last_evaluated_key), separators=(",", ":"))
    return PageCursor(base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii"))


def _decode_cursor(cursor: PageCursor, parameter: str = "nextPageKey") -> Dict[str, Any]:
    try:
        key = json.loads(base64.urlsafe_b64decode(cursor.token).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        key = None

    # only a primary-key map round-trips as ExclusiveStartKey
    if (
        not isinstance(key, dict)
        or set(key) != {SHOE_PRODUCT_KEY}
        or not isinstance(key[SHOE_PRODUCT_KEY], str)
        or not key[SHOE_PRODUCT_KEY]
    ):
        raise ValidationError([{"field": parameter, "message": f"{parameter} is not a valid page cursor"}])
    return key


@dataclass
class SearchPage:
    items: List[ShoeProduct] = field(default_factory=list)
    next_cursor: Optional[PageCursor] = None


class ShoeProductRepository:
    """
    Repository for shoe product records in DynamoDB.

    Table:
    - ShoeProductsTable (partition key: shoeProductID, string)
    """

    def __init__(self, table: Any = None, table_name: Optional[str] = None):
        self.table_name = table_name or settings.SHOE_PRODUCTS_TABLE
        self._table = table

    @property
    def table(self):
        if self._table is None:
            self._table = db_manager.get_table(self.table_name)
        return self._table

    async def _call(self, operation: str, method, missing_id: Optional[str] = None, **kwargs) -> Dict[str, Any]:
        """
        Run one table call off the event loop and translate store errors.

        A failed ``attribute_exists`` condition becomes not-found for
        ``missing_id``; anything else the SDK raises becomes a DatabaseError.
        """
        try:
            return await asyncio.to_thread(method, **kwargs)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "ConditionalCheckFailedException" and missing_id is not None:
                raise ShoeProductNotFoundError(missing_id)
            logger.error(f"DynamoDB error during {operation}: {error_code} - {e}")
            raise_database_error(operation, self.table_name, e)
        except BotoCoreError as e:
            logger.error(f"DynamoDB client failure during {operation}: {e}")
            raise_database_error(operation, self.table_name, e)

    @staticmethod
    def _search_kwargs(query: Optional[str]) -> Dict[str, Any]:
        if not query:
            return {}
        return {
            "FilterExpression": SEARCH_FILTER_EXPRESSION,
            "ExpressionAttributeNames": dict(SEARCH_ATTRIBUTE_NAMES),
            "ExpressionAttributeValues": {":query": query},
        }

    @monitor_performance
    async def create(self, fields: ShoeProductFields) -> ShoeProduct:
        """Store a new record under a freshly generated identifier"""
        shoe_product_id = str(uuid.uuid4())
        item = fields.to_item(shoe_product_id)

        await self._call("put_item", self.table.put_item, Item=item)

        logger.info(f"Shoe product created: {shoe_product_id}")
        return ShoeProduct.from_item(item)

    @monitor_performance
    async def get(self, shoe_product_id: str) -> ShoeProduct:
        """
        Fetch a record by identifier

        Raises:
            ShoeProductNotFoundError: no record under the identifier
        """
        response = await self._call(
            "get_item",
            self.table.get_item,
            Key={SHOE_PRODUCT_KEY: shoe_product_id}
        )

        item = response.get("Item")
        if not item:
            raise ShoeProductNotFoundError(shoe_product_id)
        return ShoeProduct.from_item(item)

    @monitor_performance
    async def update(self, shoe_product_id: str, fields: ShoeProductFields) -> ShoeProduct:
        """
        Replace an existing record, keeping its identifier

        Raises:
            ShoeProductNotFoundError: no record under the identifier; nothing is written
        """
        item = fields.to_item(shoe_product_id)

        await self._call(
            "put_item",
            self.table.put_item,
            missing_id=shoe_product_id,
            Item=item,
            ConditionExpression=KEY_EXISTS_CONDITION,
            ExpressionAttributeNames={"#pk": SHOE_PRODUCT_KEY}
        )

        logger.info(f"Shoe product updated: {shoe_product_id}")
        return ShoeProduct.from_item(item)

    @monitor_performance
    async def delete(self, shoe_product_id: str) -> None:
        """
        Remove an existing record

        Raises:
            ShoeProductNotFoundError: no record under the identifier
        """
        await self._call(
            "delete_item",
            self.table.delete_item,
            missing_id=shoe_product_id,
            Key={SHOE_PRODUCT_KEY: shoe_product_id},
            ConditionExpression=KEY_EXISTS_CONDITION,
            ExpressionAttributeNames={"#pk": SHOE_PRODUCT_KEY}
        )

        logger.info(f"Shoe product deleted: {shoe_product_id}")

    @monitor_performance
    async def search(
        self,
        query: Optional[str] = None,
        limit: int = 10,
        cursor: Optional[PageCursor] = None
    ) -> SearchPage:
        """
        One page of a scan

        Args:
            query: Case-sensitive substring matched against name or description
            limit: Scan Limit (items evaluated, before the filter applies)
            cursor: Resume position returned by the previous page

        Returns:
            SearchPage with the matching items and the cursor of the next
            page, or None when the scan is exhausted
        """
        scan_kwargs = {"Limit": limit, **self._search_kwargs(query)}
        if cursor is not None:
            scan_kwargs["ExclusiveStartKey"] = _decode_cursor(cursor)

        response = await self._call("scan", self.table.scan, **scan_kwargs)

        last_evaluated_key = response.get("LastEvaluatedKey")
        return SearchPage(
            items=[ShoeProduct.from_item(item) for item in response.get("Items", [])],
            next_cursor=_encode_cursor(last_evaluated_key) if last_evaluated_key else None
        )

    @monitor_performance
    async def count(self, query: Optional[str] = None) -> int:
        """
        Number of records matching ``query`` over the whole table.
        Follows LastEvaluatedKey, so the cost grows with table size.
        """
        scan_kwargs = {"Select": "COUNT", **self._search_kwargs(query)}
        total = 0

        while True:
            response = await self._call("scan", self.table.scan, **scan_kwargs)
            total += response.get("Count", 0)

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                break
            scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

        return total


# Global instance
shoe_product_repository = ShoeProductRepository()
