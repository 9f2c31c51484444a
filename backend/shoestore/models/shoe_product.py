"""
Shoe product records

Wire names are camelCase (``imageUrl``, ``reviewCount``) and the key is
``shoeProductID``, matching the DynamoDB item layout.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# DynamoDB partition key
SHOE_PRODUCT_KEY = "shoeProductID"


def decimal_to_native(obj):
    """Convert Decimal values read from DynamoDB to int/float for JSON"""
    if isinstance(obj, Decimal):
        return int(obj) if obj == obj.to_integral_value() else float(obj)
    elif isinstance(obj, dict):
        return {k: decimal_to_native(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [decimal_to_native(item) for item in obj]
    return obj


def native_to_decimal(obj):
    """Convert floats to Decimal; boto3 rejects float attribute values"""
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, (int, float)):
        return Decimal(str(obj))
    elif isinstance(obj, dict):
        return {k: native_to_decimal(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [native_to_decimal(item) for item in obj]
    return obj


class ShoeProductFields(BaseModel):
    """Client-writable fields of a shoe product, accepted by the validator"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    description: str
    price: Union[int, float]
    available: bool
    image_url: Optional[str] = None
    media: Optional[List[str]] = None
    company: Optional[str] = None
    currency: Optional[str] = None
    colors: Optional[List[str]] = None
    review_count: Optional[int] = None
    average_rating: Optional[Union[int, float]] = None
    featured: Optional[bool] = None

    def to_item(self, shoe_product_id: str) -> Dict[str, Any]:
        """DynamoDB item for this record stored under ``shoe_product_id``"""
        item = native_to_decimal(self.model_dump(by_alias=True, exclude_none=True))
        item[SHOE_PRODUCT_KEY] = shoe_product_id
        return item


class ShoeProduct(ShoeProductFields):
    """A stored shoe product"""

    shoe_product_id: str = Field(alias=SHOE_PRODUCT_KEY)

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "ShoeProduct":
        return cls.model_validate(decimal_to_native(item))

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
