"""
Repository Layer for the Shoe Store API
Data access layer for DynamoDB operations
"""

from .shoe_product_repository import (
    PageCursor,
    SearchPage,
    ShoeProductRepository,
    shoe_product_repository,
)

__all__ = ["PageCursor", "SearchPage", "ShoeProductRepository", "shoe_product_repository"]
