"""
Service Layer for the Shoe Store API
"""

from .catalog_service import ListParams, ShoeProductService, shoe_product_service
from .payment_service import PaymentService, payment_service

__all__ = [
    "ListParams",
    "ShoeProductService",
    "shoe_product_service",
    "PaymentService",
    "payment_service",
]
