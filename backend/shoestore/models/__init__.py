"""
Typed records for the shoe product catalog
"""

from .shoe_product import ShoeProduct, ShoeProductFields

__all__ = ["ShoeProduct", "ShoeProductFields"]
