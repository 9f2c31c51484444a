"""
Shoe Store Catalog API
Product catalog CRUD/search over DynamoDB plus a Stripe payment-intent proxy
"""

__version__ = "1.0.0"
