"""
Shoe Store Test Configuration and Fixtures

This module provides:
- Test environment variables (set before the application is imported)
- An in-memory stand-in for the shoe products DynamoDB table
- Test fixtures for the repository, services and API client
- Sample record factories
"""

import os
import copy
from typing import Any, Dict, Generator, List, Optional
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["AWS_REGION"] = "us-west-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["SHOE_PRODUCTS_TABLE"] = "ShoeProductsTable-test"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["INCLUDE_TOTAL_COUNT"] = "true"

from fastapi.testclient import TestClient

from shoestore.models.shoe_product import SHOE_PRODUCT_KEY


# =============================================================================
# In-memory DynamoDB Table
# =============================================================================

def conditional_check_failed(operation: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": "ConditionalCheckFailedException", "Message": "The conditional request failed"}},
        operation
    )


class FakeShoeProductsTable:
    """
    Minimal boto3 Table resource for the calls the repository makes.

    Items are kept in insertion order, which stands in for DynamoDB's
    scan order. ``max_evaluated_per_scan`` simulates the 1MB page limit
    on unbounded scans.
    """

    def __init__(self, max_evaluated_per_scan: Optional[int] = None):
        self.items: Dict[str, Dict[str, Any]] = {}
        self.max_evaluated_per_scan = max_evaluated_per_scan
        self.scan_calls: List[Dict[str, Any]] = []

    def _key_exists(self, key_value: str, kwargs: Dict[str, Any]) -> bool:
        condition = kwargs.get("ConditionExpression")
        if condition is None:
            return True
        assert condition == "attribute_exists(#pk)"
        assert kwargs["ExpressionAttributeNames"] == {"#pk": SHOE_PRODUCT_KEY}
        return key_value in self.items

    def put_item(self, Item, **kwargs):
        key_value = Item[SHOE_PRODUCT_KEY]
        if not self._key_exists(key_value, kwargs):
            raise conditional_check_failed("PutItem")
        self.items[key_value] = copy.deepcopy(Item)
        return {}

    def get_item(self, Key, **kwargs):
        item = self.items.get(Key[SHOE_PRODUCT_KEY])
        return {"Item": copy.deepcopy(item)} if item else {}

    def delete_item(self, Key, **kwargs):
        key_value = Key[SHOE_PRODUCT_KEY]
        if not self._key_exists(key_value, kwargs):
            raise conditional_check_failed("DeleteItem")
        self.items.pop(key_value, None)
        return {}

    def scan(self, **kwargs):
        self.scan_calls.append(kwargs)

        keys = list(self.items)
        start_key = kwargs.get("ExclusiveStartKey")
        if start_key:
            keys = keys[keys.index(start_key[SHOE_PRODUCT_KEY]) + 1:]

        limit = kwargs.get("Limit") or self.max_evaluated_per_scan
        evaluated = keys[:limit] if limit else keys
        remaining = keys[len(evaluated):]

        query = None
        if "FilterExpression" in kwargs:
            assert kwargs["ExpressionAttributeNames"] == {"#name": "name", "#description": "description"}
            query = kwargs["ExpressionAttributeValues"][":query"]

        matches = [
            copy.deepcopy(self.items[key])
            for key in evaluated
            if query is None
            or query in self.items[key].get("name", "")
            or query in self.items[key].get("description", "")
        ]

        response: Dict[str, Any] = {"Count": len(matches), "ScannedCount": len(evaluated)}
        if kwargs.get("Select") != "COUNT":
            response["Items"] = matches
        if remaining:
            response["LastEvaluatedKey"] = {SHOE_PRODUCT_KEY: evaluated[-1]}
        return response


# =============================================================================
# Sample Data
# =============================================================================

def make_shoe_product(**overrides) -> Dict[str, Any]:
    """Valid create/update body"""
    body = {
        "name": "Trail Runner",
        "description": "Lightweight trail running shoe",
        "price": 129.99,
        "available": True,
        "imageUrl": "https://cdn.example.com/shoes/trail-runner.png",
        "company": "Acme",
        "currency": "$",
        "colors": ["#000", "#ff0000"],
    }
    body.update(overrides)
    return {k: v for k, v in body.items() if v is not None}


@pytest.fixture
def shoe_product_body() -> Dict[str, Any]:
    return make_shoe_product()


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def fake_table() -> FakeShoeProductsTable:
    return FakeShoeProductsTable()


@pytest.fixture
def repository(fake_table):
    """Global repository bound to the in-memory table"""
    from shoestore.repositories import shoe_product_repository

    with patch.object(shoe_product_repository, "_table", fake_table):
        yield shoe_product_repository


@pytest.fixture
def mock_table():
    """MagicMock table for asserting on the exact boto3 calls"""
    return MagicMock()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Create test application instance."""
    from shoestore.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def client(app, repository) -> Generator:
    """Create synchronous test client backed by the in-memory table."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_stripe_create():
    """Patch Stripe's PaymentIntent.create with a canned intent"""
    intent = MagicMock(id="pi_test_123", client_secret="pi_test_123_secret_abc")
    with patch("stripe.PaymentIntent.create", return_value=intent) as mock_create:
        yield mock_create
