"""
Unit Tests for Input Validation

Tests for:
- Shoe product rule-set (required fields, types, ranges, formats)
- Violation collection and ordering
- Page size, sort and payment parameter parsing
"""

import pytest
from decimal import Decimal

from shoestore.core.exceptions import ValidationError
from shoestore.core.validation import (
    parse_page_size,
    validate_payment_amount,
    validate_shoe_product,
    validate_sort,
)
from tests.conftest import make_shoe_product


def violations_for(body):
    with pytest.raises(ValidationError) as exc_info:
        validate_shoe_product(body)
    return exc_info.value.violations


def fields_of(violations):
    return [v["field"] for v in violations]


class TestShoeProductAccepted:
    """Tests for bodies that pass validation"""

    def test_valid_body_returns_typed_fields(self, shoe_product_body):
        fields = validate_shoe_product(shoe_product_body)

        assert fields.name == "Trail Runner"
        assert fields.price == 129.99
        assert fields.available is True
        assert fields.image_url == "https://cdn.example.com/shoes/trail-runner.png"

    def test_media_alone_satisfies_image_requirement(self):
        body = make_shoe_product(imageUrl=None, media=["https://cdn.example.com/a.png"])

        fields = validate_shoe_product(body)

        assert fields.image_url is None
        assert fields.media == ["https://cdn.example.com/a.png"]

    def test_unknown_fields_and_client_id_are_dropped(self):
        body = make_shoe_product(shoeProductID="client-chosen", stockLevel=4)

        item = validate_shoe_product(body).to_item("server-id")

        assert item["shoeProductID"] == "server-id"
        assert "stockLevel" not in item

    def test_price_at_upper_bound(self):
        assert validate_shoe_product(make_shoe_product(price=100000)).price == 100000

    def test_optional_catalog_fields(self):
        body = make_shoe_product(reviewCount=12, averageRating=4.5, featured=True, currency="€")

        fields = validate_shoe_product(body)

        assert fields.review_count == 12
        assert fields.average_rating == 4.5
        assert fields.featured is True
        assert fields.currency == "€"


class TestShoeProductRejected:
    """Tests for bodies that fail validation"""

    def test_missing_price_is_reported(self):
        body = make_shoe_product()
        del body["price"]

        violations = violations_for(body)

        assert violations == [{"field": "price", "message": "price is a required field"}]

    def test_every_violation_is_collected_in_field_order(self):
        violations = violations_for({"price": -5, "available": "yes", "imageUrl": "not a url"})

        assert fields_of(violations) == ["name", "description", "price", "available", "imageUrl"]

    def test_non_object_body(self):
        assert violations_for(["not", "an", "object"]) == [
            {"field": "body", "message": "body must be a JSON object"}
        ]

    @pytest.mark.parametrize("price", [0, -1, 100000.01, "12", True, None])
    def test_invalid_price(self, price):
        body = make_shoe_product(price=price)
        if price is None:
            body.pop("price", None)

        assert fields_of(violations_for(body)) == ["price"]

    def test_boolean_price_reports_type_only(self):
        violations = violations_for(make_shoe_product(price=True))

        assert violations == [{"field": "price", "message": "price must be a number"}]

    def test_available_must_be_strict_boolean(self):
        violations = violations_for(make_shoe_product(available=1))

        assert violations == [{"field": "available", "message": "available must be a boolean"}]

    def test_name_length_is_checked_after_trimming(self):
        assert fields_of(violations_for(make_shoe_product(name="   "))) == ["name"]
        assert fields_of(violations_for(make_shoe_product(name="x" * 101))) == ["name"]

    def test_image_url_or_media_required(self):
        violations = violations_for(make_shoe_product(imageUrl=None))

        assert violations == [{"field": "imageUrl", "message": "imageUrl or media is required"}]

    def test_each_bad_media_entry_is_reported(self):
        body = make_shoe_product(media=["https://cdn.example.com/a.png", "ftp://x", "nope"])

        violations = violations_for(body)

        assert [v["message"] for v in violations] == [
            "media[1] must be a valid URL",
            "media[2] must be a valid URL",
        ]

    def test_empty_media_list(self):
        assert fields_of(violations_for(make_shoe_product(media=[]))) == ["media"]

    def test_currency_must_be_known_symbol(self):
        assert fields_of(violations_for(make_shoe_product(currency="USD"))) == ["currency"]

    def test_colors_must_be_hex_like(self):
        violations = violations_for(make_shoe_product(colors=["#fff", "red"]))

        assert violations == [
            {"field": "colors", "message": "colors[1] must be a color code starting with '#'"}
        ]

    def test_review_count_must_be_non_negative_integer(self):
        assert fields_of(violations_for(make_shoe_product(reviewCount=-1))) == ["reviewCount"]
        assert fields_of(violations_for(make_shoe_product(reviewCount=1.5))) == ["reviewCount"]

    def test_review_count_upper_bound(self):
        assert fields_of(violations_for(make_shoe_product(reviewCount=10 ** 40))) == ["reviewCount"]
        assert validate_shoe_product(make_shoe_product(reviewCount=1000000000)).review_count == 1000000000

    def test_average_rating_range(self):
        assert fields_of(violations_for(make_shoe_product(averageRating=5.5))) == ["averageRating"]

    def test_not_finite_price(self):
        assert fields_of(violations_for(make_shoe_product(price=float("nan")))) == ["price"]


class TestPageSize:
    """Tests for the pageSize query parameter"""

    @pytest.mark.parametrize("raw,expected", [
        (None, 10),
        ("25", 25),
        ("500", 100),
        ("0", 10),
        ("-3", 10),
        ("abc", 10),
        ("", 10),
    ])
    def test_parse_page_size(self, raw, expected):
        assert parse_page_size(raw, default=10, maximum=100) == expected


class TestSortParameters:
    """Tests for sortBy / sortOrder"""

    def test_valid_values(self):
        assert validate_sort("price", "desc") == []
        assert validate_sort("id", "ASC") == []
        assert validate_sort(None, None) == []

    def test_invalid_values_are_both_reported(self):
        violations = validate_sort("color", "sideways")

        assert [v.field for v in violations] == ["sortBy", "sortOrder"]


class TestPaymentAmount:
    """Tests for the payment intent body"""

    def test_amount_is_returned_as_decimal(self):
        assert validate_payment_amount({"amount": 19.99}) == Decimal("19.99")

    @pytest.mark.parametrize("body", [{}, {"amount": 0}, {"amount": -4}, {"amount": "10"}, {"amount": False}, "10"])
    def test_invalid_amount(self, body):
        with pytest.raises(ValidationError):
            validate_payment_amount(body)

    @pytest.mark.parametrize("amount", [1e30, 1000000])
    def test_amount_above_processor_limit(self, amount):
        with pytest.raises(ValidationError) as exc_info:
            validate_payment_amount({"amount": amount})

        assert exc_info.value.violations == [
            {"field": "amount", "message": "amount must be greater than 0 and at most 999999.99"}
        ]

    def test_largest_amount_is_accepted(self):
        assert validate_payment_amount({"amount": 999999.99}) == Decimal("999999.99")
