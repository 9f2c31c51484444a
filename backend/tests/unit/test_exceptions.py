"""
Unit Tests for Exception Handling

Tests for:
- Exception classes (status codes, error codes, details)
- Error response envelope
- Request id propagation into error bodies
"""

import json

import pytest

from shoestore.core.exceptions import (
    ConfigurationError,
    DatabaseError,
    MalformedBodyError,
    PaymentError,
    ShoeProductNotFoundError,
    ValidationError,
    create_error_response,
    raise_database_error,
)
from shoestore.core.logging_config import set_request_id


class TestExceptionClasses:
    """Tests for status and error code mapping"""

    @pytest.mark.parametrize("error,status_code,error_code", [
        (ValidationError([{"field": "name", "message": "name is a required field"}]), 400, "VALIDATION_ERROR"),
        (MalformedBodyError("Expecting value: line 1 column 1 (char 0)"), 400, "MALFORMED_BODY"),
        (ShoeProductNotFoundError("abc"), 404, "SHOE_PRODUCT_NOT_FOUND"),
        (DatabaseError(), 500, "DATABASE_ERROR"),
        (PaymentError("card_declined"), 502, "EXTERNAL_SERVICE_ERROR"),
        (ConfigurationError(), 500, "CONFIG_ERROR"),
    ])
    def test_status_and_error_code(self, error, status_code, error_code):
        assert error.status_code == status_code
        assert error.error_code == error_code

    def test_malformed_body_message(self):
        error = MalformedBodyError("Expecting value")

        assert error.message == 'invalid request body format : "Expecting value"'

    def test_validation_error_carries_violations(self):
        violations = [{"field": "price", "message": "price must be a number"}]

        error = ValidationError(violations)

        assert error.details == {"violations": violations}

    def test_raise_database_error_includes_context(self):
        with pytest.raises(DatabaseError) as exc_info:
            raise_database_error("scan", "ShoeProductsTable", RuntimeError("boom"))

        assert exc_info.value.details == {
            "operation": "scan",
            "table": "ShoeProductsTable",
            "original_error": "boom",
        }


class TestErrorResponse:
    """Tests for the JSON error envelope"""

    def test_envelope_shape(self):
        set_request_id("req-123")
        try:
            response = create_error_response(ShoeProductNotFoundError("abc"))
        finally:
            set_request_id(None)

        body = json.loads(response.body)
        assert response.status_code == 404
        assert body["success"] is False
        assert body["error"]["code"] == "SHOE_PRODUCT_NOT_FOUND"
        assert body["error"]["details"] == {"shoe_product_id": "abc"}
        assert body["request_id"] == "req-123"
        assert "timestamp" in body

    def test_unknown_request_id(self):
        body = json.loads(create_error_response(DatabaseError()).body)

        assert body["request_id"] == "unknown"
