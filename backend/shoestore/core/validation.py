"""
Centralized Input Validation for the Shoe Store API

Provides:
- An ordered, collect-all rule abstraction (FieldRule / FieldSpec / RecordValidator)
- The fixed rule-set for shoe product records
- Query and payment parameter validation

Every field is checked in declaration order and every violation is
collected; callers get either the typed record or the complete list.

Usage:
    from shoestore.core.validation import validate_shoe_product

    fields = validate_shoe_product(body)   # raises ValidationError
"""

import math
import re
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from shoestore.core.exceptions import ValidationError
from shoestore.models.shoe_product import ShoeProductFields

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 1000
MAX_COMPANY_LENGTH = 100
MAX_URL_LENGTH = 2048
MAX_PRICE = 100000
MAX_RATING = 5
MAX_MEDIA_ITEMS = 10
MAX_COLORS = 20
MAX_REVIEW_COUNT = 1000000000

# Stripe caps a single charge at 999,999.99 in two-decimal currencies
MAX_PAYMENT_AMOUNT = 999999.99

ALLOWED_CURRENCIES = ("$", "€")

# "#" followed by 1-8 non-space characters (#fff, #1a2b3c, #1a2b3cff)
COLOR_REGEX = re.compile(r'^#\S{1,8}$')

SORT_FIELDS = ("price", "id")
SORT_ORDERS = ("asc", "desc")

_MISSING = object()


# =============================================================================
# Rule Abstraction
# =============================================================================

@dataclass(frozen=True)
class Violation:
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class FieldRule:
    """
    A single check on one field value.

    ``check`` returns message templates (``{field}`` is substituted with the
    field name); an empty list means the value passed. When ``halts`` is set
    a failure stops the remaining rules of the same field, which is how type
    rules guard the rules that assume the type.
    """
    check: Callable[[Any], List[str]]
    halts: bool = False


@dataclass(frozen=True)
class FieldSpec:
    name: str
    rules: Tuple[FieldRule, ...]
    required: bool = False


def _rule(predicate: Callable[[Any], bool], message: str, halts: bool = False) -> FieldRule:
    return FieldRule(lambda value: [] if predicate(value) else [message], halts)


class RecordValidator:
    """Applies FieldSpecs in order, then record-level rules, collecting everything"""

    def __init__(
        self,
        specs: Sequence[FieldSpec],
        record_rules: Sequence[Callable[[Dict[str, Any]], Optional[Violation]]] = ()
    ):
        self.specs = tuple(specs)
        self.record_rules = tuple(record_rules)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.specs)

    def validate(self, data: Any) -> List[Violation]:
        if not isinstance(data, dict):
            return [Violation("body", "body must be a JSON object")]

        violations: List[Violation] = []
        for spec in self.specs:
            value = data.get(spec.name, _MISSING)
            if value is _MISSING or value is None:
                if spec.required:
                    violations.append(Violation(spec.name, f"{spec.name} is a required field"))
                continue

            for rule in spec.rules:
                messages = rule.check(value)
                violations.extend(
                    Violation(spec.name, message.replace("{field}", spec.name))
                    for message in messages
                )
                if messages and rule.halts:
                    break

        for record_rule in self.record_rules:
            violation = record_rule(data)
            if violation is not None:
                violations.append(violation)

        return violations


# =============================================================================
# Rule Builders
# =============================================================================

def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def is_valid_url(value: str) -> bool:
    """Absolute http(s) URL with a host"""
    if not isinstance(value, str) or len(value) > MAX_URL_LENGTH or any(c.isspace() for c in value):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def string() -> FieldRule:
    return _rule(lambda v: isinstance(v, str), "{field} must be a string", halts=True)


def number() -> FieldRule:
    return _rule(_is_number, "{field} must be a number", halts=True)


def integer() -> FieldRule:
    return _rule(
        lambda v: _is_number(v) and (isinstance(v, int) or v == int(v)),
        "{field} must be an integer",
        halts=True
    )


def boolean() -> FieldRule:
    return _rule(lambda v: isinstance(v, bool), "{field} must be a boolean", halts=True)


def string_list() -> FieldRule:
    return _rule(
        lambda v: isinstance(v, list) and all(isinstance(item, str) for item in v),
        "{field} must be a list of strings",
        halts=True
    )


def length(min_length: int, max_length: int) -> FieldRule:
    return _rule(
        lambda v: min_length <= len(v.strip()) <= max_length,
        f"{{field}} must be between {min_length} and {max_length} characters"
    )


def item_count(min_items: int, max_items: int) -> FieldRule:
    return _rule(
        lambda v: min_items <= len(v) <= max_items,
        f"{{field}} must contain between {min_items} and {max_items} items"
    )


def between(minimum, maximum, exclusive_min: bool = False) -> FieldRule:
    if exclusive_min:
        return _rule(
            lambda v: minimum < v <= maximum,
            f"{{field}} must be greater than {minimum} and at most {maximum}"
        )
    return _rule(
        lambda v: minimum <= v <= maximum,
        f"{{field}} must be between {minimum} and {maximum}"
    )


def one_of(choices: Sequence[str]) -> FieldRule:
    return _rule(
        lambda v: v in choices,
        "{field} must be one of the following values: " + ", ".join(choices)
    )


def url() -> FieldRule:
    return _rule(is_valid_url, "{field} must be a valid URL")


def each(predicate: Callable[[Any], bool], message: str) -> FieldRule:
    """Check every list element; one message per failing element"""
    def check(values: List[Any]) -> List[str]:
        return [
            message.replace("{field}", f"{{field}}[{index}]")
            for index, value in enumerate(values)
            if not predicate(value)
        ]
    return FieldRule(check)


def _requires_image(data: Dict[str, Any]) -> Optional[Violation]:
    if data.get("imageUrl") is None and data.get("media") is None:
        return Violation("imageUrl", "imageUrl or media is required")
    return None


# =============================================================================
# Shoe Product Rule-Set
# =============================================================================

SHOE_PRODUCT_VALIDATOR = RecordValidator(
    specs=[
        FieldSpec("name", (string(), length(1, MAX_NAME_LENGTH)), required=True),
        FieldSpec("description", (string(), length(1, MAX_DESCRIPTION_LENGTH)), required=True),
        FieldSpec("price", (number(), between(0, MAX_PRICE, exclusive_min=True)), required=True),
        FieldSpec("available", (boolean(),), required=True),
        FieldSpec("imageUrl", (string(), url())),
        FieldSpec("media", (
            string_list(),
            item_count(1, MAX_MEDIA_ITEMS),
            each(is_valid_url, "{field} must be a valid URL"),
        )),
        FieldSpec("company", (string(), length(1, MAX_COMPANY_LENGTH))),
        FieldSpec("currency", (string(), one_of(ALLOWED_CURRENCIES))),
        FieldSpec("colors", (
            string_list(),
            item_count(0, MAX_COLORS),
            each(lambda v: bool(COLOR_REGEX.match(v)), "{field} must be a color code starting with '#'"),
        )),
        FieldSpec("reviewCount", (integer(), between(0, MAX_REVIEW_COUNT))),
        FieldSpec("averageRating", (number(), between(0, MAX_RATING))),
        FieldSpec("featured", (boolean(),)),
    ],
    record_rules=[_requires_image],
)


def validate_shoe_product(data: Any) -> ShoeProductFields:
    """
    Validate an untyped request body against the shoe product rule-set.

    Args:
        data: Parsed JSON body

    Returns:
        The accepted typed record; fields outside the rule-set are dropped

    Raises:
        ValidationError: with every violation, in rule order
    """
    violations = SHOE_PRODUCT_VALIDATOR.validate(data)
    if violations:
        logger.info(f"Shoe product rejected with {len(violations)} violation(s)")
        raise ValidationError([v.to_dict() for v in violations])

    accepted = {
        name: data[name]
        for name in SHOE_PRODUCT_VALIDATOR.field_names
        if data.get(name) is not None
    }
    return ShoeProductFields.model_validate(accepted)


# =============================================================================
# Query / Payment Parameters
# =============================================================================

def parse_page_size(raw: Optional[str], default: int, maximum: int) -> int:
    """
    Page size from a query string value.
    Missing, non-numeric or non-positive values fall back to the default.
    """
    if raw is None:
        return default
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return default
    if value <= 0:
        return default
    return min(value, maximum)


def validate_sort(sort_by: Optional[str], sort_order: Optional[str]) -> List[Violation]:
    violations = []
    if sort_by is not None and sort_by not in SORT_FIELDS:
        violations.append(Violation(
            "sortBy", "sortBy must be one of the following values: " + ", ".join(SORT_FIELDS)
        ))
    if sort_order is not None and sort_order.lower() not in SORT_ORDERS:
        violations.append(Violation(
            "sortOrder", "sortOrder must be one of the following values: " + ", ".join(SORT_ORDERS)
        ))
    return violations


PAYMENT_VALIDATOR = RecordValidator(
    specs=[
        FieldSpec("amount", (number(), between(0, MAX_PAYMENT_AMOUNT, exclusive_min=True)), required=True),
    ],
)


def validate_payment_amount(data: Any) -> Decimal:
    """Positive amount in major currency units"""
    violations = PAYMENT_VALIDATOR.validate(data)
    if violations:
        raise ValidationError([v.to_dict() for v in violations])
    return Decimal(str(data["amount"]))
