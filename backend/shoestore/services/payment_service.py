import asyncio
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import stripe

from shoestore.core.config import settings
from shoestore.core.exceptions import ConfigurationError, PaymentError, ValidationError

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Major currency units to cents, rounding half up"""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    def __init__(self, api_key: Optional[str] = None, currency: Optional[str] = None):
        self._api_key = api_key
        self.currency = (currency or settings.PAYMENT_CURRENCY).lower()

    @property
    def api_key(self) -> str:
        api_key = self._api_key or settings.STRIPE_SECRET_KEY
        if not api_key:
            raise ConfigurationError(
                "Payment processor is not configured",
                {"setting": "STRIPE_SECRET_KEY"}
            )
        return api_key

    async def create_payment_intent(self, amount: Decimal) -> str:
        """
        Create a Stripe payment intent for ``amount`` in major units.

        Returns:
            The intent's client secret

        Raises:
            ValidationError: amount rounds to zero cents
            ConfigurationError: no Stripe secret key
            PaymentError: Stripe rejected or failed the request
        """
        amount_cents = to_minor_units(amount)
        if amount_cents < 1:
            raise ValidationError([{"field": "amount", "message": "amount must be at least 0.01"}])

        api_key = self.api_key

        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                amount=amount_cents,
                currency=self.currency,
                automatic_payment_methods={"enabled": True},
                api_key=api_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating payment intent: {e}")
            raise PaymentError(e.user_message or str(e) or type(e).__name__) from e

        logger.info(f"Payment intent created: {intent.id} ({amount_cents} {self.currency})")
        return intent.client_secret


# Global instance
payment_service = PaymentService()
