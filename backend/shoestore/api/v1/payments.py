from fastapi import APIRouter, Request

from shoestore.api.v1.shoe_products import read_json_body
from shoestore.core.validation import validate_payment_amount
from shoestore.services import payment_service

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent")
async def create_payment_intent(request: Request):
    """
    Create a payment intent

    Body: {"amount": <positive number, major currency units>}
    Returns the client secret the frontend confirms the payment with.
    """
    body = await read_json_body(request)
    amount = validate_payment_amount(body)
    client_secret = await payment_service.create_payment_intent(amount)
    return {"data": {"clientSecret": client_secret}}
